"""Persistence stores: thin query/save wrappers over a SQLAlchemy Session."""

from app.stores.order_store import OrderStore
from app.stores.user_store import UserStore

__all__ = ["OrderStore", "UserStore"]
