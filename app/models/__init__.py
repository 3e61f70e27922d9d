"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.enums import OrderStatus, RoleName
from app.models.order import Order
from app.models.user import Role, User, user_roles

__all__ = ["Base", "Order", "OrderStatus", "Role", "RoleName", "User", "user_roles"]
