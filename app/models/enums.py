"""Closed enumerations shared by ORM models, schemas and services."""

import enum


class RoleName(str, enum.Enum):
    """Roles a user can hold. Seeded at startup, never created by users."""

    USER = "USER"
    ADMIN = "ADMIN"


class OrderStatus(str, enum.Enum):
    """Order lifecycle states; see app.services.orders for the transition table."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
