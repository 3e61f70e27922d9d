"""Pydantic request/response schemas."""

from app.schemas.admin import DashboardSummary, OrderStats, SystemStats, UserStats
from app.schemas.auth import (
    AdminRegistrationRequest,
    AuthClaims,
    AuthResponse,
    LoginRequest,
    RegisterRequest,
)
from app.schemas.common import Page, SortDirection
from app.schemas.errors import ErrorResponse
from app.schemas.health import HealthResponse
from app.schemas.order import (
    CreateOrderRequest,
    OrderResponse,
    OrderSortField,
    StatusUpdateRequest,
    UpdateOrderRequest,
)
from app.schemas.user import UserResponse, UserUpdateRequest

__all__ = [
    "AdminRegistrationRequest",
    "AuthClaims",
    "AuthResponse",
    "CreateOrderRequest",
    "DashboardSummary",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "OrderResponse",
    "OrderSortField",
    "OrderStats",
    "Page",
    "RegisterRequest",
    "SortDirection",
    "StatusUpdateRequest",
    "SystemStats",
    "UpdateOrderRequest",
    "UserResponse",
    "UserStats",
    "UserUpdateRequest",
]
