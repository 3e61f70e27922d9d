"""Request/response schemas for orders."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import OrderStatus

OrderSortField = Literal["order_date", "total_amount", "status", "order_number", "created_at"]


class CreateOrderRequest(BaseModel):
    """New order for the authenticated user. Amount checks happen in the order service."""

    total_amount: Decimal = Field(..., description="Positive amount, at most two decimals")
    delivery_address: str | None = Field(default=None, max_length=500)
    notes: str | None = Field(default=None, max_length=1000)


class UpdateOrderRequest(BaseModel):
    """Partial update: omitted fields are left unchanged. status is honoured for admins only."""

    total_amount: Decimal | None = None
    delivery_address: str | None = Field(default=None, max_length=500)
    notes: str | None = Field(default=None, max_length=1000)
    status: OrderStatus | None = None


class StatusUpdateRequest(BaseModel):
    """Admin status overwrite."""

    status: OrderStatus


class OrderResponse(BaseModel):
    """Order as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    user_id: int
    username: str
    total_amount: Decimal
    status: OrderStatus
    order_date: datetime
    delivery_address: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            username=order.user.username,
            total_amount=order.total_amount,
            status=order.status,
            order_date=order.order_date,
            delivery_address=order.delivery_address,
            notes=order.notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
