"""Order endpoints. Routing and marshaling only; rules live in app.services.orders."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_claims, get_user_store, page_params, require_admin
from app.core.config import get_settings
from app.core.database import get_db
from app.models import OrderStatus
from app.schemas.auth import AuthClaims
from app.schemas.common import Page, SortDirection
from app.schemas.order import (
    CreateOrderRequest,
    OrderResponse,
    OrderSortField,
    StatusUpdateRequest,
    UpdateOrderRequest,
)
from app.services.orders import OrderService
from app.stores import OrderStore, UserStore

router = APIRouter()


def get_order_service(
    db: Annotated[Session, Depends(get_db)],
    users: Annotated[UserStore, Depends(get_user_store)],
) -> OrderService:
    return OrderService(OrderStore(db), users, get_settings())


def sort_params(
    sort_by: Annotated[OrderSortField, Query(description="Field to sort by")] = "order_date",
    sort_dir: Annotated[SortDirection, Query(description="asc or desc")] = "desc",
) -> tuple[str, str]:
    return sort_by, sort_dir


def _page(items, page: int, size: int, total: int) -> Page[OrderResponse]:
    return Page[OrderResponse].build(
        [OrderResponse.from_order(o) for o in items], page, size, total
    )


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    body: CreateOrderRequest,
    claims: Annotated[AuthClaims, Depends(get_current_claims)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> OrderResponse:
    """Place an order for the authenticated user. It starts as PENDING."""
    order = service.create(claims, body.total_amount, body.delivery_address, body.notes)
    return OrderResponse.from_order(order)


@router.get("/my-orders", response_model=Page[OrderResponse])
def my_orders(
    claims: Annotated[AuthClaims, Depends(get_current_claims)],
    service: Annotated[OrderService, Depends(get_order_service)],
    paging: Annotated[tuple[int, int], Depends(page_params)],
    sorting: Annotated[tuple[str, str], Depends(sort_params)],
) -> Page[OrderResponse]:
    page, size = paging
    items, total = service.list_mine(claims, page, size, *sorting)
    return _page(items, page, size, total)


@router.get("/status/{order_status}", response_model=Page[OrderResponse])
def orders_by_status(
    order_status: OrderStatus,
    _admin: Annotated[AuthClaims, Depends(require_admin)],
    service: Annotated[OrderService, Depends(get_order_service)],
    paging: Annotated[tuple[int, int], Depends(page_params)],
) -> Page[OrderResponse]:
    page, size = paging
    items, total = service.list_by_status(order_status, page, size)
    return _page(items, page, size, total)


@router.get("/search", response_model=Page[OrderResponse])
def search_orders(
    q: Annotated[str, Query(min_length=1, max_length=100, description="Order number or address fragment")],
    _admin: Annotated[AuthClaims, Depends(require_admin)],
    service: Annotated[OrderService, Depends(get_order_service)],
    paging: Annotated[tuple[int, int], Depends(page_params)],
) -> Page[OrderResponse]:
    page, size = paging
    items, total = service.search(q, page, size)
    return _page(items, page, size, total)


@router.get("", response_model=Page[OrderResponse])
def all_orders(
    _admin: Annotated[AuthClaims, Depends(require_admin)],
    service: Annotated[OrderService, Depends(get_order_service)],
    paging: Annotated[tuple[int, int], Depends(page_params)],
    sorting: Annotated[tuple[str, str], Depends(sort_params)],
) -> Page[OrderResponse]:
    """List every order (admin only), newest first unless sort_by/sort_dir say otherwise."""
    page, size = paging
    items, total = service.list_all(page, size, *sorting)
    return _page(items, page, size, total)


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    claims: Annotated[AuthClaims, Depends(get_current_claims)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> OrderResponse:
    return OrderResponse.from_order(service.get(claims, order_id))


@router.put("/{order_id}", response_model=OrderResponse)
def update_order(
    order_id: int,
    body: UpdateOrderRequest,
    claims: Annotated[AuthClaims, Depends(get_current_claims)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> OrderResponse:
    """Partially update a PENDING or CONFIRMED order (owner or admin)."""
    return OrderResponse.from_order(service.modify(claims, order_id, body))


@router.patch("/{order_id}/status", response_model=OrderResponse)
def set_order_status(
    order_id: int,
    body: StatusUpdateRequest,
    _admin: Annotated[AuthClaims, Depends(require_admin)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> OrderResponse:
    """Overwrite an order's status (admin only)."""
    return OrderResponse.from_order(service.set_status(order_id, body.status))


@router.delete("/{order_id}/cancel", status_code=status.HTTP_204_NO_CONTENT)
def cancel_order(
    order_id: int,
    claims: Annotated[AuthClaims, Depends(get_current_claims)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> None:
    service.cancel(claims, order_id)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(
    order_id: int,
    _admin: Annotated[AuthClaims, Depends(require_admin)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> None:
    """Hard-delete an order regardless of status (admin only)."""
    service.delete(order_id)
