"""
Order lifecycle: creation, partial updates, status changes, cancellation and deletion.

States and allowed transitions:

    PENDING    -> CONFIRMED, CANCELLED
    CONFIRMED  -> PROCESSING, CANCELLED
    PROCESSING -> SHIPPED, CANCELLED
    SHIPPED    -> DELIVERED, CANCELLED
    DELIVERED, CANCELLED: terminal

modify() and cancel() enforce the table. set_status() (admin-only) overwrites the
status unconditionally unless ORDER_STATUS_ENFORCE_TRANSITIONS is enabled; illegal
jumps taken on that path are logged.
"""

import logging
import time
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from app.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from app.models import Order, OrderStatus
from app.schemas.auth import AuthClaims
from app.schemas.order import UpdateOrderRequest
from app.services.authorization import is_admin, require_owner_or_admin
from app.stores import OrderStore, UserStore

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX = "ORD"
MAX_AMOUNT = Decimal("99999999.99")
MAX_ADDRESS_LEN = 500
MAX_NOTES_LEN = 1000
ORDER_NUMBER_ATTEMPTS = 5

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

MODIFIABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})
TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def is_modifiable(status: OrderStatus) -> bool:
    return status in MODIFIABLE_STATUSES


def is_cancellable(status: OrderStatus) -> bool:
    return status not in TERMINAL_STATUSES


def generate_order_number() -> str:
    """ORD-<last 6 digits of epoch millis>-<8 random hex chars>, e.g. ORD-482913-9F1C2A7B."""
    millis = str(time.time_ns() // 1_000_000)
    suffix = uuid.uuid4().hex[:8].upper()
    return f"{ORDER_NUMBER_PREFIX}-{millis[-6:]}-{suffix}"


def validate_amount(value: Any, field: str = "total_amount") -> Decimal:
    """Return value as a two-decimal Decimal; raise ValidationFailedError if not a positive amount."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationFailedError(
            "Validation failed", [f"{field}: must be a decimal number"]
        ) from None
    if not amount.is_finite():
        raise ValidationFailedError("Validation failed", [f"{field}: must be a decimal number"])
    if amount <= 0:
        raise ValidationFailedError("Validation failed", [f"{field}: must be greater than 0"])
    # bound the magnitude first; quantize fails once the digits exceed the context precision
    if amount > MAX_AMOUNT:
        raise ValidationFailedError(
            "Validation failed", [f"{field}: must not exceed {MAX_AMOUNT}"]
        )
    if amount.as_tuple().exponent < -2 and amount != amount.quantize(Decimal("0.01")):
        raise ValidationFailedError(
            "Validation failed", [f"{field}: at most 2 decimal places allowed"]
        )
    return amount.quantize(Decimal("0.01"))


def _validate_text(value: str | None, field: str, max_len: int) -> list[str]:
    if value is not None and len(value) > max_len:
        return [f"{field}: must not exceed {max_len} characters"]
    return []


class OrderService:
    """Order operations. Guarded operations take the caller's verified claims explicitly."""

    def __init__(
        self,
        orders: OrderStore,
        users: UserStore,
        settings: "Settings",
        order_number_factory: Callable[[], str] = generate_order_number,
    ) -> None:
        self.orders = orders
        self.users = users
        self.settings = settings
        self._new_order_number = order_number_factory

    def _get(self, order_id: int) -> Order:
        order = self.orders.find_by_id(order_id)
        if order is None:
            raise NotFoundError("Order", "id", order_id)
        return order

    def _allocate_order_number(self) -> str:
        for _ in range(ORDER_NUMBER_ATTEMPTS):
            candidate = self._new_order_number()
            if not self.orders.exists_by_order_number(candidate):
                return candidate
            logger.warning("Order number %s already taken; generating another", candidate)
        raise ConflictError("Could not allocate a unique order number")

    def create(
        self,
        claims: AuthClaims,
        total_amount: Any,
        delivery_address: str | None = None,
        notes: str | None = None,
    ) -> Order:
        """Place a PENDING order owned by the caller."""
        amount = validate_amount(total_amount)
        errors = _validate_text(delivery_address, "delivery_address", MAX_ADDRESS_LEN)
        errors += _validate_text(notes, "notes", MAX_NOTES_LEN)
        if errors:
            raise ValidationFailedError("Validation failed", errors)

        owner = self.users.find_by_id(claims.id)
        if owner is None:
            raise NotFoundError("User", "id", claims.id)

        order = Order(
            order_number=self._allocate_order_number(),
            user_id=owner.id,
            total_amount=amount,
            status=OrderStatus.PENDING,
            order_date=datetime.now(UTC),
            delivery_address=delivery_address,
            notes=notes,
        )
        order = self.orders.save(order)
        logger.info("Created order %s (id=%s) for user id=%s", order.order_number, order.id, owner.id)
        return order

    def get(self, claims: AuthClaims, order_id: int) -> Order:
        """Fetch an order the caller owns (admins may fetch any)."""
        order = self._get(order_id)
        require_owner_or_admin(claims, order.user_id)
        return order

    def list_mine(
        self,
        claims: AuthClaims,
        page: int,
        size: int,
        sort_by: str = "order_date",
        sort_dir: str = "desc",
    ) -> tuple[list[Order], int]:
        return self.orders.find_by_user_id(claims.id, page, size, sort_by, sort_dir)

    def list_all(
        self, page: int, size: int, sort_by: str = "order_date", sort_dir: str = "desc"
    ) -> tuple[list[Order], int]:
        return self.orders.find_all(page, size, sort_by, sort_dir)

    def list_by_status(
        self, status: OrderStatus, page: int, size: int
    ) -> tuple[list[Order], int]:
        return self.orders.find_by_status(status, page, size)

    def search(self, term: str, page: int, size: int) -> tuple[list[Order], int]:
        return self.orders.search(term, page, size)

    def modify(self, claims: AuthClaims, order_id: int, changes: UpdateOrderRequest) -> Order:
        """
        Partial update by the owner or an admin while the order is PENDING or CONFIRMED.

        Only fields present in the request are touched. A null total_amount or status
        counts as omitted; a null delivery_address or notes clears it. status is applied
        for admins only and must be an allowed transition.
        """
        order = self._get(order_id)
        require_owner_or_admin(
            claims, order.user_id, "You don't have permission to modify this order"
        )
        if not is_modifiable(order.status):
            raise ConflictError(
                f"Order cannot be modified in current status: {order.status.value}"
            )

        fields = changes.model_dump(exclude_unset=True)
        errors: list[str] = []
        if "delivery_address" in fields:
            errors += _validate_text(fields["delivery_address"], "delivery_address", MAX_ADDRESS_LEN)
        if "notes" in fields:
            errors += _validate_text(fields["notes"], "notes", MAX_NOTES_LEN)
        if errors:
            raise ValidationFailedError("Validation failed", errors)

        amount = None
        if fields.get("total_amount") is not None:
            amount = validate_amount(fields["total_amount"])

        new_status = fields.get("status")
        if new_status == order.status:
            new_status = None
        if new_status is not None:
            if not is_admin(claims):
                logger.warning(
                    "Ignoring status change on order id=%s by non-admin user id=%s",
                    order_id,
                    claims.id,
                )
                new_status = None
            elif not can_transition(order.status, new_status):
                raise ConflictError(
                    f"Illegal status transition: {order.status.value} -> {new_status.value}"
                )

        if amount is not None:
            order.total_amount = amount
        if "delivery_address" in fields:
            order.delivery_address = fields["delivery_address"]
        if "notes" in fields:
            order.notes = fields["notes"]
        if new_status is not None:
            order.status = new_status

        order = self.orders.save(order)
        logger.info("Updated order id=%s", order_id)
        return order

    def set_status(self, order_id: int, new_status: OrderStatus) -> Order:
        """
        Admin status overwrite.

        Does not consult the transition table unless ORDER_STATUS_ENFORCE_TRANSITIONS
        is set, so e.g. PENDING -> SHIPPED is accepted by default.
        """
        order = self._get(order_id)
        current = order.status
        if current != new_status and not can_transition(current, new_status):
            if self.settings.ORDER_STATUS_ENFORCE_TRANSITIONS:
                raise ConflictError(
                    f"Illegal status transition: {current.value} -> {new_status.value}"
                )
            logger.warning(
                "Order id=%s status overwritten outside the transition table: %s -> %s",
                order_id,
                current.value,
                new_status.value,
            )
        order.status = new_status
        order = self.orders.save(order)
        logger.info("Order id=%s status set to %s", order_id, new_status.value)
        return order

    def cancel(self, claims: AuthClaims, order_id: int) -> Order:
        """Cancel a non-terminal order. Owner or admin only."""
        order = self._get(order_id)
        require_owner_or_admin(
            claims, order.user_id, "You don't have permission to cancel this order"
        )
        if not is_cancellable(order.status):
            raise ConflictError(
                f"Order cannot be cancelled in current status: {order.status.value}"
            )
        order.status = OrderStatus.CANCELLED
        order = self.orders.save(order)
        logger.info("Cancelled order id=%s", order_id)
        return order

    def delete(self, order_id: int) -> None:
        """Hard delete regardless of status (admin-only at the API)."""
        if not self.orders.delete_by_id(order_id):
            raise NotFoundError("Order", "id", order_id)
        logger.warning("Deleted order id=%s", order_id)
