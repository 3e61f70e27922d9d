"""Order store: lookups, paged listings and saves for orders."""

import logging

from sqlalchemy import asc, desc, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, ValidationFailedError
from app.models import Order, OrderStatus
from app.stores.pagination import like_pattern, paginate

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "order_date": Order.order_date,
    "total_amount": Order.total_amount,
    "status": Order.status,
    "order_number": Order.order_number,
    "created_at": Order.created_at,
}
SORT_DIRECTIONS = {"asc": asc, "desc": desc}


class OrderStore:
    """Orders persisted through one Session; listings default to newest first."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_id(self, order_id: int) -> Order | None:
        return self.session.get(Order, order_id)

    def exists_by_order_number(self, order_number: str) -> bool:
        query = self.session.query(Order.id).filter(Order.order_number == order_number)
        return self.session.query(query.exists()).scalar()

    def _newest_first(self):
        return self.session.query(Order).order_by(Order.order_date.desc(), Order.id.desc())

    def _sorted(self, sort_by: str, sort_dir: str):
        column = SORT_COLUMNS.get(sort_by)
        direction = SORT_DIRECTIONS.get(sort_dir.lower())
        errors = []
        if column is None:
            errors.append(f"sort_by: must be one of {', '.join(SORT_COLUMNS)}")
        if direction is None:
            errors.append("sort_dir: must be asc or desc")
        if errors:
            raise ValidationFailedError("Validation failed", errors)
        # id breaks ties so pages stay stable
        return self.session.query(Order).order_by(direction(column), direction(Order.id))

    def find_all(
        self, page: int, size: int, sort_by: str = "order_date", sort_dir: str = "desc"
    ) -> tuple[list[Order], int]:
        return paginate(self._sorted(sort_by, sort_dir), page, size)

    def find_by_user_id(
        self,
        user_id: int,
        page: int,
        size: int,
        sort_by: str = "order_date",
        sort_dir: str = "desc",
    ) -> tuple[list[Order], int]:
        query = self._sorted(sort_by, sort_dir).filter(Order.user_id == user_id)
        return paginate(query, page, size)

    def find_by_status(
        self, status: OrderStatus, page: int, size: int
    ) -> tuple[list[Order], int]:
        return paginate(self._newest_first().filter(Order.status == status), page, size)

    def search(self, term: str, page: int, size: int) -> tuple[list[Order], int]:
        """Match term against order number and delivery address (case-insensitive)."""
        pattern = like_pattern(term)
        query = self._newest_first().filter(
            or_(
                func.lower(Order.order_number).like(pattern, escape="\\"),
                func.lower(Order.delivery_address).like(pattern, escape="\\"),
            )
        )
        return paginate(query, page, size)

    def count(self) -> int:
        return self.session.query(func.count(Order.id)).scalar() or 0

    def count_by_status(self, status: OrderStatus) -> int:
        return (
            self.session.query(func.count(Order.id)).filter(Order.status == status).scalar()
            or 0
        )

    def save(self, order: Order) -> Order:
        """Insert or update an order and commit. Raises ConflictError on a duplicate order number."""
        self.session.add(order)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("Order save rejected by uniqueness constraint: %s", e.orig)
            raise ConflictError(f"Order number already exists: {order.order_number}") from e
        self.session.refresh(order)
        return order

    def delete_by_id(self, order_id: int) -> bool:
        """Hard-delete an order. Returns False when no such order exists."""
        order = self.session.get(Order, order_id)
        if order is None:
            return False
        self.session.delete(order)
        self.session.commit()
        return True
