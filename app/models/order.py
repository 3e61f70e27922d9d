"""ORM model for customer orders."""

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin, utcnow
from app.models.enums import OrderStatus


class Order(TimestampMixin, Base):
    """
    An order placed by exactly one user. Ownership never changes.

    order_number is generated at creation and unique across all orders.
    """

    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("total_amount > 0", name="ck_orders_total_amount_positive"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_number = Column(String(20), nullable=False, unique=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(
        Enum(OrderStatus, native_enum=False, length=20),
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )
    order_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    delivery_address = Column(String(500), nullable=True)
    notes = Column(String(1000), nullable=True)

    user = relationship("User", back_populates="orders", lazy="joined")
