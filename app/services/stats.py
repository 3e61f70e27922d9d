"""Aggregate counts for the admin statistics and dashboard endpoints."""

from app.models import OrderStatus
from app.schemas.admin import DashboardSummary, OrderStats, SystemStats, UserStats
from app.stores import OrderStore, UserStore


def system_stats(users: UserStore, orders: OrderStore) -> SystemStats:
    total_users = users.count()
    active_users = users.count_active()
    return SystemStats(
        users=UserStats(
            total=total_users,
            active=active_users,
            inactive=total_users - active_users,
        ),
        orders=OrderStats(
            total=orders.count(),
            **{status.value.lower(): orders.count_by_status(status) for status in OrderStatus},
        ),
    )


def dashboard(users: UserStore, orders: OrderStore) -> DashboardSummary:
    return DashboardSummary(
        total_users=users.count(),
        active_users=users.count_active(),
        total_orders=orders.count(),
        pending_orders=orders.count_by_status(OrderStatus.PENDING),
    )
