"""Response schemas for admin statistics."""

from pydantic import BaseModel


class UserStats(BaseModel):
    total: int
    active: int
    inactive: int


class OrderStats(BaseModel):
    total: int
    pending: int
    confirmed: int
    processing: int
    shipped: int
    delivered: int
    cancelled: int


class SystemStats(BaseModel):
    """Counts of users and orders for GET /admin/stats."""

    users: UserStats
    orders: OrderStats


class DashboardSummary(BaseModel):
    """Quick numbers for GET /admin/dashboard."""

    total_users: int
    active_users: int
    total_orders: int
    pending_orders: int
