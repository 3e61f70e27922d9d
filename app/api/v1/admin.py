"""Admin statistics endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin
from app.core.database import get_db
from app.schemas.admin import DashboardSummary, SystemStats
from app.schemas.auth import AuthClaims
from app.services import stats
from app.stores import OrderStore, UserStore

router = APIRouter()


@router.get("/stats", response_model=SystemStats)
def get_system_stats(
    _admin: Annotated[AuthClaims, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SystemStats:
    """User counts and order counts per status."""
    return stats.system_stats(UserStore(db), OrderStore(db))


@router.get("/dashboard", response_model=DashboardSummary)
def get_dashboard(
    _admin: Annotated[AuthClaims, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> DashboardSummary:
    return stats.dashboard(UserStore(db), OrderStore(db))
