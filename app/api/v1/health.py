"""GET /health/: database reachability and role seeding, for load balancers and monitoring."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app import __version__
from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse
from app.services.roles import roles_seeded

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(response: Response, db: Session = Depends(get_db)) -> HealthResponse:
    """200 with status ok when the database answers and roles exist, else 503 degraded."""
    connected = check_db_connected(db)
    seeded = connected and roles_seeded(db)
    if not seeded:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(
        status="ok" if seeded else "degraded",
        version=__version__,
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
        roles_seeded=seeded,
    )
