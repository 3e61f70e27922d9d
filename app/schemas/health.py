"""Health probe response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus the dependencies the API cannot serve without."""

    status: Literal["ok", "degraded"]
    version: str
    environment: str = Field(description="APP_ENV the process runs with (dev or prod)")
    database: Literal["connected", "disconnected"]
    roles_seeded: bool = Field(description="USER and ADMIN role rows are present")
