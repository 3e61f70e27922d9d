"""FastAPI application entrypoint. No business logic; only wiring, middleware and startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import __version__
from app.api.v1 import router as v1_router
from app.core.config import settings
from app.core.database import SessionLocal, engine
from app.core.errors import register_exception_handlers
from app.core.logging import configure_logging
from app.models import Base
from app.services.roles import seed_roles

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and seed the fixed roles before serving requests."""
    configure_logging(settings.LOG_LEVEL)
    if settings.DATABASE_URL.startswith("sqlite"):
        # No migrations for local SQLite runs; Postgres schemas come from Alembic
        Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_roles(db)
    finally:
        db.close()
    logger.info("Application started (env=%s, version=%s)", settings.APP_ENV, __version__)
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="User & Order Management API",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "User & Order Management API"}
