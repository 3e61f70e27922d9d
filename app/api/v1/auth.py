"""Login, registration, admin bootstrap, and auth dependencies (get_current_claims, require_admin)."""

from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.exceptions import UnauthorizedError
from app.models import RoleName
from app.schemas.auth import (
    AdminRegistrationRequest,
    AuthClaims,
    AuthResponse,
    LoginRequest,
    RegisterRequest,
)
from app.schemas.user import UserResponse
from app.services import users as user_service
from app.services.admin_bootstrap import register_admin
from app.services.authorization import require_role
from app.services.tokens import TokenService
from app.stores import UserStore

router = APIRouter()
security = HTTPBearer(auto_error=False)


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide token service built once from settings."""
    return TokenService.from_settings(get_settings())


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    return UserStore(db)


def get_optional_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthClaims | None:
    """Claims for a presented bearer token, or None when no token was sent.

    A token that is present but invalid or expired is still rejected with 401.
    """
    if credentials is None:
        return None
    return tokens.verify(credentials.credentials)


def get_current_claims(
    claims: Annotated[AuthClaims | None, Depends(get_optional_claims)],
) -> AuthClaims:
    """Dependency: require a valid Bearer JWT. Raises 401 if missing or invalid."""
    if claims is None:
        raise UnauthorizedError("Not authenticated")
    return claims


def require_admin(
    claims: Annotated[AuthClaims, Depends(get_current_claims)],
) -> AuthClaims:
    """Dependency: require role ADMIN. Raises 403 for non-admin."""
    return require_role(claims, RoleName.ADMIN)


def page_params(
    page: Annotated[int, Query(ge=0, description="Zero-based page number")] = 0,
    size: Annotated[int | None, Query(ge=1, description="Page size")] = None,
) -> tuple[int, int]:
    """(page, size) with size defaulted and capped by settings."""
    settings = get_settings()
    effective = size or settings.DEFAULT_PAGE_SIZE
    return page, min(effective, settings.MAX_PAGE_SIZE)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    store: Annotated[UserStore, Depends(get_user_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthResponse:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    issued = tokens.issue(store, body.username, body.password)
    claims = issued.claims
    return AuthResponse(
        access_token=issued.token,
        token_type="Bearer",
        expires_at=claims.expires_at,
        user_id=claims.id,
        username=claims.username,
        email=claims.email,
        roles=sorted(claims.roles),
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    store: Annotated[UserStore, Depends(get_user_store)],
) -> UserResponse:
    """Create a regular account (role USER)."""
    user = user_service.register_user(store, body)
    return UserResponse.model_validate(user)


@router.post(
    "/register-admin", response_model=UserResponse, status_code=status.HTTP_201_CREATED
)
def register_admin_account(
    body: AdminRegistrationRequest,
    store: Annotated[UserStore, Depends(get_user_store)],
    claims: Annotated[AuthClaims | None, Depends(get_optional_claims)],
) -> UserResponse:
    """
    Create an admin account.

    The first admin needs no authorization. Once an admin exists, the request must
    carry admin_secret_key or be sent with an admin's Bearer token.
    """
    user = register_admin(store, body, get_settings(), caller_claims=claims)
    return UserResponse.model_validate(user)


@router.post(
    "/create-admin", response_model=UserResponse, status_code=status.HTTP_201_CREATED
)
def create_admin_by_admin(
    body: AdminRegistrationRequest,
    store: Annotated[UserStore, Depends(get_user_store)],
    admin: Annotated[AuthClaims, Depends(require_admin)],
) -> UserResponse:
    """Create another admin (admin only; no secret key needed)."""
    user = register_admin(store, body, get_settings(), caller_claims=admin)
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse)
def me(
    claims: Annotated[AuthClaims, Depends(get_current_claims)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> UserResponse:
    """The account behind the presented token."""
    return UserResponse.model_validate(user_service.get_current_user(store, claims))
