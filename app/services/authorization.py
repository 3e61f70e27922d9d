"""
Authorization guard: pure access decisions over verified claims.

Nothing here touches the database. Callers fetch the resource first and pass the
owner id in. A missing claims object (no token, or verification failed) is never
authorized.
"""

from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.models.enums import RoleName
from app.schemas.auth import AuthClaims


def authorize(claims: AuthClaims | None, required_role: RoleName) -> bool:
    """Role-gated check: True iff claims are present and hold required_role."""
    if claims is None:
        return False
    return required_role in claims.roles


def is_admin(claims: AuthClaims | None) -> bool:
    return authorize(claims, RoleName.ADMIN)


def can_access_owned(claims: AuthClaims | None, owner_id: int) -> bool:
    """Ownership-gated check: admins and the owner may access the resource."""
    if claims is None:
        return False
    return is_admin(claims) or claims.id == owner_id


def require_authenticated(claims: AuthClaims | None) -> AuthClaims:
    if claims is None:
        raise UnauthorizedError("Authentication required")
    return claims


def require_role(claims: AuthClaims | None, role: RoleName) -> AuthClaims:
    """Raise UnauthorizedError without claims, ForbiddenError without the role."""
    claims = require_authenticated(claims)
    if not authorize(claims, role):
        raise ForbiddenError(f"{role.value} role required")
    return claims


def require_owner_or_admin(
    claims: AuthClaims | None,
    owner_id: int,
    message: str = "You don't have permission to access this resource",
) -> AuthClaims:
    claims = require_authenticated(claims)
    if not can_access_owned(claims, owner_id):
        raise ForbiddenError(message)
    return claims
