"""
Admin registration under two regimes.

First admin: while no user holds ADMIN, anyone may create an admin account. This is
the one unauthenticated privilege-escalation path and exists only to bootstrap a
fresh install.

Subsequent admins: the request must carry the configured ADMIN_SECRET_KEY, or the
caller must present claims holding ADMIN.
"""

import hmac
import logging
from typing import TYPE_CHECKING

from app.core.exceptions import ForbiddenError
from app.models import RoleName, User
from app.schemas.auth import AdminRegistrationRequest, AuthClaims
from app.services.authorization import is_admin
from app.services.users import build_user, ensure_unique
from app.stores import UserStore

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def secret_key_matches(provided: str | None, expected: str) -> bool:
    """Constant-time comparison of the presented admin secret."""
    if not provided:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def register_admin(
    store: UserStore,
    request: AdminRegistrationRequest,
    settings: "Settings",
    caller_claims: AuthClaims | None = None,
) -> User:
    """
    Create an active account holding USER and ADMIN.

    Raises ConflictError if the username or email is taken, ForbiddenError if admins
    already exist and neither the secret key nor an admin caller authorizes it.
    """
    ensure_unique(store, request.username, str(request.email))

    admin_count = store.count_by_role(RoleName.ADMIN)
    if admin_count == 0:
        logger.info("No admin exists yet; creating first admin without authorization")
    else:
        expected = settings.ADMIN_SECRET_KEY.get_secret_value()
        if not (secret_key_matches(request.admin_secret_key, expected) or is_admin(caller_claims)):
            logger.warning(
                "Rejected admin registration for username=%s (caller id=%s)",
                request.username,
                caller_claims.id if caller_claims else None,
            )
            raise ForbiddenError(
                "Unauthorized: invalid admin secret key or insufficient permissions"
            )

    admin = store.save(build_user(request, [RoleName.USER, RoleName.ADMIN], store))
    logger.info("Admin user created with id=%s", admin.id)
    return admin
