"""
Token service: verify credentials, issue signed JWT access tokens, and verify them.

Tokens are HS256/384/512 JWTs signed with JWT_SECRET. The payload binds the user's
identity and roles:

    {"sub": "<user id>", "username": ..., "email": ..., "roles": ["ADMIN", "USER"],
     "iat": <issued at>, "exp": <expiry>}

Changing any claim invalidates the signature. verify() fails closed: every token that
cannot be fully decoded into AuthClaims raises InvalidTokenError (or ExpiredTokenError),
it never yields an anonymous identity.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt

from app.core.exceptions import (
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from app.core.security import DUMMY_PASSWORD_HASH, verify_password
from app.models.enums import RoleName
from app.schemas.auth import AuthClaims

if TYPE_CHECKING:
    from app.core.config import Settings
    from app.models import User
    from app.stores import UserStore

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ("sub", "username", "email", "roles", "iat", "exp")


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed token and the claims it carries."""

    token: str
    claims: AuthClaims


class TokenService:
    """Issues and verifies signed, time-limited access tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=1)) -> None:
        if not secret:
            raise ValueError("token signing secret must be non-empty")
        if ttl <= timedelta(0):
            raise ValueError("token ttl must be positive")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenService":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            ttl=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
        )

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def authenticate(self, store: "UserStore", username: str, password: str) -> "User":
        """
        Return the active user matching username/password or raise InvalidCredentialsError.

        bcrypt runs even for unknown usernames so response time does not reveal
        which usernames exist.
        """
        user = store.find_by_username(username)
        if user is None:
            verify_password(password, DUMMY_PASSWORD_HASH)
            raise InvalidCredentialsError()
        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        if not user.is_active:
            raise InvalidCredentialsError()
        return user

    def issue(self, store: "UserStore", username: str, password: str) -> IssuedToken:
        """Verify credentials and sign a token for the user's current roles."""
        user = self.authenticate(store, username, password)
        issued = self.issue_for_user(user)
        logger.info("Issued access token for user id=%s", user.id)
        return issued

    def issue_for_user(self, user: "User", now: datetime | None = None) -> IssuedToken:
        """Sign a token for an already-authenticated user."""
        issued_at = (now or datetime.now(UTC)).replace(microsecond=0)
        claims = AuthClaims(
            id=user.id,
            username=user.username,
            email=user.email,
            roles=frozenset(user.role_names),
            issued_at=issued_at,
            expires_at=issued_at + self._ttl,
        )
        return IssuedToken(token=self.encode(claims), claims=claims)

    def encode(self, claims: AuthClaims) -> str:
        payload: dict[str, Any] = {
            "sub": str(claims.id),
            "username": claims.username,
            "email": claims.email,
            "roles": sorted(role.value for role in claims.roles),
            "iat": claims.issued_at,
            "exp": claims.expires_at,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str | None) -> AuthClaims:
        """
        Check signature and expiry and return the token's claims.

        Raises ExpiredTokenError for an expired token and InvalidTokenError for
        anything else that cannot be verified.
        """
        if not token or not isinstance(token, str):
            raise InvalidTokenError("Missing token")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError as e:
            raise ExpiredTokenError() from e
        except jwt.PyJWTError as e:
            logger.debug("Token rejected: %s", e)
            raise InvalidTokenError() from e
        return self._claims_from_payload(payload)

    @staticmethod
    def _claims_from_payload(payload: dict[str, Any]) -> AuthClaims:
        try:
            user_id = int(payload["sub"])
            username = payload["username"]
            email = payload["email"]
            raw_roles = payload["roles"]
            if not isinstance(username, str) or not isinstance(email, str):
                raise TypeError("username and email must be strings")
            if not isinstance(raw_roles, list):
                raise TypeError("roles must be a list")
            roles = frozenset(RoleName(name) for name in raw_roles)
            issued_at = datetime.fromtimestamp(int(payload["iat"]), UTC)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), UTC)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError("Invalid token payload") from e
        return AuthClaims(
            id=user_id,
            username=username,
            email=email,
            roles=roles,
            issued_at=issued_at,
            expires_at=expires_at,
        )
