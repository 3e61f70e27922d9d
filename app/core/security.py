"""bcrypt password hashing plus the credential length limits shared by request schemas."""

import bcrypt

from app.core.config import settings

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 50
USERNAME_PATTERN = r"^[A-Za-z0-9_.-]+$"
EMAIL_MAX_LEN = 100
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str) -> str:
    """Salted bcrypt hash at the configured cost factor."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(plain_password), salt).decode("ascii")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """True when plain_password matches password_hash; a malformed hash never matches."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), password_hash.encode("ascii"))
    except (ValueError, TypeError, UnicodeEncodeError):
        return False


# Verified against when the username is unknown, so a failed login costs the same
# whether or not the account exists.
DUMMY_PASSWORD_HASH: str = hash_password("timing-equalisation-dummy")
