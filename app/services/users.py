"""User registration and admin-side user management."""

import logging

from app.core.exceptions import ConflictError, NotFoundError
from app.core.security import hash_password
from app.models import RoleName, User
from app.schemas.auth import AuthClaims, RegisterRequest
from app.schemas.user import UserUpdateRequest
from app.stores import UserStore

logger = logging.getLogger(__name__)


def ensure_unique(store: UserStore, username: str, email: str) -> None:
    """Raise ConflictError if username or email is taken. The DB constraint still decides races."""
    if store.exists_by_username(username):
        raise ConflictError(f"Username already exists: {username}")
    if store.exists_by_email(email):
        raise ConflictError(f"Email already exists: {email}")


def build_user(request: RegisterRequest, roles: list[RoleName], store: UserStore) -> User:
    user = User(
        username=request.username,
        email=str(request.email),
        password_hash=hash_password(request.password),
        first_name=request.first_name,
        last_name=request.last_name,
        phone=request.phone,
        is_active=True,
    )
    for name in roles:
        user.add_role(store.get_role(name))
    return user


def register_user(store: UserStore, request: RegisterRequest) -> User:
    """Create an active account holding the USER role."""
    ensure_unique(store, request.username, str(request.email))
    user = store.save(build_user(request, [RoleName.USER], store))
    logger.info("Registered user id=%s", user.id)
    return user


def get_user(store: UserStore, user_id: int) -> User:
    user = store.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User", "id", user_id)
    return user


def get_user_by_username(store: UserStore, username: str) -> User:
    user = store.find_by_username(username)
    if user is None:
        raise NotFoundError("User", "username", username)
    return user


def get_current_user(store: UserStore, claims: AuthClaims) -> User:
    """The stored account behind verified claims."""
    return get_user(store, claims.id)


def update_user(store: UserStore, user_id: int, request: UserUpdateRequest) -> User:
    """Overwrite profile fields; the password is rehashed only when one is given."""
    user = get_user(store, user_id)
    email = str(request.email)
    if user.username != request.username and store.exists_by_username(request.username):
        raise ConflictError(f"Username already exists: {request.username}")
    holder = store.find_by_email(email)
    if holder is not None and holder.id != user.id:
        raise ConflictError(f"Email already exists: {email}")

    user.username = request.username
    user.email = email
    user.first_name = request.first_name
    user.last_name = request.last_name
    user.phone = request.phone
    if request.password:
        user.password_hash = hash_password(request.password)

    user = store.save(user)
    logger.info("Updated user id=%s", user.id)
    return user


def set_active(store: UserStore, user_id: int, active: bool) -> User:
    """Activate or deactivate (soft delete) an account. Inactive users cannot log in."""
    user = get_user(store, user_id)
    user.is_active = active
    user = store.save(user)
    logger.info("User id=%s %s", user_id, "activated" if active else "deactivated")
    return user


def delete_user_permanently(store: UserStore, user_id: int) -> None:
    """Hard-delete the account and its orders."""
    user = get_user(store, user_id)
    store.delete(user)
    logger.warning("Permanently deleted user id=%s", user_id)


def assign_role(store: UserStore, user_id: int, role_name: RoleName) -> User:
    user = get_user(store, user_id)
    user.add_role(store.get_role(role_name))
    user = store.save(user)
    logger.info("Assigned role %s to user id=%s", role_name.value, user_id)
    return user


def remove_role(store: UserStore, user_id: int, role_name: RoleName) -> User:
    user = get_user(store, user_id)
    user.remove_role(store.get_role(role_name))
    user = store.save(user)
    logger.info("Removed role %s from user id=%s", role_name.value, user_id)
    return user
