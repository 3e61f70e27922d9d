"""Shared builders for tests: fresh schema, users, and claims."""

from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from app.core.database import SessionLocal, engine
from app.core.security import hash_password
from app.models import Base, RoleName, User
from app.schemas.auth import AuthClaims
from app.services.roles import seed_roles
from app.stores import UserStore

DEFAULT_PASSWORD = "correct-horse-battery"


def reset_database() -> Session:
    """Drop and recreate every table, seed roles, and return an open session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    seed_roles(db)
    return db


def make_user(
    store: UserStore,
    username: str,
    roles: tuple[RoleName, ...] = (RoleName.USER,),
    password: str = DEFAULT_PASSWORD,
    active: bool = True,
) -> User:
    """Persist a user directly, bypassing registration rules."""
    user = User(
        username=username,
        email=f"{username}@mail.com",
        password_hash=hash_password(password),
        is_active=active,
    )
    for name in roles:
        user.add_role(store.get_role(name))
    return store.save(user)


def claims_for(user: User) -> AuthClaims:
    now = datetime.now(UTC).replace(microsecond=0)
    return AuthClaims(
        id=user.id,
        username=user.username,
        email=user.email,
        roles=user.role_names,
        issued_at=now,
        expires_at=now + timedelta(hours=1),
    )


def make_claims(user_id: int, *roles: RoleName) -> AuthClaims:
    """Claims without a backing user, for pure authorization checks."""
    now = datetime.now(UTC).replace(microsecond=0)
    return AuthClaims(
        id=user_id,
        username=f"user{user_id}",
        email=f"user{user_id}@mail.com",
        roles=frozenset(roles),
        issued_at=now,
        expires_at=now + timedelta(hours=1),
    )
