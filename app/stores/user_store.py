"""Credential store: lookups and saves for users and roles."""

import logging

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.models import Role, RoleName, User
from app.stores.pagination import like_pattern, paginate

logger = logging.getLogger(__name__)


class UserStore:
    """
    Users and roles persisted through one Session.

    Uniqueness of username and email is enforced by database constraints;
    save() turns a constraint violation into ConflictError, so concurrent
    registrations of the same name cannot both succeed.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_id(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def find_by_username(self, username: str) -> User | None:
        return self.session.query(User).filter(User.username == username).first()

    def find_by_email(self, email: str) -> User | None:
        return self.session.query(User).filter(User.email == email).first()

    def exists_by_username(self, username: str) -> bool:
        query = self.session.query(User.id).filter(User.username == username)
        return self.session.query(query.exists()).scalar()

    def exists_by_email(self, email: str) -> bool:
        query = self.session.query(User.id).filter(User.email == email)
        return self.session.query(query.exists()).scalar()

    def count(self) -> int:
        return self.session.query(func.count(User.id)).scalar() or 0

    def count_active(self) -> int:
        return (
            self.session.query(func.count(User.id)).filter(User.is_active.is_(True)).scalar()
            or 0
        )

    def count_by_role(self, role_name: RoleName) -> int:
        return (
            self.session.query(func.count(User.id))
            .join(User.roles)
            .filter(Role.name == role_name)
            .scalar()
            or 0
        )

    def find_all(self, page: int, size: int) -> tuple[list[User], int]:
        return paginate(self.session.query(User).order_by(User.id), page, size)

    def find_active(self, page: int, size: int) -> tuple[list[User], int]:
        query = self.session.query(User).filter(User.is_active.is_(True)).order_by(User.id)
        return paginate(query, page, size)

    def search(self, term: str, page: int, size: int) -> tuple[list[User], int]:
        """Match term against username, email, first and last name (case-insensitive)."""
        pattern = like_pattern(term)
        query = (
            self.session.query(User)
            .filter(
                or_(
                    func.lower(User.username).like(pattern, escape="\\"),
                    func.lower(User.email).like(pattern, escape="\\"),
                    func.lower(User.first_name).like(pattern, escape="\\"),
                    func.lower(User.last_name).like(pattern, escape="\\"),
                )
            )
            .order_by(User.id)
        )
        return paginate(query, page, size)

    def get_role(self, name: RoleName) -> Role:
        role = self.session.query(Role).filter(Role.name == name).first()
        if role is None:
            raise NotFoundError("Role", "name", name.value)
        return role

    def save(self, user: User) -> User:
        """Insert or update a user and commit. Raises ConflictError on a uniqueness violation."""
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("User save rejected by uniqueness constraint: %s", e.orig)
            raise ConflictError("Username or email already exists") from e
        self.session.refresh(user)
        return user

    def delete(self, user: User) -> None:
        self.session.delete(user)
        self.session.commit()
