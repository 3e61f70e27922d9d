"""ORM models for users and their roles (auth and RBAC)."""

from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin
from app.models.enums import RoleName

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """A named role; one row per RoleName."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(
        Enum(RoleName, native_enum=False, length=20),
        nullable=False,
        unique=True,
    )

    def __repr__(self) -> str:
        return f"Role(name={self.name.value!r})"


class User(TimestampMixin, Base):
    """
    User account for JWT authentication and role-based access control.

    username and email are unique and compared case-sensitively.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    phone = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    roles = relationship("Role", secondary=user_roles, lazy="selectin")
    orders = relationship(
        "Order",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def role_names(self) -> frozenset[RoleName]:
        return frozenset(role.name for role in self.roles)

    def has_role(self, name: RoleName) -> bool:
        return name in self.role_names

    def add_role(self, role: Role) -> None:
        if role.name not in self.role_names:
            self.roles.append(role)

    def remove_role(self, role: Role) -> None:
        self.roles = [r for r in self.roles if r.name != role.name]
