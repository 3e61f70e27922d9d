"""
Create a user or an admin from the shell. Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [user|admin]
Example (first admin of a fresh install):
  python -m app.scripts.create_user admin admin@mail.com your-secure-password admin

Admins created here go through the same bootstrap rules as the API; once an admin
exists, the configured ADMIN_SECRET_KEY authorizes the new one.
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.exceptions import AppError
from app.core.logging import configure_logging
from app.schemas.auth import AdminRegistrationRequest, RegisterRequest
from app.services.admin_bootstrap import register_admin
from app.services.roles import seed_roles
from app.services.users import register_user
from app.stores import UserStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a user account (no registration UI).")
    parser.add_argument("username", help="Username (3-50 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    fields = {
        "username": args.username.strip(),
        "email": args.email.strip(),
        "password": args.password,
    }
    try:
        if args.role == "admin":
            request = AdminRegistrationRequest(
                **fields, admin_secret_key=settings.ADMIN_SECRET_KEY.get_secret_value()
            )
        else:
            request = RegisterRequest(**fields)
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"{field}: {err['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        seed_roles(db)
        store = UserStore(db)
        if args.role == "admin":
            user = register_admin(store, request, settings)
        else:
            user = register_user(store, request)
        print(f"Created user '{user.username}' (id={user.id}) with role '{args.role}'.")
        return 0
    except AppError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
