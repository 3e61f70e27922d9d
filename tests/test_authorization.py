"""Unit tests for app.services.authorization: role and ownership decisions."""

import unittest

from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.models import RoleName
from app.services.authorization import (
    authorize,
    can_access_owned,
    is_admin,
    require_owner_or_admin,
    require_role,
)
from tests.support import make_claims


class TestAuthorize(unittest.TestCase):
    """Role-gated: required role must be present in the claims."""

    def test_user_role(self) -> None:
        claims = make_claims(1, RoleName.USER)
        self.assertTrue(authorize(claims, RoleName.USER))
        self.assertFalse(authorize(claims, RoleName.ADMIN))

    def test_admin_does_not_imply_user(self) -> None:
        claims = make_claims(1, RoleName.ADMIN)
        self.assertTrue(authorize(claims, RoleName.ADMIN))
        self.assertFalse(authorize(claims, RoleName.USER))

    def test_no_claims_is_never_authorized(self) -> None:
        for role in RoleName:
            with self.subTest(role=role):
                self.assertFalse(authorize(None, role))
        self.assertFalse(is_admin(None))


class TestOwnership(unittest.TestCase):
    """Ownership-gated: owner or any admin."""

    def test_owner_allowed(self) -> None:
        self.assertTrue(can_access_owned(make_claims(7, RoleName.USER), owner_id=7))

    def test_other_user_denied(self) -> None:
        self.assertFalse(can_access_owned(make_claims(8, RoleName.USER), owner_id=7))

    def test_admin_allowed_for_any_owner(self) -> None:
        admin = make_claims(1, RoleName.USER, RoleName.ADMIN)
        self.assertTrue(can_access_owned(admin, owner_id=7))

    def test_no_claims_denied(self) -> None:
        self.assertFalse(can_access_owned(None, owner_id=7))


class TestRaisingHelpers(unittest.TestCase):
    """require_* raise Unauthorized without claims, Forbidden when denied."""

    def test_require_role(self) -> None:
        with self.assertRaises(UnauthorizedError):
            require_role(None, RoleName.ADMIN)
        with self.assertRaises(ForbiddenError):
            require_role(make_claims(2, RoleName.USER), RoleName.ADMIN)
        admin = make_claims(3, RoleName.ADMIN)
        self.assertIs(require_role(admin, RoleName.ADMIN), admin)

    def test_require_owner_or_admin(self) -> None:
        with self.assertRaises(UnauthorizedError):
            require_owner_or_admin(None, 5)
        with self.assertRaises(ForbiddenError):
            require_owner_or_admin(make_claims(6, RoleName.USER), 5)
        owner = make_claims(5, RoleName.USER)
        self.assertIs(require_owner_or_admin(owner, 5), owner)


if __name__ == "__main__":
    unittest.main()
