"""Tests for app.services.orders: creation rules, transition table, modify/cancel/set_status/delete."""

import re
import unittest
from unittest.mock import patch
from decimal import Decimal

from app.core.config import get_settings
from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationFailedError
from app.models import OrderStatus, RoleName
from app.schemas.order import UpdateOrderRequest
from app.services.orders import (
    ALLOWED_TRANSITIONS,
    OrderService,
    can_transition,
    generate_order_number,
    is_cancellable,
    is_modifiable,
    validate_amount,
)
from app.stores import OrderStore, UserStore
from tests.support import claims_for, make_user, reset_database


class TestTransitionTable(unittest.TestCase):
    """Forward chain plus cancellation from every non-terminal state."""

    def test_forward_chain(self) -> None:
        chain = [
            OrderStatus.PENDING,
            OrderStatus.CONFIRMED,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
        ]
        for current, target in zip(chain, chain[1:]):
            with self.subTest(current=current):
                self.assertTrue(can_transition(current, target))

    def test_no_skipping(self) -> None:
        self.assertFalse(can_transition(OrderStatus.PENDING, OrderStatus.SHIPPED))
        self.assertFalse(can_transition(OrderStatus.CONFIRMED, OrderStatus.DELIVERED))

    def test_terminal_states(self) -> None:
        for status in (OrderStatus.DELIVERED, OrderStatus.CANCELLED):
            with self.subTest(status=status):
                self.assertEqual(ALLOWED_TRANSITIONS[status], frozenset())
                self.assertFalse(is_cancellable(status))

    def test_cancellable_and_modifiable(self) -> None:
        for status in (OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED):
            self.assertTrue(can_transition(status, OrderStatus.CANCELLED))
        self.assertEqual(
            {s for s in OrderStatus if is_modifiable(s)},
            {OrderStatus.PENDING, OrderStatus.CONFIRMED},
        )


class TestAmountAndOrderNumber(unittest.TestCase):
    def test_amount_bounds(self) -> None:
        self.assertEqual(validate_amount("0.01"), Decimal("0.01"))
        self.assertEqual(validate_amount(Decimal("49.990")), Decimal("49.99"))
        for bad in ["0", "0.00", "-5", "1.005", "abc", "NaN", "100000000.00"]:
            with self.subTest(amount=bad):
                with self.assertRaises(ValidationFailedError):
                    validate_amount(bad)

    def test_oversized_amount_with_fraction_is_rejected(self) -> None:
        for bad in ["123456789012345678901234567.001", "1E+40", "99999999.999"]:
            with self.subTest(amount=bad):
                with self.assertRaises(ValidationFailedError) as ctx:
                    validate_amount(Decimal(bad))
                self.assertTrue(ctx.exception.details[0].startswith("total_amount"))
        self.assertEqual(validate_amount("99999999.99"), Decimal("99999999.99"))

    def test_order_number_format(self) -> None:
        number = generate_order_number()
        self.assertRegex(number, r"^ORD-\d{6}-[0-9A-F]{8}$")
        self.assertLessEqual(len(number), 20)
        self.assertNotEqual(number, generate_order_number())


class OrderTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = reset_database()
        self.users = UserStore(self.db)
        self.orders = OrderStore(self.db)
        self.settings = get_settings()
        self.service = OrderService(self.orders, self.users, self.settings)
        self.owner = claims_for(make_user(self.users, "owner"))
        self.stranger = claims_for(make_user(self.users, "stranger"))
        self.admin = claims_for(
            make_user(self.users, "boss", roles=(RoleName.USER, RoleName.ADMIN))
        )

    def tearDown(self) -> None:
        self.db.close()

    def _order(self, status: OrderStatus = OrderStatus.PENDING):
        order = self.service.create(self.owner, Decimal("20.00"), "1 Main St", "leave at door")
        if status != OrderStatus.PENDING:
            order = self.service.set_status(order.id, status)
        return order


class TestCreate(OrderTestCase):
    """create() validates amount and starts orders as PENDING."""

    def test_minimum_amount(self) -> None:
        order = self.service.create(self.owner, Decimal("0.01"))
        self.assertEqual(order.total_amount, Decimal("0.01"))
        self.assertEqual(order.status, OrderStatus.PENDING)
        self.assertEqual(order.user_id, self.owner.id)
        self.assertIsNone(order.delivery_address)
        self.assertTrue(order.order_number.startswith("ORD-"))

    def test_zero_and_negative_amounts_fail(self) -> None:
        for amount in (Decimal("0"), Decimal("-0.01"), Decimal("-10")):
            with self.subTest(amount=amount):
                with self.assertRaises(ValidationFailedError) as ctx:
                    self.service.create(self.owner, amount)
                self.assertTrue(ctx.exception.details[0].startswith("total_amount"))
        self.assertEqual(self.orders.count(), 0)

    def test_text_limits(self) -> None:
        with self.assertRaises(ValidationFailedError):
            self.service.create(self.owner, Decimal("1"), delivery_address="x" * 501)
        with self.assertRaises(ValidationFailedError):
            self.service.create(self.owner, Decimal("1"), notes="x" * 1001)
        order = self.service.create(self.owner, Decimal("1"), "x" * 500, "y" * 1000)
        self.assertEqual(len(order.notes), 1000)

    def test_duplicate_order_number_conflicts(self) -> None:
        fixed = OrderService(self.orders, self.users, self.settings, lambda: "ORD-000001-DEADBEEF")
        fixed.create(self.owner, Decimal("5"))
        with self.assertRaises(ConflictError):
            fixed.create(self.owner, Decimal("6"))
        self.assertEqual(self.orders.count(), 1)

    def test_taken_order_number_is_regenerated(self) -> None:
        numbers = iter(["ORD-000001-DEADBEEF", "ORD-000001-DEADBEEF", "ORD-000002-CAFEF00D"])
        service = OrderService(self.orders, self.users, self.settings, lambda: next(numbers))
        service.create(self.owner, Decimal("5"))
        self.assertTrue(self.orders.exists_by_order_number("ORD-000001-DEADBEEF"))
        self.assertFalse(self.orders.exists_by_order_number("ORD-000002-CAFEF00D"))
        with self.assertLogs("app.services.orders", level="WARNING"):
            second = service.create(self.owner, Decimal("6"))
        self.assertEqual(second.order_number, "ORD-000002-CAFEF00D")

    def test_constraint_decides_when_number_check_races(self) -> None:
        fixed = OrderService(self.orders, self.users, self.settings, lambda: "ORD-000001-DEADBEEF")
        fixed.create(self.owner, Decimal("5"))
        with patch.object(OrderStore, "exists_by_order_number", return_value=False):
            with self.assertRaises(ConflictError):
                fixed.create(self.owner, Decimal("6"))
        self.assertEqual(self.orders.count(), 1)

    def test_unknown_owner(self) -> None:
        ghost = self.owner.model_copy(update={"id": 9999})
        with self.assertRaises(NotFoundError):
            self.service.create(ghost, Decimal("5"))


class TestModify(OrderTestCase):
    """modify(): ownership, modifiable states, partial updates, admin-only status."""

    def test_owner_updates_address_and_notes(self) -> None:
        order = self._order()
        updated = self.service.modify(
            self.owner, order.id, UpdateOrderRequest(delivery_address="2 Side St")
        )
        self.assertEqual(updated.delivery_address, "2 Side St")
        # omitted fields untouched
        self.assertEqual(updated.notes, "leave at door")
        self.assertEqual(updated.total_amount, Decimal("20.00"))

    def test_explicit_null_clears_notes(self) -> None:
        order = self._order()
        updated = self.service.modify(self.owner, order.id, UpdateOrderRequest(notes=None))
        self.assertIsNone(updated.notes)
        self.assertEqual(updated.delivery_address, "1 Main St")

    def test_non_owner_forbidden(self) -> None:
        order = self._order()
        with self.assertRaises(ForbiddenError):
            self.service.modify(self.stranger, order.id, UpdateOrderRequest(notes="mine now"))

    def test_admin_changes_status(self) -> None:
        order = self._order()
        updated = self.service.modify(
            self.admin, order.id, UpdateOrderRequest(status=OrderStatus.CONFIRMED)
        )
        self.assertEqual(updated.status, OrderStatus.CONFIRMED)

    def test_owner_status_change_ignored(self) -> None:
        order = self._order()
        updated = self.service.modify(
            self.owner,
            order.id,
            UpdateOrderRequest(status=OrderStatus.CONFIRMED, notes="ring twice"),
        )
        self.assertEqual(updated.status, OrderStatus.PENDING)
        self.assertEqual(updated.notes, "ring twice")

    def test_admin_illegal_transition_conflicts_and_changes_nothing(self) -> None:
        order = self._order()
        with self.assertRaises(ConflictError):
            self.service.modify(
                self.admin,
                order.id,
                UpdateOrderRequest(status=OrderStatus.DELIVERED, notes="changed"),
            )
        self.db.expire_all()
        reloaded = self.orders.find_by_id(order.id)
        self.assertEqual(reloaded.status, OrderStatus.PENDING)
        self.assertEqual(reloaded.notes, "leave at door")

    def test_not_modifiable_after_confirmation_stage(self) -> None:
        for status in (OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED):
            with self.subTest(status=status):
                order = self._order(status)
                with self.assertRaises(ConflictError):
                    self.service.modify(self.admin, order.id, UpdateOrderRequest(notes="late"))

    def test_invalid_amount(self) -> None:
        order = self._order()
        with self.assertRaises(ValidationFailedError):
            self.service.modify(self.owner, order.id, UpdateOrderRequest(total_amount=Decimal("0")))

    def test_missing_order(self) -> None:
        with self.assertRaises(NotFoundError):
            self.service.modify(self.admin, 12345, UpdateOrderRequest(notes="x"))


class TestSetStatus(OrderTestCase):
    """set_status() overwrites without the transition table unless enforcement is enabled."""

    def test_skips_states_by_default(self) -> None:
        order = self._order()
        with self.assertLogs("app.services.orders", level="WARNING"):
            updated = self.service.set_status(order.id, OrderStatus.SHIPPED)
        self.assertEqual(updated.status, OrderStatus.SHIPPED)

    def test_reopens_terminal_order_by_default(self) -> None:
        order = self._order(OrderStatus.CANCELLED)
        updated = self.service.set_status(order.id, OrderStatus.PENDING)
        self.assertEqual(updated.status, OrderStatus.PENDING)

    def test_enforcement_flag_rejects_illegal_jump(self) -> None:
        strict = OrderService(
            self.orders,
            self.users,
            self.settings.model_copy(update={"ORDER_STATUS_ENFORCE_TRANSITIONS": True}),
        )
        order = self._order()
        with self.assertRaises(ConflictError):
            strict.set_status(order.id, OrderStatus.SHIPPED)
        self.assertEqual(strict.set_status(order.id, OrderStatus.CONFIRMED).status, OrderStatus.CONFIRMED)

    def test_missing_order(self) -> None:
        with self.assertRaises(NotFoundError):
            self.service.set_status(4242, OrderStatus.CONFIRMED)


class TestCancel(OrderTestCase):
    """cancel(): owner or admin, any non-terminal state."""

    def test_cancel_processing_order(self) -> None:
        order = self._order(OrderStatus.PROCESSING)
        cancelled = self.service.cancel(self.owner, order.id)
        self.assertEqual(cancelled.status, OrderStatus.CANCELLED)

    def test_cancel_delivered_conflicts(self) -> None:
        order = self._order(OrderStatus.DELIVERED)
        with self.assertRaises(ConflictError):
            self.service.cancel(self.owner, order.id)

    def test_cancel_twice_conflicts(self) -> None:
        order = self._order()
        self.service.cancel(self.admin, order.id)
        with self.assertRaises(ConflictError):
            self.service.cancel(self.admin, order.id)

    def test_stranger_cannot_cancel(self) -> None:
        order = self._order()
        with self.assertRaises(ForbiddenError):
            self.service.cancel(self.stranger, order.id)


class TestReadAndDelete(OrderTestCase):
    def test_get_respects_ownership(self) -> None:
        order = self._order()
        self.assertEqual(self.service.get(self.owner, order.id).id, order.id)
        self.assertEqual(self.service.get(self.admin, order.id).id, order.id)
        with self.assertRaises(ForbiddenError):
            self.service.get(self.stranger, order.id)

    def test_listings(self) -> None:
        first = self._order()
        self._order(OrderStatus.SHIPPED)
        self.service.create(self.stranger, Decimal("3.50"), "99 Elm Road")
        mine, total = self.service.list_mine(self.owner, 0, 10)
        self.assertEqual(total, 2)
        self.assertTrue(all(o.user_id == self.owner.id for o in mine))
        _, total_all = self.service.list_all(0, 10)
        self.assertEqual(total_all, 3)
        shipped, _ = self.service.list_by_status(OrderStatus.SHIPPED, 0, 10)
        self.assertEqual([o.status for o in shipped], [OrderStatus.SHIPPED])
        found, _ = self.service.search("elm", 0, 10)
        self.assertEqual(len(found), 1)
        by_number, _ = self.service.search(first.order_number.lower(), 0, 10)
        self.assertEqual([o.id for o in by_number], [first.id])

    def test_listing_sort_order(self) -> None:
        for amount in ("30.00", "10.00", "20.00"):
            self.service.create(self.owner, Decimal(amount))
        cheapest_first, _ = self.service.list_mine(self.owner, 0, 10, "total_amount", "asc")
        self.assertEqual(
            [o.total_amount for o in cheapest_first],
            [Decimal("10.00"), Decimal("20.00"), Decimal("30.00")],
        )
        priciest_first, _ = self.service.list_all(0, 10, sort_by="total_amount", sort_dir="desc")
        self.assertEqual(priciest_first[0].total_amount, Decimal("30.00"))
        # default is newest first
        newest, _ = self.service.list_all(0, 10)
        self.assertEqual(newest[0].total_amount, Decimal("20.00"))

    def test_unknown_sort_field_rejected(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            self.service.list_all(0, 10, sort_by="password_hash", sort_dir="sideways")
        self.assertEqual(len(ctx.exception.details), 2)

    def test_delete_any_status(self) -> None:
        order = self._order(OrderStatus.DELIVERED)
        self.service.delete(order.id)
        self.assertIsNone(self.orders.find_by_id(order.id))
        with self.assertRaises(NotFoundError):
            self.service.delete(order.id)


class TestAliceScenario(OrderTestCase):
    """Register, create an order, then an admin jumps it straight to SHIPPED."""

    def test_scenario(self) -> None:
        alice = claims_for(make_user(self.users, "alice"))
        order = self.service.create(alice, Decimal("49.99"))
        self.assertEqual(order.status, OrderStatus.PENDING)
        self.assertTrue(re.match(r"^ORD-\d{6}-[0-9A-F]{8}$", order.order_number))
        self.assertEqual(order.user.username, "alice")
        self.assertIsNone(order.delivery_address)

        shipped = self.service.set_status(order.id, OrderStatus.SHIPPED)
        self.assertEqual(shipped.status, OrderStatus.SHIPPED)


if __name__ == "__main__":
    unittest.main()
