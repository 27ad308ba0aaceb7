"""Unit tests for the Order aggregate and its state machine."""

from datetime import datetime, timezone

import pytest

from poflow.domain.exceptions import (
    EmptyOrderError,
    ImmutableStateError,
    InvalidTransitionError,
    MissingCommentError,
    ValidationError,
)
from poflow.domain.model.order import (
    ALLOWED_SOURCES,
    LineItem,
    Order,
    OrderStatus,
    Trigger,
    ensure_transition_allowed,
)
from poflow.domain.model.value_objects import Money, Quantity

NOW = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def _make_item(name: str = "Desk", qty: int = 1, price: str = "100.00") -> LineItem:
    """Helper to build a valid line item."""
    return LineItem.create(name, Quantity(qty), Money.of(price))


def _make_order(*prices: str, status: OrderStatus = OrderStatus.DRAFT) -> Order:
    items = [_make_item(price=p) for p in prices or ("100.00",)]
    order = Order.create("ORD-20240301-0001", items, created_by=1, now=NOW)
    order.id = 1
    order.status = status
    return order


class TestLineItem:

    def test_total_is_quantity_times_price(self):
        item = _make_item(qty=3, price="15.00")
        assert item.total == Money.of("45.00")

    def test_with_quantity_recomputes_total(self):
        item = _make_item(qty=1, price="20.00").with_quantity(Quantity(4))
        assert item.total == Money.of("80.00")

    def test_with_unit_price_recomputes_total(self):
        item = _make_item(qty=2, price="20.00").with_unit_price(Money.of("7.50"))
        assert item.total == Money.of("15.00")

    def test_blank_product_name_rejected(self):
        with pytest.raises(ValidationError, match="Product name"):
            _make_item(name="   ")

    def test_zero_price_rejected(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            _make_item(price="0")

    def test_sub_cent_price_rejected(self):
        with pytest.raises(ValidationError, match="two decimal places"):
            _make_item(price="1.005")


class TestOrderCreation:

    def test_new_order_is_draft(self):
        order = Order.create("ORD-1", [_make_item()], created_by=7)
        assert order.status == OrderStatus.DRAFT
        assert order.id is None  # assigned by repository
        assert order.created_by == 7
        assert order.approved_by is None

    def test_round_trip_totals(self):
        order = Order.create(
            "ORD-1",
            [_make_item(qty=2, price="100.00"), _make_item(qty=1, price="50.00")],
            created_by=1,
        )
        assert order.total == Money.of("250.00")
        assert len(order.items) == 2

    def test_no_items_rejected(self):
        with pytest.raises(EmptyOrderError, match="at least one item"):
            Order.create("ORD-1", [], created_by=1)


class TestTransitionTable:

    @pytest.mark.parametrize("status", [OrderStatus.DRAFT, OrderStatus.APPROVED, OrderStatus.REJECTED])
    def test_approve_only_from_pending(self, status):
        with pytest.raises(InvalidTransitionError):
            ensure_transition_allowed(Trigger.APPROVE, status)

    def test_every_trigger_has_sources(self):
        assert set(ALLOWED_SOURCES) == set(Trigger)

    def test_nothing_leaves_approved(self):
        assert all(OrderStatus.APPROVED not in sources for sources in ALLOWED_SOURCES.values())


class TestSubmit:

    def test_large_order_waits_for_approval(self):
        order = _make_order("1500.00")
        change = order.submit(actor_id=2, now=NOW)
        assert order.status == OrderStatus.PENDING_APPROVAL
        assert order.approved_by is None
        assert order.approved_at is None
        assert change.from_status == OrderStatus.DRAFT
        assert change.to_status == OrderStatus.PENDING_APPROVAL

    def test_small_order_is_auto_approved(self):
        order = _make_order("500.00")
        order.submit(actor_id=2, now=NOW)
        assert order.status == OrderStatus.APPROVED
        assert order.approved_by == 2
        assert order.approved_at == NOW

    def test_exactly_threshold_needs_approval(self):
        order = _make_order("1000.00")
        order.submit(actor_id=2, now=NOW)
        assert order.status == OrderStatus.PENDING_APPROVAL

    def test_custom_threshold(self):
        order = _make_order("500.00")
        order.submit(actor_id=2, threshold=Money.of("200"), now=NOW)
        assert order.status == OrderStatus.PENDING_APPROVAL

    def test_rejected_order_can_be_resubmitted(self):
        order = _make_order("1500.00", status=OrderStatus.REJECTED)
        change = order.submit(actor_id=2, now=NOW)
        assert change.from_status == OrderStatus.REJECTED
        assert order.status == OrderStatus.PENDING_APPROVAL

    def test_submit_approved_order_rejected(self):
        order = _make_order(status=OrderStatus.APPROVED)
        with pytest.raises(InvalidTransitionError, match="Cannot submit"):
            order.submit(actor_id=2)

    def test_submit_pending_order_rejected(self):
        order = _make_order(status=OrderStatus.PENDING_APPROVAL)
        with pytest.raises(InvalidTransitionError):
            order.submit(actor_id=2)

    def test_submit_without_items_rejected(self):
        order = _make_order()
        order.items = []
        with pytest.raises(EmptyOrderError):
            order.submit(actor_id=2)
        assert order.status == OrderStatus.DRAFT


class TestApproveAndReject:

    def test_approve_sets_approver(self):
        order = _make_order("2000.00", status=OrderStatus.PENDING_APPROVAL)
        change = order.approve(actor_id=3, comment="ok", now=NOW)
        assert order.status == OrderStatus.APPROVED
        assert order.approved_by == 3
        assert order.approved_at == NOW
        assert change.comment == "ok"

    def test_approve_draft_rejected(self):
        order = _make_order()
        with pytest.raises(InvalidTransitionError, match="current status is draft"):
            order.approve(actor_id=3)
        assert order.status == OrderStatus.DRAFT

    def test_reject_records_comment(self):
        order = _make_order("2000.00", status=OrderStatus.PENDING_APPROVAL)
        change = order.reject(actor_id=3, comment="Too expensive", now=NOW)
        assert order.status == OrderStatus.REJECTED
        assert order.approved_by is None
        assert change.comment == "Too expensive"

    @pytest.mark.parametrize("comment", [None, "", "   "])
    def test_reject_requires_comment(self, comment):
        order = _make_order("2000.00", status=OrderStatus.PENDING_APPROVAL)
        with pytest.raises(MissingCommentError):
            order.reject(actor_id=3, comment=comment)
        assert order.status == OrderStatus.PENDING_APPROVAL

    def test_reject_draft_is_invalid_transition_even_with_comment(self):
        order = _make_order()
        with pytest.raises(InvalidTransitionError):
            order.reject(actor_id=3, comment="no")


class TestModification:

    @pytest.mark.parametrize(
        "status, allowed",
        [
            (OrderStatus.DRAFT, True),
            (OrderStatus.PENDING_APPROVAL, True),
            (OrderStatus.APPROVED, False),
            (OrderStatus.REJECTED, True),
        ],
    )
    def test_can_be_modified(self, status, allowed):
        assert _make_order(status=status).can_be_modified() is allowed

    def test_replace_contents_recomputes_total(self):
        order = _make_order("100.00")
        order.replace_contents("rush", [_make_item(qty=3, price="20.00")], now=NOW)
        assert order.total == Money.of("60.00")
        assert order.notes == "rush"
        assert len(order.items) == 1

    def test_replace_contents_keeps_notes_when_none(self):
        order = _make_order()
        order.notes = "keep me"
        order.replace_contents(None, [_make_item()])
        assert order.notes == "keep me"

    def test_replace_contents_does_not_change_status(self):
        order = _make_order(status=OrderStatus.REJECTED)
        order.replace_contents(None, [_make_item()])
        assert order.status == OrderStatus.REJECTED

    def test_approved_order_is_immutable(self):
        order = _make_order("500.00", status=OrderStatus.APPROVED)
        with pytest.raises(ImmutableStateError):
            order.replace_contents("x", [_make_item(price="1.00")])
        assert order.total == Money.of("500.00")
        assert order.notes is None

    def test_replace_with_no_items_rejected(self):
        order = _make_order()
        with pytest.raises(EmptyOrderError):
            order.replace_contents(None, [])


class TestSoftDelete:

    def test_delete_and_restore(self):
        order = _make_order()
        order.soft_delete(now=NOW)
        assert order.is_deleted
        assert order.deleted_at == NOW
        order.restore()
        assert not order.is_deleted
        assert order.deleted_at is None
        assert order.order_number == "ORD-20240301-0001"
