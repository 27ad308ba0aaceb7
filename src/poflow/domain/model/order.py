"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items.  Every status
change goes through one of the transition methods below, which check the
transition table first and return a ``StatusChange`` for the ledger.
Nothing is written here; persistence is the handler's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from poflow.domain.exceptions import (
    EmptyOrderError,
    ImmutableStateError,
    InvalidTransitionError,
    MissingCommentError,
    ValidationError,
)
from poflow.domain.model.calculator import line_total, order_total
from poflow.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"


class Trigger(Enum):
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"


class Lifecycle(Enum):
    ACTIVE = "active"
    DELETED = "deleted"


# ---------------------------------------------------------------------------
# Transition table: which statuses each trigger may fire from.
# REJECTED behaves like a second DRAFT so a corrected order can re-enter
# the approval pipeline through the ordinary submit trigger.
# ---------------------------------------------------------------------------
ALLOWED_SOURCES: dict[Trigger, frozenset[OrderStatus]] = {
    Trigger.SUBMIT: frozenset({OrderStatus.DRAFT, OrderStatus.REJECTED}),
    Trigger.APPROVE: frozenset({OrderStatus.PENDING_APPROVAL}),
    Trigger.REJECT: frozenset({OrderStatus.PENDING_APPROVAL}),
}

APPROVAL_THRESHOLD = Money(Decimal("1000.00"))


def ensure_transition_allowed(trigger: Trigger, status: OrderStatus) -> None:
    """Raise InvalidTransitionError unless *trigger* may fire from *status*."""
    allowed = ALLOWED_SOURCES[trigger]
    if status not in allowed:
        expected = ", ".join(sorted(s.value for s in allowed))
        raise InvalidTransitionError(
            f"Cannot {trigger.value} order — current status is {status.value}, "
            f"expected {expected}"
        )


@dataclass(frozen=True)
class StatusChange:
    """One transition, ready to be appended to the status history."""

    from_status: OrderStatus | None
    to_status: OrderStatus
    actor_id: int
    comment: str | None = None


@dataclass(frozen=True)
class LineItem:
    """One product line on an order.

    Build with ``LineItem.create()``; the ``with_*`` methods return a copy
    with the total recomputed.  ``__init__`` is left plain so repositories
    can rehydrate stored rows without recalculating.
    """

    product_name: str
    description: str | None
    quantity: Quantity
    unit_price: Money
    total: Money

    @staticmethod
    def create(
        product_name: str,
        quantity: Quantity,
        unit_price: Money,
        description: str | None = None,
    ) -> LineItem:
        if not product_name or not product_name.strip():
            raise ValidationError("Product name is required")
        _check_unit_price(unit_price)
        return LineItem(
            product_name=product_name.strip(),
            description=description,
            quantity=quantity,
            unit_price=unit_price,
            total=line_total(quantity, unit_price),
        )

    def with_quantity(self, quantity: Quantity) -> LineItem:
        return replace(self, quantity=quantity, total=line_total(quantity, self.unit_price))

    def with_unit_price(self, unit_price: Money) -> LineItem:
        _check_unit_price(unit_price)
        return replace(self, unit_price=unit_price, total=line_total(self.quantity, unit_price))


def _check_unit_price(unit_price: Money) -> None:
    if not unit_price.is_positive:
        raise ValidationError("Unit price must be greater than zero")
    # Whole cents only, so every stored total is exact.
    if unit_price.amount != unit_price.quantized():
        raise ValidationError(f"Unit price {unit_price.amount} has more than two decimal places")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order:
    """Aggregate root for purchase orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    order_number: str
    created_by: int
    items: list[LineItem]
    total: Money
    status: OrderStatus = OrderStatus.DRAFT
    notes: str | None = None
    approved_by: int | None = None
    approved_at: datetime | None = None
    lifecycle: Lifecycle = Lifecycle.ACTIVE
    deleted_at: datetime | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        items: list[LineItem],
        created_by: int,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> Order:
        """Create a new draft order, enforcing all invariants."""
        if not items:
            raise EmptyOrderError("Order must have at least one item")
        now = now or _utcnow()
        return Order(
            id=None,
            order_number=order_number,
            created_by=created_by,
            items=list(items),
            total=order_total(items),
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    # --- Queries --------------------------------------------------------------

    def can_be_modified(self) -> bool:
        return self.status != OrderStatus.APPROVED

    def requires_approval(self, threshold: Money = APPROVAL_THRESHOLD) -> bool:
        return self.total >= threshold

    @property
    def is_deleted(self) -> bool:
        return self.lifecycle == Lifecycle.DELETED

    # --- Content edits (not audited) ------------------------------------------

    def replace_contents(
        self,
        notes: str | None,
        items: list[LineItem],
        now: datetime | None = None,
    ) -> None:
        """Replace notes and the whole item set.

        ``notes=None`` keeps the current notes.  Status is untouched, so a
        rejected order edited here still has to be submitted again.
        """
        if not self.can_be_modified():
            raise ImmutableStateError(
                f"Order {self.order_number} is {self.status.value} and cannot be modified"
            )
        if not items:
            raise EmptyOrderError("Order must have at least one item")
        if notes is not None:
            self.notes = notes
        self.items = list(items)
        self.total = order_total(self.items)
        self.updated_at = now or _utcnow()

    # --- State transitions ----------------------------------------------------

    def submit(
        self,
        actor_id: int,
        threshold: Money = APPROVAL_THRESHOLD,
        now: datetime | None = None,
    ) -> StatusChange:
        """Transition DRAFT|REJECTED -> PENDING_APPROVAL, or straight to
        APPROVED when the total is below the approval threshold."""
        ensure_transition_allowed(Trigger.SUBMIT, self.status)
        if not self.items:
            raise EmptyOrderError("Order must have at least one item")

        now = now or _utcnow()
        if self.requires_approval(threshold):
            return self._move_to(OrderStatus.PENDING_APPROVAL, actor_id, None, now)
        self.approved_by = actor_id
        self.approved_at = now
        return self._move_to(OrderStatus.APPROVED, actor_id, None, now)

    def approve(
        self,
        actor_id: int,
        comment: str | None = None,
        now: datetime | None = None,
    ) -> StatusChange:
        """Transition PENDING_APPROVAL -> APPROVED."""
        ensure_transition_allowed(Trigger.APPROVE, self.status)
        now = now or _utcnow()
        self.approved_by = actor_id
        self.approved_at = now
        return self._move_to(OrderStatus.APPROVED, actor_id, comment, now)

    def reject(
        self,
        actor_id: int,
        comment: str | None,
        now: datetime | None = None,
    ) -> StatusChange:
        """Transition PENDING_APPROVAL -> REJECTED.  A comment is mandatory."""
        ensure_transition_allowed(Trigger.REJECT, self.status)
        if comment is None or not comment.strip():
            raise MissingCommentError("A comment is required to reject an order")
        return self._move_to(OrderStatus.REJECTED, actor_id, comment, now or _utcnow())

    # --- Soft deletion --------------------------------------------------------

    def soft_delete(self, now: datetime | None = None) -> None:
        now = now or _utcnow()
        self.lifecycle = Lifecycle.DELETED
        self.deleted_at = now
        self.updated_at = now

    def restore(self, now: datetime | None = None) -> None:
        self.lifecycle = Lifecycle.ACTIVE
        self.deleted_at = None
        self.updated_at = now or _utcnow()

    # --- Internal helpers -----------------------------------------------------

    def _move_to(
        self,
        to_status: OrderStatus,
        actor_id: int,
        comment: str | None,
        now: datetime,
    ) -> StatusChange:
        change = StatusChange(
            from_status=self.status,
            to_status=to_status,
            actor_id=actor_id,
            comment=comment,
        )
        self.status = to_status
        self.updated_at = now
        return change
