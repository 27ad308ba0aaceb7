"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the outer layers (CLI, or an HTTP layer) and the
application layer without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class LineItemSpec:
    """Input: one requested product line."""

    product_name: str
    quantity: int
    unit_price: str | int | Decimal
    description: str | None = None


@dataclass(frozen=True)
class LineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_name: str
    description: str | None
    quantity: int
    unit_price: str  # formatted, e.g. "100.00"
    total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    order_number: str
    status: str
    notes: str | None
    items: list[LineItemDTO]
    total: str
    created_by: int
    approved_by: int | None
    approved_at: str | None
    deleted: bool
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class HistoryEntryDTO:
    """Output: one status change from the audit trail."""

    id: int
    from_status: str | None
    to_status: str
    actor_id: int
    actor_name: str | None
    comment: str | None
    created_at: str


@dataclass(frozen=True)
class ActorDTO:

    id: int
    name: str
    email: str
