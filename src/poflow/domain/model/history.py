"""Status history entry — one immutable row of the audit trail."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from poflow.domain.model.order import OrderStatus


@dataclass(frozen=True)
class StatusHistoryEntry:
    """``from_status`` is None only for the record written at creation."""

    id: int
    order_id: int
    from_status: OrderStatus | None
    to_status: OrderStatus
    actor_id: int
    comment: str | None
    created_at: datetime
    actor_name: str | None = None  # resolved on read, for display
