"""Abstract repository for the status history ledger.

Append-only: there is deliberately no update or delete method.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from poflow.domain.model.history import StatusHistoryEntry
from poflow.domain.model.order import OrderStatus, StatusChange


class StatusHistoryRepository(ABC):

    @abstractmethod
    def append(
        self,
        order_id: int,
        from_status: OrderStatus | None,
        to_status: OrderStatus,
        actor_id: int,
        comment: str | None,
        created_at: datetime,
    ) -> StatusHistoryEntry:
        """Stage one new ledger entry."""

    @abstractmethod
    def list_for(self, order_id: int, newest_first: bool = False) -> list[StatusHistoryEntry]:
        """Return the entries of one order in commit order (or reversed)."""

    def record(self, order_id: int, change: StatusChange, created_at: datetime) -> StatusHistoryEntry:
        return self.append(
            order_id,
            change.from_status,
            change.to_status,
            change.actor_id,
            change.comment,
            created_at,
        )
