"""SQLAlchemy-backed implementation of StatusHistoryRepository."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from poflow.domain.model.history import StatusHistoryEntry
from poflow.domain.model.order import OrderStatus
from poflow.domain.repository.history_repository import StatusHistoryRepository
from poflow.infrastructure.persistence.tables import StatusHistoryRow


class SqlAlchemyStatusHistoryRepository(StatusHistoryRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def append(
        self,
        order_id: int,
        from_status: OrderStatus | None,
        to_status: OrderStatus,
        actor_id: int,
        comment: str | None,
        created_at: datetime,
    ) -> StatusHistoryEntry:
        row = StatusHistoryRow(
            order_id=order_id,
            from_status=from_status.value if from_status else None,
            to_status=to_status.value,
            changed_by=actor_id,
            comments=comment,
            created_at=created_at,
        )
        self._session.add(row)
        self._session.flush()
        return self._to_domain(row, actor_name=None)

    def list_for(self, order_id: int, newest_first: bool = False) -> list[StatusHistoryEntry]:
        order_by = (
            (StatusHistoryRow.created_at.desc(), StatusHistoryRow.id.desc())
            if newest_first
            else (StatusHistoryRow.created_at, StatusHistoryRow.id)
        )
        stmt = (
            select(StatusHistoryRow)
            .options(joinedload(StatusHistoryRow.actor))
            .where(StatusHistoryRow.order_id == order_id)
            .order_by(*order_by)
        )
        return [
            self._to_domain(row, actor_name=row.actor.name if row.actor else None)
            for row in self._session.scalars(stmt)
        ]

    @staticmethod
    def _to_domain(row: StatusHistoryRow, actor_name: str | None) -> StatusHistoryEntry:
        created_at = row.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return StatusHistoryEntry(
            id=row.id,
            order_id=row.order_id,
            from_status=OrderStatus(row.from_status) if row.from_status else None,
            to_status=OrderStatus(row.to_status),
            actor_id=row.changed_by,
            comment=row.comments,
            created_at=created_at,
            actor_name=actor_name,
        )
