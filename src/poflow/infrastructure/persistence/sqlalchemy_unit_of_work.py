"""SQLAlchemy implementation of the unit of work.

One Session per ``with`` block; the repositories share it, so the order,
its items and its history entry are flushed into the same transaction
and committed (or rolled back) together.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from poflow.domain.repository.unit_of_work import UnitOfWork
from poflow.infrastructure.persistence.errors import translate_integrity_errors
from poflow.infrastructure.persistence.sqlalchemy_actor_repository import (
    SqlAlchemyActorRepository,
)
from poflow.infrastructure.persistence.sqlalchemy_history_repository import (
    SqlAlchemyStatusHistoryRepository,
)
from poflow.infrastructure.persistence.sqlalchemy_order_repository import (
    SqlAlchemyOrderRepository,
)

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def _begin(self) -> None:
        if self._session is not None:
            raise RuntimeError("Unit of work is already in use")
        self._session = self._session_factory()
        self.orders = SqlAlchemyOrderRepository(self._session)
        self.history = SqlAlchemyStatusHistoryRepository(self._session)
        self.actors = SqlAlchemyActorRepository(self._session)

    def commit(self) -> None:
        try:
            with translate_integrity_errors():
                self._session.commit()
        except SQLAlchemyError:
            logger.error("Commit failed; rolling back", exc_info=True)
            raise

    def rollback(self) -> None:
        self._session.rollback()

    def _end(self) -> None:
        self._session.close()
        self._session = None
