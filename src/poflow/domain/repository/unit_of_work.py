"""Abstract unit of work — the atomic-transaction boundary.

An order, its items and its ledger entry are only ever written together
through one unit of work::

    with uow:
        order = uow.orders.get_by_id(order_id, for_update=True)
        ...
        uow.commit()

Leaving the block without ``commit()``, or by an exception, rolls every
staged write back.  A unit of work can be entered again after it exits;
each ``with`` starts a fresh transaction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from poflow.domain.repository.actor_repository import ActorRepository
from poflow.domain.repository.history_repository import StatusHistoryRepository
from poflow.domain.repository.order_repository import OrderRepository


class UnitOfWork(ABC):

    orders: OrderRepository
    history: StatusHistoryRepository
    actors: ActorRepository

    def __enter__(self) -> UnitOfWork:
        self._begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self._end()

    @abstractmethod
    def commit(self) -> None:
        """Make every staged write durable.

        Raises RetryableConflictError if a unique order number was taken
        by a concurrent writer.
        """

    @abstractmethod
    def rollback(self) -> None:
        """Discard everything not yet committed (a no-op after commit)."""

    @abstractmethod
    def _begin(self) -> None:
        """Open the transaction and bind the repositories to it."""

    def _end(self) -> None:
        """Release transaction resources."""
