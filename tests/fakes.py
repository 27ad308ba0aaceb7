"""In-memory fake unit of work for testing.

Implements the same abstract interfaces as the SQLAlchemy repositories but
keeps everything in dicts.  Writes are staged on deep copies and only
become visible to later units of work on ``commit()``, so rollback
behaves like the real thing.
"""

from __future__ import annotations

import copy
from dataclasses import replace
from datetime import datetime

from poflow.domain.exceptions import RetryableConflictError
from poflow.domain.model.actor import Actor
from poflow.domain.model.history import StatusHistoryEntry
from poflow.domain.model.order import Order
from poflow.domain.repository.actor_repository import ActorRepository
from poflow.domain.repository.history_repository import StatusHistoryRepository
from poflow.domain.repository.order_repository import OrderRepository
from poflow.domain.repository.unit_of_work import UnitOfWork


class FakeStore:
    """The 'database': committed state shared by every unit of work."""

    def __init__(self) -> None:
        self.orders: dict[int, Order] = {}
        self.history: list[StatusHistoryEntry] = []
        self.actors: dict[int, Actor] = {}
        self.next_order_id = 1
        self.next_history_id = 1
        self.next_actor_id = 1

    def add_actor(self, name: str = "Alice", email: str | None = None) -> Actor:
        actor = Actor(id=self.next_actor_id, name=name, email=email or f"{name.lower()}@example.com")
        self.actors[actor.id] = actor
        self.next_actor_id += 1
        return actor

    def snapshot(self) -> FakeStore:
        return copy.deepcopy(self)


class FakeOrderRepository(OrderRepository):

    def __init__(self, state: FakeStore) -> None:
        self._state = state

    def get_by_id(self, order_id, *, for_update=False, include_deleted=False):
        order = self._state.orders.get(order_id)
        if order is None or (order.is_deleted and not include_deleted):
            return None
        return copy.deepcopy(order)

    def list_all(self, include_deleted=False):
        orders = [o for o in self._state.orders.values() if include_deleted or not o.is_deleted]
        return [copy.deepcopy(o) for o in sorted(orders, key=lambda o: o.id, reverse=True)]

    def add(self, order: Order) -> None:
        if self.order_number_exists(order.order_number):
            raise RetryableConflictError("Order number already taken")
        order.id = self._state.next_order_id
        self._state.next_order_id += 1
        self._state.orders[order.id] = copy.deepcopy(order)

    def save(self, order: Order) -> None:
        self._state.orders[order.id] = copy.deepcopy(order)

    def count_all(self) -> int:
        return len(self._state.orders)

    def order_number_exists(self, order_number: str) -> bool:
        return any(o.order_number == order_number for o in self._state.orders.values())


class FakeStatusHistoryRepository(StatusHistoryRepository):

    def __init__(self, state: FakeStore) -> None:
        self._state = state

    def append(self, order_id, from_status, to_status, actor_id, comment, created_at: datetime):
        entry = StatusHistoryEntry(
            id=self._state.next_history_id,
            order_id=order_id,
            from_status=from_status,
            to_status=to_status,
            actor_id=actor_id,
            comment=comment,
            created_at=created_at,
        )
        self._state.next_history_id += 1
        self._state.history.append(entry)
        return entry

    def list_for(self, order_id, newest_first=False):
        entries = sorted(
            (e for e in self._state.history if e.order_id == order_id),
            key=lambda e: (e.created_at, e.id),
            reverse=newest_first,
        )
        actors = self._state.actors
        return [
            replace(e, actor_name=actors[e.actor_id].name if e.actor_id in actors else None)
            for e in entries
        ]


class FakeActorRepository(ActorRepository):

    def __init__(self, state: FakeStore) -> None:
        self._state = state

    def get_by_id(self, actor_id):
        return self._state.actors.get(actor_id)

    def get_by_email(self, email):
        for a in self._state.actors.values():
            if a.email == email.strip().lower():
                return a
        return None

    def list_all(self):
        return sorted(self._state.actors.values(), key=lambda a: a.id)

    def add(self, actor):
        stored = replace(actor, id=self._state.next_actor_id)
        self._state.next_actor_id += 1
        self._state.actors[stored.id] = stored
        return stored


class FakeUnitOfWork(UnitOfWork):

    def __init__(self, store: FakeStore | None = None) -> None:
        self.store = store or FakeStore()
        self.commits = 0
        self.fail_next_commit: Exception | None = None
        self._staged: FakeStore | None = None

    def _begin(self) -> None:
        self._staged = self.store.snapshot()
        self.orders = FakeOrderRepository(self._staged)
        self.history = FakeStatusHistoryRepository(self._staged)
        self.actors = FakeActorRepository(self._staged)

    def commit(self) -> None:
        if self.fail_next_commit is not None:
            exc, self.fail_next_commit = self.fail_next_commit, None
            raise exc
        self.store.__dict__.update(self._staged.snapshot().__dict__)
        self.commits += 1

    def rollback(self) -> None:
        self._staged = self.store.snapshot()

    def _end(self) -> None:
        self._staged = None
