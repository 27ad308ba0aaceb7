"""Integration tests for the CreateOrder use case.

Uses the in-memory fake unit of work — no database.
"""

from datetime import datetime, timezone

import pytest

from poflow.application.create_order import CreateOrderHandler
from poflow.application.dto import LineItemSpec
from poflow.application.show_order import OrderHistoryHandler
from poflow.domain.exceptions import (
    ConflictError,
    EmptyOrderError,
    RetryableConflictError,
    UnknownActorError,
    ValidationError,
)
from poflow.domain.model.order import OrderStatus
from tests.fakes import FakeStore, FakeUnitOfWork

NOW = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def _setup() -> tuple[CreateOrderHandler, FakeUnitOfWork]:
    store = FakeStore()
    store.add_actor("Alice")
    uow = FakeUnitOfWork(store)
    return CreateOrderHandler(uow, clock=lambda: NOW), uow


def _items() -> list[LineItemSpec]:
    return [
        LineItemSpec("Chair", 2, "100.00"),
        LineItemSpec("Lamp", 1, "50.00", description="brass"),
    ]


class TestCreateOrderHappyPath:

    def test_round_trip_totals(self):
        handler, _ = _setup()
        dto = handler.handle("for the new office", _items(), actor_id=1)
        assert dto.total == "250.00"
        assert len(dto.items) == 2
        assert dto.items[0].total == "200.00"
        assert dto.items[1].description == "brass"

    def test_new_order_is_draft(self):
        handler, _ = _setup()
        dto = handler.handle(None, _items(), actor_id=1)
        assert dto.status == "draft"
        assert dto.created_by == 1
        assert dto.approved_by is None

    def test_assigns_id_and_number(self):
        handler, _ = _setup()
        dto = handler.handle(None, _items(), actor_id=1)
        assert dto.id == 1
        assert dto.order_number == "ORD-20240301-0001"

    def test_sequential_numbers(self):
        handler, _ = _setup()
        first = handler.handle(None, _items(), actor_id=1)
        second = handler.handle(None, _items(), actor_id=1)
        assert second.order_number == "ORD-20240301-0002"
        assert first.order_number != second.order_number

    def test_writes_initial_history_entry(self):
        handler, uow = _setup()
        dto = handler.handle(None, _items(), actor_id=1)

        history = OrderHistoryHandler(uow).handle(dto.id)
        assert len(history) == 1
        assert history[0].from_status is None
        assert history[0].to_status == "draft"
        assert history[0].actor_name == "Alice"


class TestCreateOrderValidation:

    def test_empty_items_rejected(self):
        handler, uow = _setup()
        with pytest.raises(EmptyOrderError):
            handler.handle(None, [], actor_id=1)
        assert uow.store.orders == {}

    def test_unknown_actor_rejected(self):
        handler, uow = _setup()
        with pytest.raises(UnknownActorError, match="Unknown user #99"):
            handler.handle(None, _items(), actor_id=99)
        assert uow.store.orders == {}

    def test_zero_quantity_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="must be positive"):
            handler.handle(None, [LineItemSpec("Chair", 0, "10.00")], actor_id=1)

    @pytest.mark.parametrize("price", ["1e30", "1234567890123456.78"])
    def test_oversized_price_rejected(self, price):
        handler, uow = _setup()
        with pytest.raises(ValidationError, match="exceeds the maximum"):
            handler.handle(None, [LineItemSpec("Chair", 1, price)], actor_id=1)
        assert uow.store.orders == {}

    def test_total_beyond_storage_rejected(self):
        handler, uow = _setup()
        with pytest.raises(ValidationError, match="exceeds the maximum"):
            handler.handle(None, [LineItemSpec("Chair", 2, "9000000000.00")], actor_id=1)
        assert uow.store.orders == {}


class TestCreateOrderConflicts:

    def test_retries_after_conflict_at_commit(self):
        handler, uow = _setup()
        uow.fail_next_commit = RetryableConflictError("taken")

        dto = handler.handle(None, _items(), actor_id=1)

        assert dto.status == "draft"
        assert uow.commits == 1
        assert len(uow.store.orders) == 1
        assert len(uow.store.history) == 1

    def test_gives_up_after_max_attempts(self):
        store = FakeStore()
        store.add_actor("Alice")
        uow = FakeUnitOfWork(store)
        attempts = []

        def always_conflict():
            attempts.append(1)
            raise RetryableConflictError("taken")

        uow.commit = always_conflict
        handler = CreateOrderHandler(uow, clock=lambda: NOW, max_attempts=3)

        with pytest.raises(ConflictError, match="after 3 attempts") as info:
            handler.handle(None, _items(), actor_id=1)

        assert not isinstance(info.value, RetryableConflictError)
        assert len(attempts) == 3
        assert store.orders == {}
        assert store.history == []

    def test_failed_commit_leaves_nothing_behind(self):
        handler, uow = _setup()
        uow.fail_next_commit = RuntimeError("disk full")

        with pytest.raises(RuntimeError):
            handler.handle(None, _items(), actor_id=1)

        assert uow.store.orders == {}
        assert uow.store.history == []

    def test_created_order_has_draft_status_in_store(self):
        handler, uow = _setup()
        dto = handler.handle(None, _items(), actor_id=1)
        assert uow.store.orders[dto.id].status == OrderStatus.DRAFT
