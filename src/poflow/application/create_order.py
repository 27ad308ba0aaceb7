"""Application service: Create Order use case.

Builds the draft order, claims an order number and writes the order, its
items and the initial history entry in one unit of work.

The order number is probed before the insert but only claimed by the
commit.  If a concurrent creation wins the race, the unique constraint
rejects our insert with a RetryableConflictError and the whole creation
is run again with a freshly generated number.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from poflow.application.dto import LineItemSpec, OrderDTO
from poflow.application.support import build_line_items, reload_order, require_actor, utcnow
from poflow.domain.exceptions import ConflictError, EmptyOrderError, RetryableConflictError
from poflow.domain.model.order import Order, OrderStatus
from poflow.domain.repository.unit_of_work import UnitOfWork
from poflow.domain.service.order_number_generator import OrderNumberGenerator

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


class CreateOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utcnow,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._uow = uow
        self._clock = clock
        self._max_attempts = max(1, max_attempts)

    def handle(
        self,
        notes: str | None,
        items: list[LineItemSpec],
        actor_id: int,
    ) -> OrderDTO:
        """Create a new draft order and return it as stored."""
        if not items:
            raise EmptyOrderError("Order must have at least one item")
        line_items = build_line_items(items)

        for attempt in range(1, self._max_attempts + 1):
            try:
                return self._create_once(notes, line_items, actor_id)
            except RetryableConflictError as exc:
                logger.warning(
                    "Order number conflict on attempt %d/%d: %s",
                    attempt, self._max_attempts, exc,
                )

        raise ConflictError(
            f"Could not allocate a unique order number after {self._max_attempts} attempts"
        )

    def _create_once(self, notes, line_items, actor_id) -> OrderDTO:
        with self._uow as uow:
            require_actor(uow, actor_id)
            number = OrderNumberGenerator(uow.orders, self._clock).generate()
            now = self._clock()

            order = Order.create(
                order_number=number,
                items=line_items,
                created_by=actor_id,
                notes=notes,
                now=now,
            )
            uow.orders.add(order)
            uow.history.append(order.id, None, OrderStatus.DRAFT, actor_id, None, now)
            uow.commit()

            logger.info("Created order %s (#%s, total %s) by user #%s",
                        order.order_number, order.id, order.total, actor_id)
            return reload_order(uow, order.id)
