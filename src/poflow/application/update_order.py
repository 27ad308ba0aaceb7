"""Application service: Update Order use case.

Replaces notes and the complete item set.  Content edits are not status
transitions, so no history entry is written.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from poflow.application.dto import LineItemSpec, OrderDTO
from poflow.application.support import (
    build_line_items,
    load_order,
    reload_order,
    require_actor,
    utcnow,
)
from poflow.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class UpdateOrderHandler:

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def handle(
        self,
        order_id: int,
        notes: str | None,
        items: list[LineItemSpec],
        actor_id: int,
    ) -> OrderDTO:
        line_items = build_line_items(items)

        with self._uow as uow:
            require_actor(uow, actor_id)
            order = load_order(uow, order_id, for_update=True)

            order.replace_contents(notes, line_items, now=self._clock())
            uow.orders.save(order)
            uow.commit()

            logger.info("Updated order %s: %d item(s), total %s, by user #%s",
                        order.order_number, len(order.items), order.total, actor_id)
            return reload_order(uow, order_id)
