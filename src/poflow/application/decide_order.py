"""Application services: Approve Order and Reject Order use cases.

Both decide on an order waiting in PENDING_APPROVAL.  The row is locked
for the read-validate-write sequence, so when an approval and a rejection
race on the same order the second one sees the decided status and fails
its guard.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from poflow.application.dto import OrderDTO
from poflow.application.support import load_order, reload_order, require_actor, utcnow
from poflow.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class ApproveOrderHandler:

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, order_id: int, actor_id: int, comment: str | None = None) -> OrderDTO:
        with self._uow as uow:
            require_actor(uow, actor_id)
            order = load_order(uow, order_id, for_update=True)

            now = self._clock()
            change = order.approve(actor_id, comment, now=now)
            uow.orders.save(order)
            uow.history.record(order_id, change, now)
            uow.commit()

            logger.info("Order %s approved by user #%s", order.order_number, actor_id)
            return reload_order(uow, order_id)


class RejectOrderHandler:

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, order_id: int, actor_id: int, comment: str | None) -> OrderDTO:
        with self._uow as uow:
            require_actor(uow, actor_id)
            order = load_order(uow, order_id, for_update=True)

            now = self._clock()
            change = order.reject(actor_id, comment, now=now)
            uow.orders.save(order)
            uow.history.record(order_id, change, now)
            uow.commit()

            logger.info("Order %s rejected by user #%s", order.order_number, actor_id)
            return reload_order(uow, order_id)
