"""Application service: Submit Order use case.

Orders at or above the approval threshold wait for a decision; cheaper
orders are approved on the spot with the submitter as approver.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from poflow.application.dto import OrderDTO
from poflow.application.support import load_order, reload_order, require_actor, utcnow
from poflow.domain.model.order import APPROVAL_THRESHOLD
from poflow.domain.model.value_objects import Money
from poflow.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class SubmitOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        threshold: Money = APPROVAL_THRESHOLD,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow = uow
        self._threshold = threshold
        self._clock = clock

    def handle(self, order_id: int, actor_id: int) -> OrderDTO:
        with self._uow as uow:
            require_actor(uow, actor_id)
            order = load_order(uow, order_id, for_update=True)

            now = self._clock()
            change = order.submit(actor_id, threshold=self._threshold, now=now)
            uow.orders.save(order)
            uow.history.record(order_id, change, now)
            uow.commit()

            logger.info("Order %s submitted by user #%s: %s -> %s",
                        order.order_number, actor_id,
                        change.from_status.value, change.to_status.value)
            return reload_order(uow, order_id)
