"""Application services: soft-delete and restore.

Deleted orders disappear from normal lookups but keep their row, their
order number and their history, so they can be brought back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from poflow.application.dto import OrderDTO
from poflow.application.support import load_order, reload_order, require_actor, utcnow
from poflow.domain.exceptions import InvalidTransitionError
from poflow.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class DeleteOrderHandler:

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, order_id: int, actor_id: int) -> None:
        with self._uow as uow:
            require_actor(uow, actor_id)
            order = load_order(uow, order_id, for_update=True)
            order.soft_delete(now=self._clock())
            uow.orders.save(order)
            uow.commit()
            logger.info("Order %s deleted by user #%s", order.order_number, actor_id)


class RestoreOrderHandler:

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, order_id: int, actor_id: int) -> OrderDTO:
        with self._uow as uow:
            require_actor(uow, actor_id)
            order = load_order(uow, order_id, for_update=True, include_deleted=True)
            if not order.is_deleted:
                raise InvalidTransitionError(f"Order #{order_id} is not deleted")
            order.restore(now=self._clock())
            uow.orders.save(order)
            uow.commit()
            logger.info("Order %s restored by user #%s", order.order_number, actor_id)
            return reload_order(uow, order_id)
