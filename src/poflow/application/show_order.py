"""Application services: order queries (show, list, history)."""

from __future__ import annotations

from poflow.application.dto import HistoryEntryDTO, OrderDTO
from poflow.application.support import history_to_dto, load_order, order_to_dto
from poflow.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, include_deleted: bool = False) -> OrderDTO:
        with self._uow as uow:
            return order_to_dto(load_order(uow, order_id, include_deleted=include_deleted))


class ListOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, include_deleted: bool = False) -> list[OrderDTO]:
        with self._uow as uow:
            return [order_to_dto(o) for o in uow.orders.list_all(include_deleted)]


class OrderHistoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, newest_first: bool = False) -> list[HistoryEntryDTO]:
        """Return the audit trail of one order.

        Deleted orders keep their history; it stays readable.
        """
        with self._uow as uow:
            load_order(uow, order_id, include_deleted=True)
            entries = uow.history.list_for(order_id, newest_first=newest_first)
            return [history_to_dto(e) for e in entries]
