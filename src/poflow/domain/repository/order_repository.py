"""Abstract repository for Order aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  All methods run inside the caller's unit of work; none
of them commit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from poflow.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(
        self,
        order_id: int,
        *,
        for_update: bool = False,
        include_deleted: bool = False,
    ) -> Order | None:
        """Return an order with its items, or None if not found.

        Soft-deleted orders are hidden unless *include_deleted*.  With
        *for_update* the row stays locked until the unit of work ends.
        """

    @abstractmethod
    def list_all(self, include_deleted: bool = False) -> list[Order]:
        """Return orders, newest first."""

    @abstractmethod
    def add(self, order: Order) -> None:
        """Stage a new order and assign its ``id``."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Stage field changes and replace the stored item set wholesale."""

    @abstractmethod
    def count_all(self) -> int:
        """Count every order row, soft-deleted ones included."""

    @abstractmethod
    def order_number_exists(self, order_number: str) -> bool:
        """True if any row, deleted or not, holds *order_number*."""
