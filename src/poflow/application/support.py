"""Helpers shared by the order use cases.

Loading with the right error, resolving the acting user, turning input
specs into line items, and mapping aggregates to DTOs.
"""

from __future__ import annotations

from datetime import datetime, timezone

from poflow.application.dto import HistoryEntryDTO, LineItemDTO, LineItemSpec, OrderDTO
from poflow.domain.exceptions import EntityNotFoundError, UnknownActorError
from poflow.domain.model.actor import Actor
from poflow.domain.model.history import StatusHistoryEntry
from poflow.domain.model.order import LineItem, Order
from poflow.domain.model.value_objects import Money, Quantity
from poflow.domain.repository.unit_of_work import UnitOfWork

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def require_actor(uow: UnitOfWork, actor_id: int) -> Actor:
    actor = uow.actors.get_by_id(actor_id)
    if actor is None:
        raise UnknownActorError(f"Unknown user #{actor_id}")
    return actor


def load_order(
    uow: UnitOfWork,
    order_id: int,
    *,
    for_update: bool = False,
    include_deleted: bool = False,
) -> Order:
    order = uow.orders.get_by_id(
        order_id, for_update=for_update, include_deleted=include_deleted
    )
    if order is None:
        raise EntityNotFoundError(f"Order #{order_id} not found")
    return order


def build_line_items(specs: list[LineItemSpec]) -> list[LineItem]:
    return [
        LineItem.create(
            product_name=spec.product_name,
            description=spec.description,
            quantity=Quantity(spec.quantity),
            unit_price=Money.of(spec.unit_price),
        )
        for spec in specs
    ]


# --- Mapping ------------------------------------------------------------------


def _fmt(moment: datetime | None) -> str | None:
    if moment is None:
        return None
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(TIMESTAMP_FORMAT)


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        status=order.status.value,
        notes=order.notes,
        items=[
            LineItemDTO(
                product_name=item.product_name,
                description=item.description,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                total=str(item.total),
            )
            for item in order.items
        ],
        total=str(order.total),
        created_by=order.created_by,
        approved_by=order.approved_by,
        approved_at=_fmt(order.approved_at),
        deleted=order.is_deleted,
        created_at=_fmt(order.created_at),  # type: ignore[arg-type]
        updated_at=_fmt(order.updated_at),  # type: ignore[arg-type]
    )


def history_to_dto(entry: StatusHistoryEntry) -> HistoryEntryDTO:
    return HistoryEntryDTO(
        id=entry.id,
        from_status=entry.from_status.value if entry.from_status else None,
        to_status=entry.to_status.value,
        actor_id=entry.actor_id,
        actor_name=entry.actor_name,
        comment=entry.comment,
        created_at=_fmt(entry.created_at),  # type: ignore[arg-type]
    )


def reload_order(uow: UnitOfWork, order_id: int) -> OrderDTO:
    """Read the committed order back, items included."""
    return order_to_dto(load_order(uow, order_id, include_deleted=True))
