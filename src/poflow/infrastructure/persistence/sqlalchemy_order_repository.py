"""SQLAlchemy-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from poflow.domain.model.order import LineItem, Lifecycle, Order, OrderStatus
from poflow.domain.model.value_objects import Money, Quantity
from poflow.domain.repository.order_repository import OrderRepository
from poflow.infrastructure.persistence.errors import translate_integrity_errors
from poflow.infrastructure.persistence.tables import OrderItemRow, OrderRow


class SqlAlchemyOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(
        self,
        order_id: int,
        *,
        for_update: bool = False,
        include_deleted: bool = False,
    ) -> Order | None:
        stmt = (
            select(OrderRow)
            .where(OrderRow.id == order_id)
            .options(selectinload(OrderRow.items))
            .execution_options(populate_existing=True)
        )
        if not include_deleted:
            stmt = stmt.where(OrderRow.deleted_at.is_(None))
        if for_update:
            stmt = stmt.with_for_update(of=OrderRow)
        row = self._session.scalars(stmt).first()
        return None if row is None else self._to_domain(row)

    def list_all(self, include_deleted: bool = False) -> list[Order]:
        stmt = (
            select(OrderRow)
            .options(selectinload(OrderRow.items))
            .order_by(OrderRow.created_at.desc(), OrderRow.id.desc())
        )
        if not include_deleted:
            stmt = stmt.where(OrderRow.deleted_at.is_(None))
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def add(self, order: Order) -> None:
        row = OrderRow(order_number=order.order_number)
        self._copy_fields(order, row)
        row.created_by = order.created_by
        row.created_at = order.created_at
        row.items = [self._item_row(item) for item in order.items]
        self._session.add(row)

        with translate_integrity_errors():
            self._session.flush()
        order.id = row.id

    def save(self, order: Order) -> None:
        row = self._session.get(OrderRow, order.id)
        if row is None:
            raise LookupError(f"Order #{order.id} was never added")
        self._copy_fields(order, row)
        # delete-orphan removes the old rows on flush
        row.items = [self._item_row(item) for item in order.items]

        with translate_integrity_errors():
            self._session.flush()

    def count_all(self) -> int:
        return self._session.scalar(select(func.count()).select_from(OrderRow)) or 0

    def order_number_exists(self, order_number: str) -> bool:
        stmt = select(OrderRow.id).where(OrderRow.order_number == order_number).limit(1)
        return self._session.scalars(stmt).first() is not None

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _copy_fields(order: Order, row: OrderRow) -> None:
        row.status = order.status.value
        row.total_amount = order.total.quantized()
        row.notes = order.notes
        row.approved_by = order.approved_by
        row.approved_at = order.approved_at
        row.deleted_at = order.deleted_at if order.is_deleted else None
        row.updated_at = order.updated_at

    @staticmethod
    def _item_row(item: LineItem) -> OrderItemRow:
        return OrderItemRow(
            product_name=item.product_name,
            description=item.description,
            quantity=item.quantity.value,
            unit_price=item.unit_price.quantized(),
            total_price=item.total.quantized(),
        )

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        items = [
            LineItem(
                product_name=i.product_name,
                description=i.description,
                quantity=Quantity(i.quantity),
                unit_price=Money(i.unit_price),
                total=Money(i.total_price),
            )
            for i in row.items
        ]
        return Order(
            id=row.id,
            order_number=row.order_number,
            created_by=row.created_by,
            items=items,
            total=Money(row.total_amount),
            status=OrderStatus(row.status),
            notes=row.notes,
            approved_by=row.approved_by,
            approved_at=_aware(row.approved_at),
            lifecycle=Lifecycle.ACTIVE if row.deleted_at is None else Lifecycle.DELETED,
            deleted_at=_aware(row.deleted_at),
            created_at=_aware(row.created_at),
            updated_at=_aware(row.updated_at),
        )


def _aware(moment: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything is stored as UTC."""
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
