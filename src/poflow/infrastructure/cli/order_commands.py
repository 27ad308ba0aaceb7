"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from poflow.application.create_order import CreateOrderHandler
from poflow.application.decide_order import ApproveOrderHandler, RejectOrderHandler
from poflow.application.delete_order import DeleteOrderHandler, RestoreOrderHandler
from poflow.application.dto import LineItemSpec, OrderDTO
from poflow.application.show_order import ListOrdersHandler, OrderHistoryHandler, ShowOrderHandler
from poflow.application.submit_order import SubmitOrderHandler
from poflow.application.update_order import UpdateOrderHandler
from poflow.domain.exceptions import DomainException
from poflow.infrastructure.bootstrap import unit_of_work
from poflow.infrastructure.cli.errors import DomainCommandError
from poflow.infrastructure.config import Settings

ITEM_HELP = "Line item as 'Product:Qty:UnitPrice[:Description]'. Repeatable."
ACTOR_HELP = "ID of the acting user."


def _parse_items(raw_items: tuple[str, ...]) -> list[LineItemSpec]:
    """Parse ('Widget:3:15.00', 'Gadget:1:9.99:blue') into LineItemSpecs."""
    specs: list[LineItemSpec] = []
    for raw in raw_items:
        parts = raw.split(":", 3)
        if len(parts) < 3:
            raise click.BadParameter(
                f"Invalid item format '{raw}'. Expected 'Product:Qty:UnitPrice[:Description]'."
            )
        name, qty_str, price = (p.strip() for p in parts[:3])
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{name}'."
            )
        description = parts[3].strip() if len(parts) == 4 else None
        specs.append(LineItemSpec(name, qty, price, description or None))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    deleted = "  [deleted]" if dto.deleted else ""
    click.echo(f"Order {dto.order_number} (#{dto.id})  status={dto.status}{deleted}")
    click.echo(f"Created:  {dto.created_at} by user #{dto.created_by}")
    if dto.approved_by is not None:
        click.echo(f"Approved: {dto.approved_at} by user #{dto.approved_by}")
    if dto.notes:
        click.echo(f"Notes:    {dto.notes}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*56}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>5} {item.unit_price:>12} {item.total:>12}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Order Total':<30} {dto.total:>26}")


@click.command("create")
@click.option("--actor", "actor_id", required=True, type=int, help=ACTOR_HELP)
@click.option("--item", "items", required=True, multiple=True, help=ITEM_HELP)
@click.option("--notes", default=None, help="Free-text notes.")
@click.pass_obj
def order_create(settings: Settings, actor_id: int, items: tuple[str, ...], notes: str | None) -> None:
    """Create a new draft purchase order."""
    specs = _parse_items(items)
    handler = CreateOrderHandler(
        unit_of_work(settings.database_url),
        max_attempts=settings.create_attempts,
    )

    try:
        dto = handler.handle(notes=notes, items=specs, actor_id=actor_id)
    except DomainException as exc:
        raise DomainCommandError(exc)

    _display_order(dto)


@click.command("update")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to update.")
@click.option("--actor", "actor_id", required=True, type=int, help=ACTOR_HELP)
@click.option("--item", "items", required=True, multiple=True, help=ITEM_HELP)
@click.option("--notes", default=None, help="Replacement notes (kept if omitted).")
@click.pass_obj
def order_update(
    settings: Settings,
    order_id: int,
    actor_id: int,
    items: tuple[str, ...],
    notes: str | None,
) -> None:
    """Replace the notes and all items of an order."""
    specs = _parse_items(items)
    handler = UpdateOrderHandler(unit_of_work(settings.database_url))

    try:
        dto = handler.handle(order_id, notes=notes, items=specs, actor_id=actor_id)
    except DomainException as exc:
        raise DomainCommandError(exc)

    _display_order(dto)


@click.command("submit")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to submit.")
@click.option("--actor", "actor_id", required=True, type=int, help=ACTOR_HELP)
@click.pass_obj
def order_submit(settings: Settings, order_id: int, actor_id: int) -> None:
    """Submit an order for approval (small orders are approved at once)."""
    handler = SubmitOrderHandler(
        unit_of_work(settings.database_url),
        threshold=settings.approval_threshold,
    )

    try:
        dto = handler.handle(order_id, actor_id)
    except DomainException as exc:
        raise DomainCommandError(exc)

    click.echo(f"Order {dto.order_number} submitted — status={dto.status}")


@click.command("approve")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to approve.")
@click.option("--actor", "actor_id", required=True, type=int, help=ACTOR_HELP)
@click.option("--comment", default=None, help="Optional approval comment.")
@click.pass_obj
def order_approve(settings: Settings, order_id: int, actor_id: int, comment: str | None) -> None:
    """Approve an order waiting for approval."""
    handler = ApproveOrderHandler(unit_of_work(settings.database_url))

    try:
        dto = handler.handle(order_id, actor_id, comment)
    except DomainException as exc:
        raise DomainCommandError(exc)

    click.echo(f"Order {dto.order_number} approved by user #{dto.approved_by}.")


@click.command("reject")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to reject.")
@click.option("--actor", "actor_id", required=True, type=int, help=ACTOR_HELP)
@click.option("--comment", required=True, help="Reason for the rejection.")
@click.pass_obj
def order_reject(settings: Settings, order_id: int, actor_id: int, comment: str) -> None:
    """Reject an order waiting for approval."""
    handler = RejectOrderHandler(unit_of_work(settings.database_url))

    try:
        dto = handler.handle(order_id, actor_id, comment)
    except DomainException as exc:
        raise DomainCommandError(exc)

    click.echo(f"Order {dto.order_number} rejected.")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.option("--include-deleted", is_flag=True, default=False, help="Also find deleted orders.")
@click.pass_obj
def order_show(settings: Settings, order_id: int, include_deleted: bool) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(unit_of_work(settings.database_url))

    try:
        dto = handler.handle(order_id, include_deleted=include_deleted)
    except DomainException as exc:
        raise DomainCommandError(exc)

    _display_order(dto)


@click.command("list")
@click.option("--include-deleted", is_flag=True, default=False, help="Also list deleted orders.")
@click.pass_obj
def order_list(settings: Settings, include_deleted: bool) -> None:
    """List orders, newest first."""
    orders = ListOrdersHandler(unit_of_work(settings.database_url)).handle(include_deleted)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Number':<22} {'Status':<18} {'Total':>12}")
    click.echo("-" * 61)
    for o in orders:
        status = f"{o.status} (deleted)" if o.deleted else o.status
        click.echo(f"{o.id:<6} {o.order_number:<22} {status:<18} {o.total:>12}")


@click.command("history")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--newest-first", is_flag=True, default=False, help="Most recent change first.")
@click.pass_obj
def order_history(settings: Settings, order_id: int, newest_first: bool) -> None:
    """Show the status history of an order."""
    handler = OrderHistoryHandler(unit_of_work(settings.database_url))

    try:
        entries = handler.handle(order_id, newest_first=newest_first)
    except DomainException as exc:
        raise DomainCommandError(exc)

    for e in entries:
        who = e.actor_name or f"user #{e.actor_id}"
        line = f"{e.created_at}  {e.from_status or '-':>16} -> {e.to_status:<16} by {who}"
        if e.comment:
            line += f"  ({e.comment})"
        click.echo(line)


@click.command("delete")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to delete.")
@click.option("--actor", "actor_id", required=True, type=int, help=ACTOR_HELP)
@click.pass_obj
def order_delete(settings: Settings, order_id: int, actor_id: int) -> None:
    """Soft-delete an order (it can be restored later)."""
    handler = DeleteOrderHandler(unit_of_work(settings.database_url))

    try:
        handler.handle(order_id, actor_id)
    except DomainException as exc:
        raise DomainCommandError(exc)

    click.echo(f"Order #{order_id} deleted.")


@click.command("restore")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to restore.")
@click.option("--actor", "actor_id", required=True, type=int, help=ACTOR_HELP)
@click.pass_obj
def order_restore(settings: Settings, order_id: int, actor_id: int) -> None:
    """Restore a soft-deleted order."""
    handler = RestoreOrderHandler(unit_of_work(settings.database_url))

    try:
        dto = handler.handle(order_id, actor_id)
    except DomainException as exc:
        raise DomainCommandError(exc)

    click.echo(f"Order {dto.order_number} restored.")
