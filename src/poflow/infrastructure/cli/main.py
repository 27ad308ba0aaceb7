import dataclasses

import click

from poflow.domain.exceptions import DomainException
from poflow.infrastructure.cli.actor_commands import actor_add, actor_list, db_init
from poflow.infrastructure.cli.errors import DomainCommandError
from poflow.infrastructure.cli.order_commands import (
    order_approve,
    order_create,
    order_delete,
    order_history,
    order_list,
    order_reject,
    order_restore,
    order_show,
    order_submit,
    order_update,
)
from poflow.infrastructure.config import Settings
from poflow.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--database-url", default=None, help="Overrides POFLOW_DATABASE_URL.")
@click.option("--log-level", default=None, help="Overrides POFLOW_LOG_LEVEL.")
@click.pass_context
def cli(ctx: click.Context, database_url: str | None, log_level: str | None) -> None:
    """poflow — purchase order approval workflow"""
    try:
        settings = Settings.from_env()
    except DomainException as exc:
        raise DomainCommandError(exc)

    overrides = {}
    if database_url:
        overrides["database_url"] = database_url
    if log_level:
        overrides["log_level"] = log_level.upper()
    settings = dataclasses.replace(settings, **overrides)

    configure_logging(settings.log_level)
    ctx.obj = settings


@cli.group()
def order() -> None:
    """Manage purchase orders."""


@cli.group()
def actor() -> None:
    """Manage users."""


@cli.group()
def db() -> None:
    """Manage the database."""


# Register subcommands
order.add_command(order_approve)
order.add_command(order_create)
order.add_command(order_delete)
order.add_command(order_history)
order.add_command(order_list)
order.add_command(order_reject)
order.add_command(order_restore)
order.add_command(order_show)
order.add_command(order_submit)
order.add_command(order_update)
actor.add_command(actor_add)
actor.add_command(actor_list)
db.add_command(db_init)
