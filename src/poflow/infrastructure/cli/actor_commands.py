"""CLI commands for actors and the database schema."""

from __future__ import annotations

import click

from poflow.application.manage_actors import AddActorHandler, ListActorsHandler
from poflow.domain.exceptions import DomainException
from poflow.infrastructure.bootstrap import create_schema, unit_of_work
from poflow.infrastructure.cli.errors import DomainCommandError
from poflow.infrastructure.config import Settings


@click.command("add")
@click.option("--name", required=True, help="Display name.")
@click.option("--email", required=True, help="Email address (unique).")
@click.pass_obj
def actor_add(settings: Settings, name: str, email: str) -> None:
    """Register a user who can act on orders."""
    handler = AddActorHandler(unit_of_work(settings.database_url))

    try:
        actor = handler.handle(name=name, email=email)
    except DomainException as exc:
        raise DomainCommandError(exc)

    click.echo(f"User #{actor.id} '{actor.name}' <{actor.email}> added")


@click.command("list")
@click.pass_obj
def actor_list(settings: Settings) -> None:
    """List all users."""
    actors = ListActorsHandler(unit_of_work(settings.database_url)).handle()

    if not actors:
        click.echo("No users found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Email'}")
    click.echo("-" * 56)
    for a in actors:
        click.echo(f"{a.id:<6} {a.name:<24} {a.email}")


@click.command("init")
@click.pass_obj
def db_init(settings: Settings) -> None:
    """Create the database tables if they do not exist."""
    create_schema(settings.database_url)
    click.echo("Database initialised.")
