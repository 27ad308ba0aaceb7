"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker

from poflow.infrastructure.config import Settings
from poflow.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
    init_schema,
)
from poflow.infrastructure.persistence.sqlalchemy_unit_of_work import SqlAlchemyUnitOfWork


@lru_cache(maxsize=1)
def settings() -> Settings:
    return Settings.from_env()


@lru_cache(maxsize=None)
def engine(database_url: str) -> Engine:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_db_engine(database_url)


@lru_cache(maxsize=None)
def session_factory(database_url: str) -> sessionmaker:
    return create_session_factory(engine(database_url))


def unit_of_work(database_url: str | None = None) -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(session_factory(database_url or settings().database_url))


def create_schema(database_url: str | None = None) -> None:
    init_schema(engine(database_url or settings().database_url))
