from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import sessionmaker

from poflow.domain.model.actor import Actor
from poflow.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
    init_schema,
)
from poflow.infrastructure.persistence.sqlalchemy_unit_of_work import SqlAlchemyUnitOfWork

FIXED_NOW = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'poflow.db'}"


@pytest.fixture
def session_factory(database_url) -> sessionmaker:
    engine = create_db_engine(database_url)
    init_schema(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def uow(session_factory) -> SqlAlchemyUnitOfWork:
    """A unit of work with two users: Alice (#1) and Bob (#2)."""
    uow = SqlAlchemyUnitOfWork(session_factory)
    with uow:
        uow.actors.add(Actor.create("Alice", "alice@example.com"))
        uow.actors.add(Actor.create("Bob", "bob@example.com"))
        uow.commit()
    return uow


@pytest.fixture
def clock():
    return lambda: FIXED_NOW
