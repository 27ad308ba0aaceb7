"""SQLAlchemy engine and session setup."""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker


class Base(DeclarativeBase):
    pass


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        _serialize_sqlite_writers(engine)
    else:
        engine = create_engine(database_url, echo=echo, pool_pre_ping=True)
    return engine


def _serialize_sqlite_writers(engine: Engine) -> None:
    """Make every SQLite transaction take the write lock up front.

    SQLite ignores ``SELECT ... FOR UPDATE``.  Starting with
    ``BEGIN IMMEDIATE`` gives the same guarantee for the
    read-validate-write sequence: a second writer waits (up to the connect
    timeout) until the first one commits or rolls back, then reads the
    committed state.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Take over transaction control from pysqlite.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_schema(engine: Engine) -> None:
    # Import for side effect: registers the tables on Base.metadata.
    from poflow.infrastructure.persistence import tables  # noqa: F401

    Base.metadata.create_all(bind=engine)
