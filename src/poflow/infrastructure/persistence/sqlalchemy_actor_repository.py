"""SQLAlchemy-backed implementation of ActorRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from poflow.domain.model.actor import Actor
from poflow.domain.repository.actor_repository import ActorRepository
from poflow.infrastructure.persistence.tables import UserRow


class SqlAlchemyActorRepository(ActorRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, actor_id: int) -> Actor | None:
        row = self._session.get(UserRow, actor_id)
        return None if row is None else self._to_domain(row)

    def get_by_email(self, email: str) -> Actor | None:
        stmt = select(UserRow).where(UserRow.email == email.strip().lower())
        row = self._session.scalars(stmt).first()
        return None if row is None else self._to_domain(row)

    def list_all(self) -> list[Actor]:
        return [self._to_domain(r) for r in self._session.scalars(select(UserRow).order_by(UserRow.id))]

    def add(self, actor: Actor) -> Actor:
        row = UserRow(name=actor.name, email=actor.email)
        self._session.add(row)
        self._session.flush()
        return self._to_domain(row)

    @staticmethod
    def _to_domain(row: UserRow) -> Actor:
        return Actor(id=row.id, name=row.name, email=row.email)
