"""Application services: register and list actors."""

from __future__ import annotations

from poflow.application.dto import ActorDTO
from poflow.domain.exceptions import ValidationError
from poflow.domain.model.actor import Actor
from poflow.domain.repository.unit_of_work import UnitOfWork


class AddActorHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, name: str, email: str) -> ActorDTO:
        actor = Actor.create(name, email)
        with self._uow as uow:
            if uow.actors.get_by_email(actor.email) is not None:
                raise ValidationError(f"User '{actor.email}' already exists")
            actor = uow.actors.add(actor)
            uow.commit()
        return ActorDTO(id=actor.id, name=actor.name, email=actor.email)  # type: ignore[arg-type]


class ListActorsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[ActorDTO]:
        with self._uow as uow:
            return [
                ActorDTO(id=a.id, name=a.name, email=a.email)  # type: ignore[arg-type]
                for a in uow.actors.list_all()
            ]
