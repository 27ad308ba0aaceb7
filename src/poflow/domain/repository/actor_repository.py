"""Abstract repository for actors (the identity resolver)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from poflow.domain.model.actor import Actor


class ActorRepository(ABC):

    @abstractmethod
    def get_by_id(self, actor_id: int) -> Actor | None:
        """Return an actor by id, or None if unknown."""

    @abstractmethod
    def get_by_email(self, email: str) -> Actor | None:
        """Return an actor by email, or None if unknown."""

    @abstractmethod
    def list_all(self) -> list[Actor]:
        """Return every actor ordered by id."""

    @abstractmethod
    def add(self, actor: Actor) -> Actor:
        """Stage a new actor and return it with its id assigned."""
