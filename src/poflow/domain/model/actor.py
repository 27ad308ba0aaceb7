"""Actor — a user who creates, submits or decides on orders.

Identities are managed elsewhere; the workflow only needs to know that an
id refers to someone real and what to call them in the history.
"""

from __future__ import annotations

from dataclasses import dataclass

from poflow.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Actor:

    id: int | None
    name: str
    email: str

    @staticmethod
    def create(name: str, email: str) -> Actor:
        if not name or not name.strip():
            raise ValidationError("Actor name is required")
        if not email or "@" not in email:
            raise ValidationError(f"Invalid email address: {email!r}")
        return Actor(id=None, name=name.strip(), email=email.strip().lower())
