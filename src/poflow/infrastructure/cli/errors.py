"""Map domain exceptions to CLI failures with a distinct exit code per kind."""

from __future__ import annotations

import click

from poflow.domain.exceptions import (
    BusinessRuleViolation,
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)

EXIT_CODES: list[tuple[type[DomainException], int]] = [
    (ValidationError, 2),
    (EntityNotFoundError, 3),
    (BusinessRuleViolation, 4),
    (ConflictError, 5),
]


class DomainCommandError(click.ClickException):

    def __init__(self, exc: DomainException) -> None:
        super().__init__(str(exc))
        self.exit_code = exit_code_for(exc)


def exit_code_for(exc: DomainException) -> int:
    for kind, code in EXIT_CODES:
        if isinstance(exc, kind):
            return code
    return 1
