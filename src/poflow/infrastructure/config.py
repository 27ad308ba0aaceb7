"""Runtime settings, read from the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from poflow.application.create_order import DEFAULT_MAX_ATTEMPTS
from poflow.domain.exceptions import ValidationError
from poflow.domain.model.order import APPROVAL_THRESHOLD
from poflow.domain.model.value_objects import Money

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
DATA_DIR = Path(__file__).resolve().parents[3] / "data"
DEFAULT_DATABASE_URL = f"sqlite:///{DATA_DIR / 'poflow.db'}"


@dataclass(frozen=True)
class Settings:

    database_url: str = DEFAULT_DATABASE_URL
    approval_threshold: Money = field(default=APPROVAL_THRESHOLD)
    create_attempts: int = DEFAULT_MAX_ATTEMPTS
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        threshold = Money.of(env.get("POFLOW_APPROVAL_THRESHOLD", str(APPROVAL_THRESHOLD)))

        raw_attempts = env.get("POFLOW_CREATE_RETRIES", str(DEFAULT_MAX_ATTEMPTS))
        try:
            attempts = int(raw_attempts)
        except ValueError as exc:
            raise ValidationError(f"POFLOW_CREATE_RETRIES must be an integer, got {raw_attempts!r}") from exc
        if attempts < 1:
            raise ValidationError("POFLOW_CREATE_RETRIES must be at least 1")

        log_level = env.get("POFLOW_LOG_LEVEL", "WARNING").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValidationError(f"Unknown log level: {log_level!r}")

        return cls(
            database_url=env.get("POFLOW_DATABASE_URL", DEFAULT_DATABASE_URL),
            approval_threshold=threshold,
            create_attempts=attempts,
            log_level=log_level,
        )
