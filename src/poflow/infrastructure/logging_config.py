"""Process-wide logging setup for the CLI."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # SQL echo is controlled separately; keep the engine quiet by default
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
