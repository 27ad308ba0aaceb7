"""Domain service: Order Number Generator.

Produces human-readable numbers of the form ``ORD-YYYYMMDD-NNNN``.

The starting sequence is a fresh count of existing orders plus one, read
on every call; there is no counter kept in the process.  Candidates are
probed against the repository and bumped on collision.  Probing is only
best effort: a concurrent writer can still claim the same number before
we commit, which the unique constraint on the order number turns into a
RetryableConflictError at commit time.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from poflow.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)

PREFIX = "ORD"
MAX_PROBES = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_order_number(day: datetime, sequence: int) -> str:
    return f"{PREFIX}-{day:%Y%m%d}-{sequence:04d}"


class OrderNumberGenerator:

    def __init__(
        self,
        order_repo: OrderRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._clock = clock

    def generate(self) -> str:
        """Return a number that was free when probed.

        After MAX_PROBES collisions a unique suffix is appended to the first
        candidate and returned unchecked, so generation always terminates.
        """
        today = self._clock()
        sequence = self._order_repo.count_all() + 1
        original = format_order_number(today, sequence)

        candidate = original
        for _ in range(MAX_PROBES):
            if not self._order_repo.order_number_exists(candidate):
                return candidate
            sequence += 1
            candidate = format_order_number(today, sequence)

        fallback = f"{original}-{uuid.uuid4().hex[:13]}"
        logger.warning(
            "No free order number after %d probes starting at %s; using %s",
            MAX_PROBES, original, fallback,
        )
        return fallback
