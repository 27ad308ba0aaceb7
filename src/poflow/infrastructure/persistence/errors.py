"""Translation of driver errors into domain exceptions."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError

from poflow.domain.exceptions import RetryableConflictError


@contextmanager
def translate_integrity_errors() -> Iterator[None]:
    """Turn a unique-order-number violation into RetryableConflictError.

    SQLite reports ``UNIQUE constraint failed: orders.order_number``,
    PostgreSQL names the ``uq_orders_order_number`` constraint; both
    mention the column.  Every other integrity error propagates as is.
    """
    try:
        yield
    except IntegrityError as exc:
        if "order_number" in str(exc.orig):
            raise RetryableConflictError("Order number already taken") from exc
        raise
