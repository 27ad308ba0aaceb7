"""Line-item arithmetic.

Pure functions; positivity of the inputs is guaranteed by ``Quantity``
and by the line item factory, not re-checked here.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from poflow.domain.model.value_objects import Money, Quantity


class HasTotal(Protocol):
    total: Money


def line_total(quantity: Quantity, unit_price: Money) -> Money:
    return unit_price * quantity.value


def order_total(items: Iterable[HasTotal]) -> Money:
    result = Money.zero()
    for item in items:
        result = result + item.total
    return result
