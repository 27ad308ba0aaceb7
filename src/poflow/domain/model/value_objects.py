"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from poflow.domain.exceptions import ValidationError

CENT = Decimal("0.01")
# Largest amount a Numeric(12, 2) column holds exactly.
MAX_AMOUNT = Decimal("9999999999.99")


@dataclass(frozen=True)
class Money:
    """Non-negative monetary amount.

    Uses Decimal so line and order totals are exact; no float ever
    enters a calculation.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )
        if self.amount > MAX_AMOUNT:
            raise ValidationError(
                f"Money amount {self.amount} exceeds the maximum of {MAX_AMOUNT}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + other.amount)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int) or isinstance(factor, bool):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor)

    def __lt__(self, other: Money) -> bool:
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        return self.amount >= other.amount

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    def quantized(self) -> Decimal:
        """Amount rounded to whole cents, as stored and displayed."""
        return self.amount.quantize(CENT)

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.quantized():.2f}"

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0.00"))

    @staticmethod
    def of(amount: str | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely.

        Floats are rejected: ``Decimal(0.1)`` already carries the binary
        rounding error we are trying to keep out.
        """
        if isinstance(amount, float):
            raise ValidationError(
                f"Money amount must not be a float, got {amount!r}; pass a string"
            )
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)
