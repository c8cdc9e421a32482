from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise TypeError("amount must be a Decimal")
        if self.amount < 0:
            raise ValueError("amount must be >= 0")
        if self.amount != self.amount.quantize(CENT):
            raise ValueError("amount must have at most two decimal places")

    @classmethod
    def of(cls, value: Decimal | int | str) -> Money:
        return cls(amount=Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))

    @classmethod
    def zero(cls) -> Money:
        return cls(amount=Decimal("0.00"))

    def __add__(self, other: Money) -> Money:
        return Money.of(self.amount + other.amount)

    def times(self, quantity: int) -> Money:
        return Money.of(self.amount * quantity)
