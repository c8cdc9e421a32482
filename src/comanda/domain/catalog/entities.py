from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from comanda.domain.common.ids import FoodId
from comanda.domain.common.money import Money


@dataclass(frozen=True)
class Food:
    food_id: FoodId
    name: str
    description: str | None
    price: Money
    in_stock: bool
    created_at: datetime
    deleted: bool = False

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
