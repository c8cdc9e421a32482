"""Pure order computation: request lines + price snapshot -> lines and total."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from uuid import uuid4

from comanda.domain.common.ids import FoodId, OrderLineId
from comanda.domain.common.money import Money
from comanda.domain.order.entities import OrderLine


@dataclass(frozen=True)
class RequestedItem:
    food_id: FoodId
    quantity: int


@dataclass(frozen=True)
class BuiltOrder:
    lines: list[OrderLine]
    total: Money


class UnknownItemError(Exception):
    def __init__(self, food_ids: Sequence[FoodId]) -> None:
        self.food_ids = list(food_ids)
        super().__init__(f"unknown food items: {', '.join(str(i) for i in self.food_ids)}")


class InvalidQuantityError(Exception):
    pass


class EmptyOrderError(Exception):
    pass


def _new_line_id() -> OrderLineId:
    return OrderLineId(f"orl_{uuid4().hex[:12]}")


def build_order_lines(
    requested: Sequence[RequestedItem],
    prices: Mapping[FoodId, Money],
    *,
    reject_unknown_items: bool = True,
    line_id_factory: Callable[[], OrderLineId] = _new_line_id,
) -> BuiltOrder:
    if not requested:
        raise EmptyOrderError("order must contain at least one item")

    for item in requested:
        if item.quantity < 1:
            raise InvalidQuantityError(
                f"quantity must be >= 1 for food item {item.food_id}, got {item.quantity}"
            )

    missing = [item.food_id for item in requested if item.food_id not in prices]
    if missing and reject_unknown_items:
        raise UnknownItemError(list(dict.fromkeys(missing)))

    lines: list[OrderLine] = []
    total = Money.zero()
    for item in requested:
        # Unknown items are priced at zero when the policy allows them.
        unit_price = prices.get(item.food_id, Money.zero())
        line_total = unit_price.times(item.quantity)
        lines.append(
            OrderLine(
                line_id=line_id_factory(),
                food_id=item.food_id,
                quantity=item.quantity,
                price_at_order_time=unit_price,
                line_total=line_total,
            )
        )
        total = total + line_total

    return BuiltOrder(lines=lines, total=total)
