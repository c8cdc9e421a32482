from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from comanda.domain.common.ids import FoodId
from comanda.domain.common.money import Money
from comanda.domain.order.builder import (
    EmptyOrderError,
    InvalidQuantityError,
    RequestedItem,
    UnknownItemError,
    build_order_lines,
)

PRICES = {
    FoodId("A"): Money.of("5.00"),
    FoodId("B"): Money.of("2.00"),
}


def test_total_is_sum_of_price_times_quantity() -> None:
    built = build_order_lines(
        [RequestedItem(FoodId("A"), 2), RequestedItem(FoodId("B"), 3)],
        PRICES,
    )

    assert built.total.amount == Decimal("16.00")
    assert [line.food_id for line in built.lines] == [FoodId("A"), FoodId("B")]
    assert [line.line_total for line in built.lines] == [Money.of("10.00"), Money.of("6.00")]


def test_prices_are_captured_on_each_line() -> None:
    built = build_order_lines([RequestedItem(FoodId("B"), 1)], PRICES)

    assert built.lines[0].price_at_order_time == Money.of("2.00")


def test_cents_do_not_drift() -> None:
    prices = {FoodId("C"): Money.of("0.10")}
    built = build_order_lines([RequestedItem(FoodId("C"), 3)], prices)

    assert built.total.amount == Decimal("0.30")


def test_duplicate_items_produce_separate_lines() -> None:
    built = build_order_lines(
        [RequestedItem(FoodId("A"), 1), RequestedItem(FoodId("A"), 1)],
        PRICES,
    )

    assert len(built.lines) == 2
    assert built.lines[0].line_id != built.lines[1].line_id
    assert built.total == Money.of("10.00")


def test_unknown_item_is_rejected_by_default() -> None:
    with pytest.raises(UnknownItemError) as exc_info:
        build_order_lines(
            [RequestedItem(FoodId("A"), 1), RequestedItem(FoodId("Z"), 1)],
            PRICES,
        )

    assert exc_info.value.food_ids == [FoodId("Z")]


def test_unknown_item_is_priced_at_zero_when_allowed() -> None:
    built = build_order_lines(
        [RequestedItem(FoodId("A"), 1), RequestedItem(FoodId("Z"), 4)],
        PRICES,
        reject_unknown_items=False,
    )

    assert built.total == Money.of("5.00")
    assert built.lines[1].price_at_order_time == Money.zero()


@pytest.mark.parametrize("quantity", [0, -2])
def test_non_positive_quantity_is_rejected(quantity: int) -> None:
    with pytest.raises(InvalidQuantityError):
        build_order_lines([RequestedItem(FoodId("A"), quantity)], PRICES)


def test_empty_request_is_rejected() -> None:
    with pytest.raises(EmptyOrderError):
        build_order_lines([], PRICES)
