from __future__ import annotations

import sys
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from comanda.application.ports.repositories import DeliveredOrderData
from comanda.application.use_cases.block_user import BlockUser
from comanda.application.use_cases.block_user import UserNotFoundError as BlockUserNotFoundError
from comanda.application.use_cases.get_balance import GetBalance
from comanda.application.use_cases.get_menu import GetMenu
from comanda.application.use_cases.list_daily_orders import (
    InvalidDailyOrdersStatusError,
    ListDailyOrders,
    NotAdminError,
)
from comanda.application.use_cases.list_user_orders import ListUserOrders, UserNotFoundError
from comanda.application.use_cases.time_window import utc_day_bounds
from comanda.domain.catalog.entities import Food
from comanda.domain.common.ids import FoodId, Local, OrderId, OrderLineId, UserId
from comanda.domain.common.money import Money
from comanda.domain.order.entities import Order, OrderLine, OrderStatus, create_pending_order
from comanda.domain.user.entities import User, UserRole

NOW = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)


def _user(user_id: str, role: UserRole = UserRole.USER, blocked: bool = False) -> User:
    return User(
        user_id=UserId(user_id),
        name=user_id,
        email=f"{user_id}@example.com",
        role=role,
        blocked=blocked,
    )


class FakeUserDirectory:
    def __init__(self, users: list[User]) -> None:
        self._users = {str(user.user_id): user for user in users}

    def get(self, user_id: UserId) -> User | None:
        return self._users.get(str(user_id))

    def is_blocked(self, user_id: UserId) -> bool:
        user = self.get(user_id)
        return user is not None and user.blocked

    def set_blocked(self, user_id: UserId, blocked: bool) -> User | None:
        user = self.get(user_id)
        if user is None:
            return None
        updated = replace(user, blocked=blocked)
        self._users[str(user_id)] = updated
        return updated


class FakeOrderRepository:
    def __init__(self, orders: list[Order], delivered: list[DeliveredOrderData] | None = None):
        self._orders = orders
        self._delivered = delivered or []
        self.calls: list[tuple] = []

    def list_by_status_for_day(self, status, day_start, day_end) -> list[Order]:
        self.calls.append(("status", status, day_start, day_end))
        return [order for order in self._orders if order.status == status]

    def list_open_for_user(self, user_id, day_start, day_end) -> list[Order]:
        self.calls.append(("user", user_id, day_start, day_end))
        return [
            order
            for order in self._orders
            if order.submitted_by == user_id and order.status != OrderStatus.DELIVERED
        ]

    def delivered_between(self, start, end) -> list[DeliveredOrderData]:
        self.calls.append(("delivered", start, end))
        return self._delivered


class FakeFoodRepository:
    def list_active(self) -> list[Food]:
        return [
            Food(
                food_id=FoodId("food_001"),
                name="Empanada",
                description=None,
                price=Money.of("5.00"),
                in_stock=True,
                created_at=NOW,
            )
        ]


def _order(order_id: str, sequence: int, status: OrderStatus, submitted_by: str) -> Order:
    price = Money.of("2.00")
    order = create_pending_order(
        order_id=OrderId(order_id),
        local=Local("centro"),
        submitted_by=UserId(submitted_by),
        lines=[
            OrderLine(
                line_id=OrderLineId(f"orl_{order_id}"),
                food_id=FoodId("food_002"),
                quantity=2,
                price_at_order_time=price,
                line_total=price.times(2),
            )
        ],
        scheduled_hour=NOW,
        now=NOW,
    ).numbered(sequence)
    return replace(order, status=status)


def test_utc_day_bounds_cover_the_whole_day() -> None:
    start, end = utc_day_bounds(NOW)

    assert start == datetime(2026, 10, 19, tzinfo=timezone.utc)
    assert end == datetime(2026, 10, 19, 23, 59, 59, 999999, tzinfo=timezone.utc)


def test_daily_orders_are_admin_only() -> None:
    use_case = ListDailyOrders(
        order_repository=FakeOrderRepository([]),
        user_directory=FakeUserDirectory([_user("usr_001")]),
    )

    with pytest.raises(NotAdminError):
        use_case.execute("PENDING", UserId("usr_001"), now=NOW)


def test_daily_orders_filter_by_status_within_today() -> None:
    repository = FakeOrderRepository(
        [
            _order("ord_1", 1, OrderStatus.PENDING, "usr_001"),
            _order("ord_2", 2, OrderStatus.CONFIRMED, "usr_001"),
        ]
    )
    use_case = ListDailyOrders(
        order_repository=repository,
        user_directory=FakeUserDirectory([_user("usr_admin", UserRole.ADMIN)]),
    )

    response = use_case.execute("confirmed", UserId("usr_admin"), now=NOW)

    assert [order.orderId for order in response.orders] == ["ord_2"]
    assert repository.calls[0][2:] == utc_day_bounds(NOW)


def test_daily_orders_reject_unknown_status() -> None:
    use_case = ListDailyOrders(
        order_repository=FakeOrderRepository([]),
        user_directory=FakeUserDirectory([_user("usr_admin", UserRole.ADMIN)]),
    )

    with pytest.raises(InvalidDailyOrdersStatusError):
        use_case.execute("LOST", UserId("usr_admin"), now=NOW)


def test_user_orders_skip_delivered() -> None:
    use_case = ListUserOrders(
        order_repository=FakeOrderRepository(
            [
                _order("ord_1", 1, OrderStatus.PENDING, "usr_001"),
                _order("ord_2", 2, OrderStatus.DELIVERED, "usr_001"),
                _order("ord_3", 3, OrderStatus.PENDING, "usr_002"),
            ]
        ),
        user_directory=FakeUserDirectory([_user("usr_001")]),
    )

    response = use_case.execute(UserId("usr_001"), now=NOW)

    assert [order.orderId for order in response.orders] == ["ord_1"]


def test_user_orders_for_unknown_user() -> None:
    use_case = ListUserOrders(
        order_repository=FakeOrderRepository([]),
        user_directory=FakeUserDirectory([]),
    )

    with pytest.raises(UserNotFoundError):
        use_case.execute(UserId("usr_ghost"), now=NOW)


def test_balance_groups_delivered_orders_by_day() -> None:
    yesterday = NOW - timedelta(days=1)
    repository = FakeOrderRepository(
        [],
        delivered=[
            DeliveredOrderData(scheduled_hour=NOW, total=Decimal("16.00")),
            DeliveredOrderData(scheduled_hour=yesterday, total=Decimal("3.50")),
            DeliveredOrderData(scheduled_hour=NOW, total=Decimal("4.00")),
        ],
    )

    response = GetBalance(order_repository=repository).execute(now=NOW)

    assert [(day.day, day.quantity, day.balance) for day in response.days] == [
        (date(2026, 10, 18), 1, Decimal("3.50")),
        (date(2026, 10, 19), 2, Decimal("20.00")),
    ]
    assert repository.calls[0] == ("delivered", NOW - timedelta(days=7), NOW)


def test_menu_lists_active_foods() -> None:
    response = GetMenu(food_repository=FakeFoodRepository()).execute()

    assert [food.foodId for food in response.foods] == ["food_001"]
    assert response.foods[0].price == Decimal("5.00")


def test_block_user_marks_user_blocked() -> None:
    directory = FakeUserDirectory([_user("usr_001")])

    response = BlockUser(user_directory=directory).execute(UserId("usr_001"))

    assert response.blocked is True
    assert directory.is_blocked(UserId("usr_001"))


def test_block_unknown_user() -> None:
    with pytest.raises(BlockUserNotFoundError):
        BlockUser(user_directory=FakeUserDirectory([])).execute(UserId("usr_ghost"))
