from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Protocol

from comanda.domain.catalog.entities import Food
from comanda.domain.common.ids import FoodId, OrderId, UserId
from comanda.domain.common.money import Money
from comanda.domain.order.entities import Order, OrderStatus
from comanda.domain.user.entities import User


class PriceCatalog(Protocol):
    def snapshot_prices(self, food_ids: set[FoodId]) -> dict[FoodId, Money]: ...


class FoodRepository(PriceCatalog, Protocol):
    def list_active(self) -> list[Food]: ...

    def get(self, food_id: FoodId) -> Food | None: ...

    def soft_delete(self, food_id: FoodId) -> Food | None: ...

    def set_in_stock(self, food_id: FoodId, in_stock: bool) -> Food | None: ...

    def update_details(
        self,
        food_id: FoodId,
        name: str | None = None,
        description: str | None = None,
        price: Money | None = None,
    ) -> Food | None: ...


class UserDirectory(Protocol):
    def get(self, user_id: UserId) -> User | None: ...

    def is_blocked(self, user_id: UserId) -> bool: ...

    def set_blocked(self, user_id: UserId, blocked: bool) -> User | None: ...


class OrderRepository(Protocol):
    def add_numbered(
        self,
        order: Order,
        counter_scope: str,
    ) -> Order: ...

    def get(self, order_id: OrderId) -> Order | None: ...

    def update_status(
        self,
        order_id: OrderId,
        expected_status: OrderStatus,
        new_status: OrderStatus,
    ) -> Order: ...

    def list_by_status_for_day(
        self,
        status: OrderStatus,
        day_start: datetime,
        day_end: datetime,
    ) -> list[Order]: ...

    def list_open_for_user(
        self,
        user_id: UserId,
        day_start: datetime,
        day_end: datetime,
    ) -> list[Order]: ...

    def delivered_between(
        self,
        start: datetime,
        end: datetime,
    ) -> list[DeliveredOrderData]: ...


class OrderCounter(Protocol):
    def current_value(self, scope: str) -> int: ...


class CounterStoreUnavailableError(Exception):
    pass


class UserDirectoryUnavailableError(Exception):
    pass


class CatalogUnavailableError(Exception):
    pass


class OrderPersistenceError(Exception):
    pass


class IdempotencyReplayMismatchError(Exception):
    pass


class OptimisticConcurrencyError(Exception):
    pass


@dataclass(frozen=True)
class DeliveredOrderData:
    scheduled_hour: datetime
    total: Decimal


@dataclass(frozen=True)
class DailyBalanceData:
    day: date
    quantity: int
    balance: Decimal
