from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from comanda.application.dto.responses import BalanceResponse, DailyBalanceResponse
from comanda.application.ports.repositories import DailyBalanceData, OrderRepository

DEFAULT_BALANCE_WINDOW_DAYS = 7


class GetBalance:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(
        self,
        now: datetime | None = None,
        window_days: int = DEFAULT_BALANCE_WINDOW_DAYS,
    ) -> BalanceResponse:
        end = now or datetime.now(timezone.utc)
        start = end - timedelta(days=window_days)
        delivered = self._order_repository.delivered_between(start=start, end=end)

        quantities: dict[date, int] = defaultdict(int)
        balances: dict[date, Decimal] = defaultdict(lambda: Decimal("0.00"))
        for row in delivered:
            scheduled = row.scheduled_hour
            if scheduled.tzinfo is None:
                scheduled = scheduled.replace(tzinfo=timezone.utc)
            day = scheduled.astimezone(timezone.utc).date()
            quantities[day] += 1
            balances[day] += row.total

        days = [
            DailyBalanceData(day=day, quantity=quantities[day], balance=balances[day])
            for day in sorted(quantities)
        ]
        return BalanceResponse(
            days=[
                DailyBalanceResponse(day=item.day, quantity=item.quantity, balance=item.balance)
                for item in days
            ]
        )
