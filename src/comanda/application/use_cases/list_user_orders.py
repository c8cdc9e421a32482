from __future__ import annotations

from datetime import datetime, timezone

from comanda.application.dto.responses import OrderListResponse
from comanda.application.mappers.order_mapper import to_order_response
from comanda.application.ports.repositories import OrderRepository, UserDirectory
from comanda.application.use_cases.time_window import utc_day_bounds
from comanda.domain.common.ids import UserId


class UserNotFoundError(Exception):
    pass


class ListUserOrders:
    def __init__(self, order_repository: OrderRepository, user_directory: UserDirectory) -> None:
        self._order_repository = order_repository
        self._user_directory = user_directory

    def execute(self, user_id: UserId, now: datetime | None = None) -> OrderListResponse:
        if self._user_directory.get(user_id) is None:
            raise UserNotFoundError(f"user {user_id} not found")

        day_start, day_end = utc_day_bounds(now or datetime.now(timezone.utc))
        orders = self._order_repository.list_open_for_user(
            user_id=user_id,
            day_start=day_start,
            day_end=day_end,
        )
        return OrderListResponse(orders=[to_order_response(order) for order in orders])
