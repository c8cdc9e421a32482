"""Admin-only menu maintenance.

Price changes only affect orders submitted afterwards; existing order lines
keep the price captured when they were written.
"""

from __future__ import annotations

import logging

from comanda.application.dto.requests import UpdateFoodRequest, UpdateFoodStockRequest
from comanda.application.dto.responses import FoodResponse
from comanda.application.mappers.catalog_mapper import to_food_response
from comanda.application.ports.repositories import FoodRepository, UserDirectory
from comanda.domain.common.ids import FoodId, UserId
from comanda.domain.common.money import Money

logger = logging.getLogger(__name__)


class NotAdminError(Exception):
    pass


class FoodNotFoundError(Exception):
    pass


class InvalidFoodUpdateError(Exception):
    pass


def _require_admin(user_directory: UserDirectory, user_id: UserId) -> None:
    user = user_directory.get(user_id)
    if user is None or not user.is_admin:
        raise NotAdminError(f"user {user_id} is not an admin")


class DeleteFood:
    def __init__(self, food_repository: FoodRepository, user_directory: UserDirectory) -> None:
        self._food_repository = food_repository
        self._user_directory = user_directory

    def execute(self, food_id: FoodId, requested_by: UserId) -> FoodResponse:
        _require_admin(self._user_directory, requested_by)
        food = self._food_repository.soft_delete(food_id)
        if food is None:
            raise FoodNotFoundError(f"food {food_id} not found")
        logger.info("food_deleted", extra={"food_id": str(food_id), "user_id": str(requested_by)})
        return to_food_response(food)


class UpdateFoodStock:
    def __init__(self, food_repository: FoodRepository, user_directory: UserDirectory) -> None:
        self._food_repository = food_repository
        self._user_directory = user_directory

    def execute(self, food_id: FoodId, request_dto: UpdateFoodStockRequest) -> FoodResponse:
        _require_admin(self._user_directory, UserId(request_dto.user_id))
        food = self._food_repository.set_in_stock(food_id, request_dto.in_stock)
        if food is None:
            raise FoodNotFoundError(f"food {food_id} not found")
        return to_food_response(food)


class UpdateFood:
    def __init__(self, food_repository: FoodRepository, user_directory: UserDirectory) -> None:
        self._food_repository = food_repository
        self._user_directory = user_directory

    def execute(self, food_id: FoodId, request_dto: UpdateFoodRequest) -> FoodResponse:
        _require_admin(self._user_directory, UserId(request_dto.user_id))
        if all(
            value is None
            for value in (request_dto.name, request_dto.description, request_dto.price)
        ):
            raise InvalidFoodUpdateError("nothing to update: send name, description or price")

        food = self._food_repository.update_details(
            food_id,
            name=request_dto.name,
            description=request_dto.description,
            price=Money.of(request_dto.price) if request_dto.price is not None else None,
        )
        if food is None:
            raise FoodNotFoundError(f"food {food_id} not found")
        logger.info("food_updated", extra={"food_id": str(food_id), "user_id": request_dto.user_id})
        return to_food_response(food)
