from __future__ import annotations

from fastapi import APIRouter, Query

from comanda.application.dto.requests import UpdateFoodRequest, UpdateFoodStockRequest
from comanda.application.dto.responses import FoodResponse, MenuResponse
from comanda.application.use_cases.get_menu import GetMenu
from comanda.application.use_cases.manage_food import DeleteFood, UpdateFood, UpdateFoodStock
from comanda.domain.common.ids import FoodId, UserId
from comanda.infrastructure.db.repositories.food_repo import SqlAlchemyFoodRepository
from comanda.infrastructure.db.repositories.user_repo import SqlAlchemyUserDirectory

router = APIRouter()


def _get_menu_use_case() -> GetMenu:
    return GetMenu(food_repository=SqlAlchemyFoodRepository())


def _delete_food_use_case() -> DeleteFood:
    return DeleteFood(
        food_repository=SqlAlchemyFoodRepository(),
        user_directory=SqlAlchemyUserDirectory(),
    )


def _update_food_stock_use_case() -> UpdateFoodStock:
    return UpdateFoodStock(
        food_repository=SqlAlchemyFoodRepository(),
        user_directory=SqlAlchemyUserDirectory(),
    )


def _update_food_use_case() -> UpdateFood:
    return UpdateFood(
        food_repository=SqlAlchemyFoodRepository(),
        user_directory=SqlAlchemyUserDirectory(),
    )


@router.get("/v1/foods", response_model=MenuResponse)
def get_menu() -> MenuResponse:
    return _get_menu_use_case().execute()


@router.delete("/v1/foods/{food_id}", response_model=FoodResponse)
def delete_food(food_id: str, user_id: str = Query(alias="userId", min_length=1)) -> FoodResponse:
    return _delete_food_use_case().execute(food_id=FoodId(food_id), requested_by=UserId(user_id))


@router.put("/v1/foods/{food_id}/stock", response_model=FoodResponse)
def update_food_stock(food_id: str, request_dto: UpdateFoodStockRequest) -> FoodResponse:
    return _update_food_stock_use_case().execute(food_id=FoodId(food_id), request_dto=request_dto)


@router.put("/v1/foods/{food_id}", response_model=FoodResponse)
def update_food(food_id: str, request_dto: UpdateFoodRequest) -> FoodResponse:
    return _update_food_use_case().execute(food_id=FoodId(food_id), request_dto=request_dto)
