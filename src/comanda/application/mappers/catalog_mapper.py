from __future__ import annotations

from comanda.application.dto.responses import FoodResponse, MenuResponse, UserResponse
from comanda.domain.catalog.entities import Food
from comanda.domain.user.entities import User


def to_food_response(food: Food) -> FoodResponse:
    return FoodResponse(
        foodId=str(food.food_id),
        name=food.name,
        description=food.description,
        price=food.price.amount,
        inStock=food.in_stock,
        deleted=food.deleted,
    )


def to_menu_response(foods: list[Food]) -> MenuResponse:
    return MenuResponse(foods=[to_food_response(food) for food in foods])


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        userId=str(user.user_id),
        name=user.name,
        email=user.email,
        role=user.role.value,
        blocked=user.blocked,
    )
