from __future__ import annotations

from comanda.application.dto.responses import MenuResponse
from comanda.application.mappers.catalog_mapper import to_menu_response
from comanda.application.ports.repositories import FoodRepository


class GetMenu:
    def __init__(self, food_repository: FoodRepository) -> None:
        self._food_repository = food_repository

    def execute(self) -> MenuResponse:
        return to_menu_response(self._food_repository.list_active())
