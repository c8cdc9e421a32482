from __future__ import annotations

from datetime import timezone

from sqlalchemy import Engine, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from comanda.application.ports.repositories import CatalogUnavailableError, FoodRepository
from comanda.domain.catalog.entities import Food
from comanda.domain.common.ids import FoodId
from comanda.domain.common.money import Money
from comanda.infrastructure.db.models.catalog import FoodModel
from comanda.infrastructure.db.session import get_engine


class SqlAlchemyFoodRepository(FoodRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def snapshot_prices(self, food_ids: set[FoodId]) -> dict[FoodId, Money]:
        if not food_ids:
            return {}
        statement = select(FoodModel.id, FoodModel.price).where(
            FoodModel.id.in_(sorted(str(food_id) for food_id in food_ids)),
            FoodModel.deleted.is_(False),
        )
        try:
            with Session(self._engine) as session:
                rows = session.execute(statement).all()
        except SQLAlchemyError as exc:
            raise CatalogUnavailableError("price catalog lookup failed") from exc
        return {FoodId(row.id): Money.of(row.price) for row in rows}

    def list_active(self) -> list[Food]:
        statement = (
            select(FoodModel)
            .where(FoodModel.deleted.is_(False))
            .order_by(FoodModel.created_at, FoodModel.id)
        )
        with Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
        return [_to_domain(model) for model in models]

    def get(self, food_id: FoodId) -> Food | None:
        with Session(self._engine) as session:
            model = session.get(FoodModel, str(food_id))
        if model is None:
            return None
        return _to_domain(model)

    def soft_delete(self, food_id: FoodId) -> Food | None:
        return self._update_live(food_id, {"deleted": True})

    def set_in_stock(self, food_id: FoodId, in_stock: bool) -> Food | None:
        return self._update_live(food_id, {"in_stock": in_stock})

    def update_details(
        self,
        food_id: FoodId,
        name: str | None = None,
        description: str | None = None,
        price: Money | None = None,
    ) -> Food | None:
        values: dict[str, object] = {}
        if name is not None:
            values["name"] = name
        if description is not None:
            values["description"] = description
        if price is not None:
            values["price"] = price.amount
        if not values:
            return self.get(food_id)
        return self._update_live(food_id, values)

    def _update_live(self, food_id: FoodId, values: dict[str, object]) -> Food | None:
        # Deleted foods are gone from the menu and cannot be edited.
        statement = (
            update(FoodModel)
            .where(FoodModel.id == str(food_id), FoodModel.deleted.is_(False))
            .values(**values)
        )
        with Session(self._engine) as session:
            result = session.execute(statement)
            if result.rowcount != 1:
                session.rollback()
                return None
            session.commit()
        return self.get(food_id)


def _to_domain(model: FoodModel) -> Food:
    created_at = model.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return Food(
        food_id=FoodId(model.id),
        name=model.name,
        description=model.description,
        price=Money.of(model.price),
        in_stock=model.in_stock,
        created_at=created_at,
        deleted=model.deleted,
    )
