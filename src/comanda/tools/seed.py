from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import inspect
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from comanda.infrastructure.db.models.catalog import FoodModel, UserModel
from comanda.infrastructure.db.session import get_engine
from comanda.infrastructure.observability.logging_config import configure_logging

logger = logging.getLogger("comanda.tools.seed")

USERS = [
    {
        "id": "usr_001",
        "name": "Ana Cliente",
        "email": "ana@example.com",
        "role": "USER",
        "blocked": False,
    },
    {
        "id": "usr_admin",
        "name": "Admin Barra",
        "email": "admin@example.com",
        "role": "ADMIN",
        "blocked": False,
    },
    {
        "id": "usr_blocked",
        "name": "Bloqueado",
        "email": "blocked@example.com",
        "role": "USER",
        "blocked": True,
    },
]

FOODS = [
    {
        "id": "food_001",
        "name": "Bocadillo de jamon",
        "description": "Pan de barra, jamon serrano, tomate",
        "price": Decimal("5.00"),
        "in_stock": True,
        "deleted": False,
    },
    {
        "id": "food_002",
        "name": "Cafe con leche",
        "description": None,
        "price": Decimal("2.00"),
        "in_stock": True,
        "deleted": False,
    },
    {
        "id": "food_003",
        "name": "Tortilla de patatas",
        "description": "Racion",
        "price": Decimal("3.50"),
        "in_stock": True,
        "deleted": False,
    },
    {
        "id": "food_004",
        "name": "Zumo de naranja",
        "description": "Recien exprimido",
        "price": Decimal("2.75"),
        "in_stock": False,
        "deleted": False,
    },
]


def main() -> None:
    configure_logging()
    engine = get_engine(timeout_seconds=2.0)
    inspector = inspect(engine)
    required_tables = {"users", "foods"}
    if not required_tables.issubset(set(inspector.get_table_names(schema="public"))):
        logger.warning("seed_skipped_no_schema")
        return

    with Session(engine) as session:
        for user in USERS:
            session.execute(
                insert(UserModel)
                .values(**user)
                .on_conflict_do_update(
                    index_elements=[UserModel.id],
                    set_={key: value for key, value in user.items() if key != "id"},
                )
            )

        for food in FOODS:
            session.execute(
                insert(FoodModel)
                .values(**food)
                .on_conflict_do_update(
                    index_elements=[FoodModel.id],
                    set_={key: value for key, value in food.items() if key != "id"},
                )
            )

        session.commit()
        logger.info("seed_complete")


if __name__ == "__main__":
    main()
