from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class SubmitOrderItemRequest(CamelBaseModel):
    item_id: str = Field(min_length=1)
    quantity: int


class SubmitOrderRequest(CamelBaseModel):
    local: str = Field(min_length=1, max_length=50)
    scheduled_hour: datetime
    submitter_id: str = Field(min_length=1)
    notes: str | None = Field(default=None, max_length=1000)
    items: list[SubmitOrderItemRequest] = Field(min_length=1)

    @field_validator("local")
    @classmethod
    def _local_not_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("local must not be blank")
        return stripped


class ChangeOrderStatusRequest(CamelBaseModel):
    status: str
    user_id: str = Field(min_length=1)


class UpdateFoodStockRequest(CamelBaseModel):
    in_stock: bool
    user_id: str = Field(min_length=1)


class UpdateFoodRequest(CamelBaseModel):
    user_id: str = Field(min_length=1)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped
