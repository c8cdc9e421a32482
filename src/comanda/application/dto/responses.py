from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class OrderLineResponse(BaseModel):
    lineId: str
    itemId: str
    quantity: int
    priceAtOrderTime: Decimal
    lineTotal: Decimal


class OrderResponse(BaseModel):
    orderId: str
    local: str
    displayNumber: int
    sequenceNumber: int
    status: str
    scheduledHour: datetime
    total: Decimal
    notes: str | None = None
    submittedBy: str
    lines: list[OrderLineResponse] = Field(default_factory=list)
    createdAt: datetime


class SubmitOrderResponse(BaseModel):
    displayNumber: int
    orderId: str
    order: OrderResponse


class OrderListResponse(BaseModel):
    orders: list[OrderResponse] = Field(default_factory=list)


class FoodResponse(BaseModel):
    foodId: str
    name: str
    description: str | None = None
    price: Decimal
    inStock: bool
    deleted: bool = False


class MenuResponse(BaseModel):
    foods: list[FoodResponse] = Field(default_factory=list)


class DailyBalanceResponse(BaseModel):
    day: date
    quantity: int
    balance: Decimal


class BalanceResponse(BaseModel):
    days: list[DailyBalanceResponse] = Field(default_factory=list)


class UserResponse(BaseModel):
    userId: str
    name: str
    email: str
    role: str
    blocked: bool
