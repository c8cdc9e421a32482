from __future__ import annotations

from typing import NewType

Local = NewType("Local", str)
UserId = NewType("UserId", str)
FoodId = NewType("FoodId", str)
OrderId = NewType("OrderId", str)
OrderLineId = NewType("OrderLineId", str)
