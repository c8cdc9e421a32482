"""Display numbers shown on the pickup board.

The board only has ``MAX_DISPLAY_NUMBER`` slots, so the number handed to a
customer is derived from the raw, ever-increasing counter value and cycles
through ``1..MAX_DISPLAY_NUMBER``.
"""

from __future__ import annotations

MAX_DISPLAY_NUMBER = 100
GLOBAL_COUNTER_SCOPE = "global"


def display_number(raw_value: int) -> int:
    if raw_value < 1:
        raise ValueError("raw counter value must be >= 1")
    remainder = raw_value % MAX_DISPLAY_NUMBER
    return remainder or MAX_DISPLAY_NUMBER


def counter_scope_for(local: str, scoped_per_local: bool) -> str:
    if not scoped_per_local:
        return GLOBAL_COUNTER_SCOPE
    if not local.strip():
        raise ValueError("local must be non-empty")
    return f"local:{local}"
