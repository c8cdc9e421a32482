"""Ordering knobs read from the environment.

``ORDER_COUNTER_SCOPE``
    ``local`` (default) keeps one counter per venue; ``global`` shares a
    single counter across every venue.
``ORDER_REJECT_UNKNOWN_ITEMS``
    ``true`` (default) rejects submissions naming items missing from the
    catalog; ``false`` prices them at zero.
``ORDER_COMMIT_TIMEOUT_MS``
    Upper bound for lock waits and statements inside the order commit.
"""

from __future__ import annotations

import os

from comanda.application.use_cases.submit_order import OrderingPolicy

DEFAULT_COMMIT_TIMEOUT_MS = 5000
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None or not raw_value.strip():
        return default
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise RuntimeError(f"{name} must be a boolean flag, got {raw_value!r}")


def order_counter_scope() -> str:
    value = os.getenv("ORDER_COUNTER_SCOPE", "local").strip().lower()
    if value not in {"local", "global"}:
        raise RuntimeError(f"ORDER_COUNTER_SCOPE must be 'local' or 'global', got {value!r}")
    return value


def order_commit_timeout_ms() -> int:
    raw_value = os.getenv("ORDER_COMMIT_TIMEOUT_MS", str(DEFAULT_COMMIT_TIMEOUT_MS))
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"ORDER_COMMIT_TIMEOUT_MS must be an integer, got {raw_value!r}") from exc
    if value < 1:
        raise RuntimeError("ORDER_COMMIT_TIMEOUT_MS must be >= 1")
    return value


def ordering_policy() -> OrderingPolicy:
    return OrderingPolicy(
        counter_scoped_per_local=order_counter_scope() == "local",
        reject_unknown_items=_env_flag("ORDER_REJECT_UNKNOWN_ITEMS", True),
    )
