from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

import comanda.api.main as main_module
from comanda.api.main import app
from comanda.infrastructure.db.session import dispose_engines, get_engine
from comanda.infrastructure.messaging.redis_publisher import close_redis_clients, get_redis_client


def test_shutdown_releases_redis_and_database(monkeypatch) -> None:
    calls: list[str] = []
    monkeypatch.setattr(main_module, "close_redis_clients", lambda: calls.append("redis"))
    monkeypatch.setattr(main_module, "dispose_engines", lambda: calls.append("database"))
    monkeypatch.delenv("ORDER_COUNTER_SCOPE", raising=False)

    with TestClient(app) as client:
        assert client.get("/health/live").status_code == 200
        assert calls == []

    assert calls == ["redis", "database"]


def test_startup_fails_on_bad_ordering_config(monkeypatch) -> None:
    calls: list[str] = []
    monkeypatch.setattr(main_module, "close_redis_clients", lambda: calls.append("redis"))
    monkeypatch.setattr(main_module, "dispose_engines", lambda: calls.append("database"))
    monkeypatch.setenv("ORDER_COUNTER_SCOPE", "per-table")

    with pytest.raises(RuntimeError, match="ORDER_COUNTER_SCOPE"):
        with TestClient(app):
            pass

    assert calls == []


def test_cached_clients_are_rebuilt_after_close(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'lifespan.db'}")
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")

    engine = get_engine()
    client = get_redis_client()
    assert get_engine() is engine
    assert get_redis_client() is client

    dispose_engines()
    close_redis_clients()

    assert get_engine() is not engine
    assert get_redis_client() is not client

    dispose_engines()
    close_redis_clients()
