from __future__ import annotations

import logging
import os
from functools import lru_cache

import redis

from comanda.application.ports.publisher import EventPublisher

logger = logging.getLogger(__name__)


def _redis_url() -> str:
    url = os.getenv("REDIS_URL")
    if not url:
        raise RuntimeError("REDIS_URL is not set")
    return url


_open_clients: list[redis.Redis] = []


@lru_cache(maxsize=8)
def _build_client(redis_url: str, timeout_seconds: float) -> redis.Redis:
    client = redis.Redis.from_url(
        redis_url,
        socket_connect_timeout=timeout_seconds,
        socket_timeout=timeout_seconds,
    )
    _open_clients.append(client)
    return client


def get_redis_client(timeout_seconds: float = 1.0) -> redis.Redis:
    return _build_client(_redis_url(), timeout_seconds)


def close_redis_clients() -> None:
    _build_client.cache_clear()
    while _open_clients:
        _open_clients.pop().close()


def ping_redis(timeout_seconds: float = 1.0) -> bool:
    try:
        return bool(get_redis_client(timeout_seconds).ping())
    except (redis.RedisError, RuntimeError):
        return False


class RedisEventPublisher(EventPublisher):
    """Fire-and-forget pub/sub; subscribers are the pickup board and kitchen screens."""

    def __init__(self, timeout_seconds: float = 1.0) -> None:
        self._timeout_seconds = timeout_seconds

    def publish(self, channel: str, message: str) -> None:
        receivers = get_redis_client(timeout_seconds=self._timeout_seconds).publish(
            channel, message
        )
        logger.debug("event_published channel=%s receivers=%s", channel, receivers)
