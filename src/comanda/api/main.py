from __future__ import annotations

import logging
import os
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from comanda.api.error_handling import register_exception_handlers
from comanda.api.middleware.request_id import RequestIDMiddleware
from comanda.api.routes.foods import router as foods_router
from comanda.api.routes.health import router as health_router
from comanda.api.routes.metrics import router as metrics_router
from comanda.api.routes.orders import router as orders_router
from comanda.api.routes.users import router as users_router
from comanda.infrastructure.config import order_commit_timeout_ms, order_counter_scope, ordering_policy
from comanda.infrastructure.db.session import dispose_engines
from comanda.infrastructure.messaging.redis_publisher import close_redis_clients
from comanda.infrastructure.observability.logging_config import configure_logging
from comanda.infrastructure.observability.otel import configure_otel

logger = logging.getLogger("comanda.api.access")
lifecycle_logger = logging.getLogger("comanda.api.lifecycle")

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "path", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)


def _cors_allow_origins() -> list[str]:
    env = os.getenv("APP_ENV", "dev").lower()

    if env in {"dev", "test"}:
        return ["*"]

    raw_value = os.getenv("CORS_ALLOW_ORIGINS", "")
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()]


def _route_path(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        method = request.method
        try:
            response = await call_next(request)
        except Exception:
            path = _route_path(request)
            duration_ms = (time.perf_counter() - started) * 1000
            REQUEST_COUNT.labels(method=method, path=path, status_code="500").inc()
            REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000)
            logger.exception(
                "request_error",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": 500,
                    "duration_ms": round(duration_ms, 2),
                },
            )
            raise

        path = _route_path(request)
        duration_ms = (time.perf_counter() - started) * 1000
        REQUEST_COUNT.labels(method=method, path=path, status_code=str(response.status_code)).inc()
        REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000)
        logger.info(
            "request_complete",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    # Raises RuntimeError on a bad ORDER_* setting.
    ordering_policy()
    lifecycle_logger.info(
        "ordering_configured",
        extra={
            "counter_scope": order_counter_scope(),
            "commit_timeout_ms": order_commit_timeout_ms(),
        },
    )
    try:
        yield
    finally:
        close_redis_clients()
        dispose_engines()


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="Comanda Orders", version="0.1.0", lifespan=lifespan)
    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(foods_router)
    app.include_router(orders_router)
    app.include_router(users_router)

    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id", "Retry-After"],
    )

    configure_otel(app)
    return app


app = create_app()
