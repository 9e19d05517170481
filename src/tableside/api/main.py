from __future__ import annotations

import asyncio
import logging
import os
import time
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from tableside.api.error_handling import register_exception_handlers
from tableside.api.middleware.request_id import RequestIDMiddleware
from tableside.api.routes.admin import router as admin_router
from tableside.api.routes.health import router as health_router
from tableside.api.routes.metrics import router as metrics_router
from tableside.api.routes.notifications import router as notifications_router
from tableside.api.routes.orders import router as orders_router
from tableside.api.routes.restaurants import router as restaurants_router
from tableside.api.ws.manager import ConnectionManager
from tableside.api.ws.routes import router as ws_router
from tableside.infrastructure.messaging.ws_fanout import start_ws_fanout
from tableside.infrastructure.observability.logging_config import configure_logging
from tableside.infrastructure.observability.otel import configure_otel
from tableside.infrastructure.runtime import Runtime, build_runtime
from tableside.tools.seed import load_restaurants

logger = logging.getLogger("tableside.api.access")

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

    # Dev/test: unblock everything (no credentials allowed)
    if env in {"dev", "test"}:
        return ["*"]

    raw_value = os.getenv("CORS_ALLOW_ORIGINS", "")
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()]


def _stats_rollover_seconds() -> float:
    return float(os.getenv("STATS_ROLLOVER_SECONDS", "60"))


def _route_path(request: Request) -> str:
    # Templated path keeps metric label cardinality bounded.
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


async def _run_statistics_rollover(app_state, interval_seconds: float) -> None:
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await asyncio.to_thread(app_state.runtime.statistics.roll_over_expired)
        except Exception:
            logger.exception("statistics_rollover_failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.ws_manager = ConnectionManager()
    fanout_task = asyncio.create_task(start_ws_fanout(app.state))
    rollover_task = asyncio.create_task(
        _run_statistics_rollover(app.state, _stats_rollover_seconds())
    )
    app.state.ws_fanout_task = fanout_task
    app.state.stats_rollover_task = rollover_task
    try:
        yield
    finally:
        for task in (rollover_task, fanout_task):
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task


def create_app(runtime: Runtime | None = None) -> FastAPI:
    configure_logging()

    app = FastAPI(title="Tableside", version="0.1.0", lifespan=lifespan)
    app.state.runtime = runtime or build_runtime(load_restaurants())
    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(restaurants_router)
    app.include_router(orders_router)
    app.include_router(notifications_router)
    app.include_router(admin_router)
    app.include_router(ws_router)

    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )

    configure_otel(app)
    return app


app = create_app()
