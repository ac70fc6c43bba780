"""
Observability Demo - FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       owning its own settings, metrics registry and random source.
Who:   Called by uvicorn (`uvicorn obsdemo.main:app`, or `python -m obsdemo`)
       and by the test suite, which builds a fresh app per test.

Application Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                      FastAPI App                        │
    │                                                         │
    │  Middleware:                                            │
    │  ┌──────────────────────────────────────────────────┐  │
    │  │ Instrumentation: trace id → timer → on finish:   │  │
    │  │ counter + histogram + DEBUG completion line      │  │
    │  └──────────────────────────────────────────────────┘  │
    │                                                         │
    │  Routes:                                                │
    │  ┌──────────┐ ┌──────────┐ ┌────────────────┐ ┌──────┐ │
    │  │ / pages  │ │ /status  │ │ /simulate-error│ │/metr.│ │
    │  └──────────┘ └──────────┘ └────────────────┘ └──────┘ │
    │  ┌──────────────┐                                      │
    │  │ /add-to-cart │                                      │
    │  └──────────────┘                                      │
    │                                                         │
    │  Exception Handlers:                                    │
    │  SimulatedFailure→500 JSON │ MetricsExport→500 text     │
    │  ObsDemoError→500 JSON     │ Exception→500 JSON         │
    └─────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure JSON logging, log the "Server running" line
    Shutdown: log shutdown
"""

import logging
import random
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from obsdemo import __version__
from obsdemo.config import Settings, settings as default_settings
from obsdemo.exceptions import MetricsExportError, ObsDemoError, SimulatedFailureError
from obsdemo.logging_setup import log, setup_logging
from obsdemo.metrics import DemoMetrics
from obsdemo.middleware.instrumentation import InstrumentationMiddleware
from obsdemo.routes import cart, metrics, pages, status
from obsdemo.schemas.status import ErrorResponse

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: structured logging first, then the startup line.

    The startup line is logged outside any request, so it carries no
    trace_id, route or method.
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level_value)
    log("INFO", f"Server running on http://localhost:{app_settings.port}")

    yield

    log("INFO", "Server shutting down.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", "")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the application's exceptions to responses.

    Handler hierarchy:
        SimulatedFailureError → 500 JSON with trace_id and a log-search suggestion
        MetricsExportError    → 500 text "Failed to fetch metrics."
        ObsDemoError (base)   → 500 JSON
        Exception (fallback)  → 500 JSON (stack trace logged, never returned)
    """

    @app.exception_handler(SimulatedFailureError)
    async def handle_simulated_failure(request: Request, exc: SimulatedFailureError):
        """Deliberate failure: render the documented error body."""
        return JSONResponse(
            status_code=500,
            content={
                "error": exc.message,
                "trace_id": _trace_id(request),
                "route": exc.route or request.url.path,
                "suggestion": (
                    "Check the error log using the trace_id in your logging "
                    "system (Loki/Elasticsearch)."
                ),
            },
        )

    @app.exception_handler(MetricsExportError)
    async def handle_metrics_export_error(request: Request, exc: MetricsExportError):
        """Exposition failed: log it, answer with a short text body."""
        log("ERROR", exc.message)
        logger.debug("Metrics export failure context: %s", exc.context, exc_info=exc.__cause__)
        return PlainTextResponse("Failed to fetch metrics.", status_code=500)

    @app.exception_handler(ObsDemoError)
    async def handle_app_error(request: Request, exc: ObsDemoError):
        log("ERROR", exc.message)
        body = ErrorResponse(
            error="server_error", message=exc.message, trace_id=_trace_id(request)
        )
        return JSONResponse(status_code=500, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for unexpected errors.

        Runs in Starlette's outermost error middleware; the instrumentation
        middleware has already recorded the request as a 500.
        """
        rid = _trace_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        body = ErrorResponse(
            error="internal_server_error",
            message="An unexpected error occurred.",
            trace_id=rid,
        )
        return JSONResponse(status_code=500, content=body.model_dump())


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    metrics_registry: Optional[DemoMetrics] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings:         Configuration; the module-level singleton if omitted.
        metrics_registry: Metric series owner; a fresh DemoMetrics if omitted.
        rng:              Random source for latency and health sampling.

    Returns:
        Fully configured FastAPI instance ready to receive requests.
    """
    settings = settings or default_settings
    if metrics_registry is None:
        metrics_registry = DemoMetrics(
            buckets=settings.histogram_buckets,
            collect_process_metrics=settings.collect_process_metrics,
        )

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Demo storefront that emits JSON logs, Prometheus metrics and "
            "per-request trace ids for exercising observability pipelines."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.metrics = metrics_registry
    app.state.rng = rng or random.Random()

    app.add_middleware(
        InstrumentationMiddleware,
        metrics=metrics_registry,
        trace_id_bytes=settings.trace_id_bytes,
    )

    register_exception_handlers(app)

    app.include_router(pages.router)
    app.include_router(status.router)
    app.include_router(cart.router)
    app.include_router(metrics.router)

    return app


# uvicorn expects `obsdemo.main:app` to be importable
app = create_app()
