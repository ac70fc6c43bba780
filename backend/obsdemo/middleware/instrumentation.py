"""
Observability Demo - Request Instrumentation Middleware
========================================================

What:  Assigns a trace id to every request, times it, and on completion
       records the request counter, the duration histogram and one
       structured DEBUG log line.
How:   Pure ASGI middleware wrapping `send`. Completion is bound to the
       single "response finished" event: the final http.response.body
       message being handed to the server. That event happens once, so
       telemetry happens once.
Who:   Wraps the whole FastAPI app (added in main.create_app).
When:  Every HTTP request. Lifespan and websocket scopes pass straight through.

Request lifecycle:
    begin()                      CREATED, trace id + timer
    inner app runs               IN_FLIGHT
    final body chunk sent  ───▶  complete()  COMPLETED: counter, histogram, log
    send() raises          ───▶  ABANDONED: client went away, no telemetry
    handler raises before
    the response started   ───▶  complete(500) then re-raise; Starlette's
                                 ServerErrorMiddleware sends the 500

The response body is never touched; an X-Trace-ID header is added so the
caller can grep the logs for the request.
"""

import logging

import structlog
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from obsdemo.logging_setup import log
from obsdemo.metrics import DemoMetrics
from obsdemo.middleware.context import (
    RequestContext,
    RequestState,
    generate_trace_id,
)

logger = logging.getLogger(__name__)

TRACE_ID_HEADER = "X-Trace-ID"


class InstrumentationMiddleware:
    """
    Per-request telemetry for every HTTP request.

    Args:
        app:            The wrapped ASGI application.
        metrics:        Registry owner that receives the counter/histogram updates.
        trace_id_bytes: Random bytes per trace id (hex string is twice as long).
    """

    def __init__(self, app: ASGIApp, metrics: DemoMetrics, trace_id_bytes: int = 12):
        self.app = app
        self.metrics = metrics
        self.trace_id_bytes = trace_id_bytes

    def begin(self, scope: Scope) -> RequestContext:
        """Create the request's context and expose it to route handlers."""
        ctx = RequestContext(
            trace_id=generate_trace_id(self.trace_id_bytes),
            route=scope["path"],
            method=scope["method"],
        )
        # request.state is backed by scope["state"]
        state = scope.setdefault("state", {})
        state["trace_id"] = ctx.trace_id
        state["instrumentation"] = ctx
        return ctx

    def complete(self, ctx: RequestContext, status_code: int) -> None:
        """Record telemetry for a finished request. Later calls are no-ops."""
        if not ctx.finish(RequestState.COMPLETED):
            return
        ctx.status_code = status_code
        duration = ctx.elapsed()

        self.metrics.record_request(ctx.route, ctx.method, status_code, duration)

        log(
            "DEBUG",
            f"Request completed with status {status_code}",
            ctx,
            status_code=status_code,
            duration_seconds=round(duration, 6),
        )

    def abandon(self, ctx: RequestContext) -> None:
        if ctx.finish(RequestState.ABANDONED):
            logger.debug("Request %s abandoned before completion", ctx.trace_id)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        ctx = self.begin(scope)
        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
                ctx.status_code = message["status"]
                headers = MutableHeaders(scope=message)
                headers.append(TRACE_ID_HEADER, ctx.trace_id)

            try:
                await send(message)
            except BaseException:
                self.abandon(ctx)
                raise

            if message["type"] == "http.response.body" and not message.get("more_body", False):
                self.complete(ctx, ctx.status_code or 500)

        # Every log line emitted while this request is served carries these
        tokens = structlog.contextvars.bind_contextvars(
            trace_id=ctx.trace_id, route=ctx.route, method=ctx.method
        )
        ctx.mark_in_flight()
        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            # The server error handler outside this middleware answers with a 500
            if not response_started:
                self.complete(ctx, 500)
            raise
        finally:
            # Cancelled, failed mid-stream, or returned without finishing the body
            if not ctx.state.is_terminal:
                self.abandon(ctx)
            structlog.contextvars.reset_contextvars(**tokens)
