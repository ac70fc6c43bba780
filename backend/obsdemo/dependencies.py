"""
Observability Demo - Route Dependencies
========================================

What:  FastAPI dependencies handing route handlers the objects create_app()
       attached to app.state, plus the current request's trace context.
How:   Routes declare `Depends(get_metrics)` etc.; nothing reaches for a
       module-level global, so every app instance stays isolated.
"""

import random

from fastapi import Request

from obsdemo.config import Settings
from obsdemo.metrics import DemoMetrics
from obsdemo.middleware.context import RequestContext


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_metrics(request: Request) -> DemoMetrics:
    return request.app.state.metrics


def get_rng(request: Request) -> random.Random:
    return request.app.state.rng


def get_request_context(request: Request) -> RequestContext:
    """The instrumentation context InstrumentationMiddleware attached on entry."""
    return request.state.instrumentation
