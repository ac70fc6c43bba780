"""
Observability Demo - Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own app built by create_app() with a fresh metrics
       registry, a seeded random source and near-zero simulated latency.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── fast_settings: Settings with 0-1 ms latency on every route
    ├── metrics:       DemoMetrics on a private CollectorRegistry
    ├── rng:           random.Random(1234)
    ├── app:           FastAPI instance wired with the three above
    ├── test_client:   HTTPX AsyncClient over ASGITransport
    └── events:        caplog at DEBUG for the obsdemo.events logger
"""

import logging
import random

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from obsdemo.config import LatencyRange, Settings
from obsdemo.logging_setup import EVENTS_LOGGER
from obsdemo.main import create_app
from obsdemo.metrics import DemoMetrics

FAST = LatencyRange(min_ms=0, max_ms=1)


def make_settings(**overrides) -> Settings:
    """Settings with negligible latency everywhere unless overridden."""
    values = dict(
        latency_home=FAST,
        latency_status=FAST,
        latency_error=FAST,
        latency_products=FAST,
        latency_cart=FAST,
        latency_account=FAST,
        latency_add_to_cart=FAST,
        collect_process_metrics=False,
    )
    values.update(overrides)
    return Settings(**values)


def sample(metrics: DemoMetrics, name: str, **labels):
    """Current value of one sample, or None if the series has never been touched."""
    return metrics.registry.get_sample_value(name, labels)


def completion_records(caplog):
    return [
        r for r in caplog.records
        if r.name == EVENTS_LOGGER and r.getMessage().startswith("Request completed")
    ]


@pytest.fixture
def fast_settings():
    return make_settings()


@pytest.fixture
def metrics():
    return DemoMetrics()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def app(fast_settings, metrics, rng):
    return create_app(settings=fast_settings, metrics_registry=metrics, rng=rng)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_status(test_client):
            response = await test_client.get("/status")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def events(caplog):
    """caplog capturing every level emitted through log()."""
    caplog.set_level(logging.DEBUG, logger=EVENTS_LOGGER)
    return caplog
