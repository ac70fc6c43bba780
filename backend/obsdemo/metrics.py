"""
Observability Demo - Prometheus Metrics
========================================

What:  The metric series this app keeps up to date, on a registry the app owns.
How:   prometheus_client Counter/Histogram objects registered on an explicit
       CollectorRegistry (never the library's global REGISTRY), so each
       create_app() call, and therefore each test, gets isolated series.

Series:
    app_requests_total{route, method, status_code}   counter
    app_response_time_seconds{route, method}          histogram
    app_add_to_cart_total{product_sku}                counter
    process_* / python_*                              default collectors (optional)

Concurrent inc()/observe() calls are safe; prometheus_client locks internally.
"""

from typing import Optional, Sequence

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    disable_created_metrics,
    generate_latest,
)

# Expose only _total, _bucket, _sum and _count; no *_created timestamp series
disable_created_metrics()

DEFAULT_BUCKETS = (0.005, 0.01, 0.02, 0.05, 0.1, 0.5, 1, 2)


class DemoMetrics:
    """
    Owns the registry and the three application series.

    Args:
        registry: Registry to register on; a fresh one is created if omitted.
        buckets:  Response time histogram bucket upper bounds, in seconds.
        collect_process_metrics: Also register process, platform and GC collectors.
    """

    def __init__(
        self,
        registry: Optional[CollectorRegistry] = None,
        buckets: Sequence[float] = DEFAULT_BUCKETS,
        collect_process_metrics: bool = False,
    ):
        self.registry = registry if registry is not None else CollectorRegistry()

        self.requests_total = Counter(
            "app_requests_total",
            "Total number of requests received by route and status code",
            ["route", "method", "status_code"],
            registry=self.registry,
        )
        self.response_time = Histogram(
            "app_response_time_seconds",
            "Response time in seconds",
            ["route", "method"],
            buckets=tuple(buckets),
            registry=self.registry,
        )
        self.add_to_cart_total = Counter(
            "app_add_to_cart_total",
            "Products added to the cart by SKU",
            ["product_sku"],
            registry=self.registry,
        )

        if collect_process_metrics:
            ProcessCollector(registry=self.registry)
            PlatformCollector(registry=self.registry)
            GCCollector(registry=self.registry)

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST

    def record_request(
        self, route: str, method: str, status_code: int, duration_seconds: float
    ) -> None:
        """One counter increment and one duration observation for a finished request."""
        self.requests_total.labels(
            route=route, method=method, status_code=str(status_code)
        ).inc()
        self.response_time.labels(route=route, method=method).observe(duration_seconds)

    def record_add_to_cart(self, sku: str) -> None:
        self.add_to_cart_total.labels(product_sku=sku).inc()

    def render(self) -> bytes:
        """Text exposition of every series on the registry."""
        return generate_latest(self.registry)
