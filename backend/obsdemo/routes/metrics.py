"""
Observability Demo - Metrics Scrape Endpoint
=============================================

What:  GET /metrics in the Prometheus text exposition format.
How:   Delegates entirely to DemoMetrics.render(). A rendering failure is
       raised as MetricsExportError; the handler in main.py logs it and
       answers 500 "Failed to fetch metrics.".

The scrape itself passes through the instrumentation middleware, so it
shows up in app_requests_total{route="/metrics"} on the next scrape.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from obsdemo.dependencies import get_metrics
from obsdemo.exceptions import MetricsExportError
from obsdemo.logging_setup import log
from obsdemo.metrics import DemoMetrics

router = APIRouter(tags=["Metrics"])


@router.get("/metrics", summary="Prometheus metrics", response_class=Response)
async def metrics_endpoint(metrics: DemoMetrics = Depends(get_metrics)) -> Response:
    log("DEBUG", "Metrics endpoint accessed.")
    try:
        payload = metrics.render()
    except Exception as exc:
        raise MetricsExportError(
            message=f"Metrics fetch failed: {exc}",
            context={"error_type": type(exc).__name__},
        ) from exc
    return Response(content=payload, media_type=metrics.content_type)
