"""
Observability Demo - Status & Error Simulation Routes
======================================================

What:  GET /status (quick, occasionally "unhealthy") and GET /simulate-error
       (always 500).
Who:   Called by probes, dashboards and whoever is testing alert rules.

Both bodies carry the request's trace_id; the same id appears in every log
line the request produced.
"""

import random
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from obsdemo.config import Settings
from obsdemo.dependencies import get_request_context, get_rng, get_settings
from obsdemo.exceptions import SimulatedFailureError
from obsdemo.logging_setup import log
from obsdemo.middleware.context import RequestContext
from obsdemo.schemas.status import SimulatedErrorResponse, StatusResponse
from obsdemo.services.simulation import pick_health_status, simulate_work

router = APIRouter(tags=["Status"])


@router.get(
    "/status",
    response_model=StatusResponse,
    summary="Quick health check",
    description=(
        "Returns 'healthy' most of the time and 'unhealthy' on a small, "
        "configurable share of calls so alerting on the status can be tested."
    ),
)
async def status(
    settings: Settings = Depends(get_settings),
    rng: random.Random = Depends(get_rng),
    ctx: RequestContext = Depends(get_request_context),
) -> StatusResponse:
    log("INFO", "Health status check initiated.", ctx)
    await simulate_work(settings.latency_status, rng)

    reported = pick_health_status(rng, settings.unhealthy_ratio)
    log("INFO", f"Health status reported: {reported}", ctx)

    return StatusResponse(
        status=reported,
        timestamp=datetime.now(timezone.utc),
        trace_id=ctx.trace_id,
        message='Quick health check. A small chance of "unhealthy" for testing alerts.',
    )


@router.get(
    "/simulate-error",
    status_code=500,
    responses={500: {"description": "Always: simulated failure", "model": SimulatedErrorResponse}},
    summary="Trigger a simulated 500",
)
async def simulate_error(
    settings: Settings = Depends(get_settings),
    rng: random.Random = Depends(get_rng),
    ctx: RequestContext = Depends(get_request_context),
) -> None:
    """
    Always fails.

    The ERROR line is logged before the simulated latency. The 500 body is
    rendered by the SimulatedFailureError handler in main.py.
    """
    log("ERROR", "Simulated application error occurred due to bad request data!", ctx)
    await simulate_work(settings.latency_error, rng)
    raise SimulatedFailureError(route=ctx.route)
