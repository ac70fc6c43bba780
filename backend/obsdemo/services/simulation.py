"""
Observability Demo - Simulated Backend Behaviour
=================================================

What:  The only "business logic" the demo has: bounded random latency and a
       randomly unhealthy status.
How:   asyncio.sleep for the delay, so a sleeping request never blocks the
       event loop and other requests keep being accepted and served.
       Randomness comes from an injectable random.Random (seeded in tests).
"""

import asyncio
import random
from typing import Optional

from obsdemo.config import LatencyRange

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"


async def simulate_work(latency: LatencyRange, rng: Optional[random.Random] = None) -> float:
    """
    Sleep for a uniformly random delay within `latency`.

    Returns:
        The delay actually requested, in seconds.
    """
    rng = rng or random
    delay = rng.uniform(latency.min_seconds, latency.max_seconds)
    await asyncio.sleep(delay)
    return delay


def pick_health_status(rng: Optional[random.Random] = None, unhealthy_ratio: float = 0.1) -> str:
    """Return "unhealthy" with probability `unhealthy_ratio`, else "healthy"."""
    rng = rng or random
    return UNHEALTHY if rng.random() < unhealthy_ratio else HEALTHY
