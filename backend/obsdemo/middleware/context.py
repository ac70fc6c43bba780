"""
Observability Demo - Per-Request Instrumentation Context
=========================================================

What:  The record a request carries from entry to completion: trace id,
       start time, route, method, status and lifecycle state.
How:   Created by InstrumentationMiddleware.begin() and published to route
       handlers through request.state. Its trace_id, route and method are
       also bound as structlog context variables for the log lines.

Lifecycle:
    CREATED ──▶ IN_FLIGHT ──▶ COMPLETED   (final body chunk sent, telemetry emitted)
                        └──▶ ABANDONED   (connection dropped, no telemetry)

    Terminal states never transition again.
"""

import enum
import secrets
import time
from dataclasses import dataclass, field
from typing import Optional


class RequestState(str, enum.Enum):
    CREATED = "created"
    IN_FLIGHT = "in_flight"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in (RequestState.COMPLETED, RequestState.ABANDONED)


def generate_trace_id(nbytes: int = 12) -> str:
    """
    Render `nbytes` random bytes as a lowercase hex string (2 chars per byte).

    Failure of the OS entropy source propagates; it is not recoverable
    per request.
    """
    return secrets.token_hex(nbytes)


@dataclass
class RequestContext:
    """Ephemeral observability metadata for a single request."""

    trace_id: str
    route: str
    method: str
    started_at: float = field(default_factory=time.perf_counter)
    status_code: Optional[int] = None
    state: RequestState = RequestState.CREATED

    def mark_in_flight(self) -> None:
        if self.state is RequestState.CREATED:
            self.state = RequestState.IN_FLIGHT

    def finish(self, state: RequestState) -> bool:
        """
        Move to a terminal state.

        Returns True only for the call that performed the transition, so the
        caller can emit telemetry exactly once.
        """
        if self.state.is_terminal:
            return False
        self.state = state
        return True

    def elapsed(self) -> float:
        """Seconds since the context was created."""
        return time.perf_counter() - self.started_at
