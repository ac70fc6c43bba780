"""
Observability Demo - Pydantic Response Schemas
===============================================

What:  The JSON bodies returned by /status, /simulate-error and the error handlers.
How:   FastAPI serializes route return values through these models and
       publishes them in the OpenAPI document.

Every body that can be tied to a request carries its trace_id, so a caller
can search the logs for the matching lines.
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, field_serializer


class StatusResponse(BaseModel):
    """
    What:  Result of the quick health check.
    Who:   Returned by GET /status.
    """
    status: Literal["healthy", "unhealthy"] = Field(
        description="Randomly 'unhealthy' on a small share of calls for alert testing"
    )
    timestamp: datetime = Field(description="When the status was reported (UTC)")
    trace_id: str = Field(description="Correlation id of this request")
    message: str

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: datetime) -> str:
        """Millisecond precision, the same shape as the log line timestamps."""
        return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SimulatedErrorResponse(BaseModel):
    """Body of the deliberate 500 from GET /simulate-error."""
    error: str
    trace_id: str
    route: str
    suggestion: str


class ErrorResponse(BaseModel):
    """Generic 500 body rendered by the ObsDemoError and catch-all handlers."""
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable description")
    trace_id: str = Field(default="", description="Correlation id for log lookup")
