"""
Observability Demo - Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the demo's expected failure paths.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return the response body the route promises, with the trace id.
Who:   Raised by route handlers; caught by global handlers.
When:  During request processing. Nothing here is retried.

Exception Hierarchy:
    ObsDemoError (base)         → 500 JSON {error, message, trace_id}
    ├── SimulatedFailureError   → 500 JSON {error, trace_id, route, suggestion}
    └── MetricsExportError      → 500 text "Failed to fetch metrics."

Every one of these responses still passes through the instrumentation
middleware, so it is counted and timed like any other request.
"""

from typing import Any, Dict, Optional


class ObsDemoError(Exception):
    """
    Base exception for all demo application errors.

    Attributes:
        message:  Human-readable error description (safe to return to the client)
        context:  Additional debug info (logged but NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class SimulatedFailureError(ObsDemoError):
    """
    Deliberately triggered business error.

    What:    Not a real fault; exists so downstream alerting on 5xx rates and
             ERROR-level log lines can be exercised on demand.
    When:    Every call to GET /simulate-error.
    HTTP:    500 Internal Server Error

    Example response:
        {
            "error": "Simulated internal server error generated for testing ...",
            "trace_id": "5f0c...",
            "route": "/simulate-error",
            "suggestion": "Check the error log using the trace_id ..."
        }
    """

    def __init__(
        self,
        message: str = (
            "Simulated internal server error generated for testing 5xx alerts "
            "and error logs."
        ),
        route: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if route:
            ctx["route"] = route
        super().__init__(message=message, context=ctx)
        self.route = route


class MetricsExportError(ObsDemoError):
    """
    Raised when the metrics registry fails to render its exposition text.

    HTTP:    500 Internal Server Error with a short plain-text body.
    The underlying collaborator error is chained as __cause__ and logged.
    """

    def __init__(
        self,
        message: str = "Metrics fetch failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
