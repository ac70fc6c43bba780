"""
Observability Demo - Application Package
=========================================

What: A small FastAPI storefront whose real product is its telemetry:
      JSON log lines on stdout, Prometheus metrics on /metrics and a trace id
      per request that ties the two to the response body.

Layout:
    ┌─────────────────────────────────────┐
    │      Routes (pages, status, ...)    │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (simulated latency)      │
    ├─────────────────────────────────────┤
    │ Middleware (instrumentation)        │  ← trace id, metrics, completion log
    ├─────────────────────────────────────┤
    │ Metrics registry │ JSON log sink    │
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
