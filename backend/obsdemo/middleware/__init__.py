# Middleware package init
"""
Observability Demo - Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [ServerError (Starlette)] → [Instrumentation] → [Exception handlers] → Route

    - Instrumentation: trace id, timer, request counter, duration histogram,
      completion log line (instrumentation.py, context.py)
    - Exception handlers sit inside the instrumentation layer, so error
      responses they render are counted like any other response.
"""
