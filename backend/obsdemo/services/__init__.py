# Services package init
"""
Observability Demo - Services Layer
====================================

What:  Logic that sits behind the routes and can be tested without HTTP.

Service Inventory:
    - simulation.simulate_work:      bounded random latency per route profile
    - simulation.pick_health_status: ~10% "unhealthy" status for alert testing
"""
