# Routes package init
"""
Observability Demo - Routes Package
====================================

What:  HTTP route handlers of the demo storefront.

Route Inventory:
    - pages.py:   GET /, /products, /cart, /account     (HTML, simulated latency)
    - status.py:  GET /status                           (JSON, ~10% unhealthy)
                  GET /simulate-error                   (JSON, always 500)
    - cart.py:    GET /add-to-cart?sku=...              (302 back to /)
    - metrics.py: GET /metrics                          (Prometheus exposition)

Routes stay thin: settings, metrics and the random source come in through
the dependencies in obsdemo.dependencies.
"""
