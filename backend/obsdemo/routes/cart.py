"""
Observability Demo - Add-to-Cart Action
========================================

What:  GET /add-to-cart?sku=<SKU> - the one business action of the storefront.
How:   Increments app_add_to_cart_total{product_sku} and redirects back to
       the home page with a URL-encoded notice in the `message` parameter.

    /add-to-cart?sku=WH001  →  302 /?message=Added+WH001+to+cart+successfully%21

A missing or blank SKU is not counted; the redirect carries a
"No product selected" notice instead.
"""

import random
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from obsdemo.config import Settings
from obsdemo.dependencies import get_metrics, get_request_context, get_rng, get_settings
from obsdemo.logging_setup import log
from obsdemo.metrics import DemoMetrics
from obsdemo.middleware.context import RequestContext
from obsdemo.services.simulation import simulate_work

router = APIRouter(tags=["Cart"])


def home_redirect(message: str) -> RedirectResponse:
    return RedirectResponse(url="/?" + urlencode({"message": message}), status_code=302)


@router.get("/add-to-cart", response_class=RedirectResponse, status_code=302, summary="Add a product to the cart")
async def add_to_cart(
    sku: Optional[str] = Query(default=None, description="Product SKU, e.g. WH001"),
    settings: Settings = Depends(get_settings),
    metrics: DemoMetrics = Depends(get_metrics),
    rng: random.Random = Depends(get_rng),
    ctx: RequestContext = Depends(get_request_context),
) -> RedirectResponse:
    sku = (sku or "").strip()
    if not sku:
        log("WARNING", "Add to cart requested without a product SKU.", ctx)
        return home_redirect("No product selected.")

    await simulate_work(settings.latency_add_to_cart, rng)
    metrics.record_add_to_cart(sku)
    log("SUCCESS", f"Product {sku} added to cart.", ctx)
    return home_redirect(f"Added {sku} to cart successfully!")
