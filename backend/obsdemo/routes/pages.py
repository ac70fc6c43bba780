"""
Observability Demo - Storefront Page Routes
============================================

What:  GET /, /products, /cart, /account - simulated e-commerce pages.
How:   Each page waits for its own latency profile, then returns a small
       inline HTML page showing the request's trace id.

Latency profiles (defaults, milliseconds):
    /           50-150   "database query"
    /products  100-400   catalogue lookup
    /cart       50-200   session read
    /account   200-600   slowest page, for latency alerts
"""

import html
import random
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from obsdemo.config import LatencyRange, Settings
from obsdemo.dependencies import get_request_context, get_rng, get_settings
from obsdemo.logging_setup import log
from obsdemo.middleware.context import RequestContext
from obsdemo.services.simulation import simulate_work

router = APIRouter(tags=["Pages"])

_PAGE = """<!DOCTYPE html>
<html>
<head><title>{title}</title>
<style>
    body {{ font-family: 'Segoe UI', Tahoma, sans-serif; text-align: center; margin-top: 50px; background-color: #f4f7f6; color: #333; }}
    .container {{ max-width: 800px; margin: auto; padding: 20px; background-color: #fff; border-radius: 12px; }}
    nav a {{ margin: 0 10px; }}
    .message {{ color: #2e7d32; font-weight: bold; }}
    .trace-id {{ margin-top: 40px; font-size: 0.9em; color: #888; border-top: 1px solid #eee; padding-top: 10px; }}
</style>
</head>
<body>
    <div class="container">
        <h1>{heading}</h1>
        {message}
        {body}
        <nav>
            <a href="/">Home</a>
            <a href="/products">Products</a>
            <a href="/cart">Cart</a>
            <a href="/account">Account</a>
            <a href="/status">Status</a>
            <a href="/simulate-error">Simulate Error</a>
            <a href="/metrics">Metrics</a>
        </nav>
        <div class="trace-id"><strong>Current Trace ID (for Logs):</strong> {trace_id}</div>
    </div>
</body>
</html>
"""

_PRODUCTS = (
    ("WH001", "Wireless Headphones"),
    ("SW002", "Smart Watch"),
    ("BT003", "Bluetooth Speaker"),
)


def render_page(
    title: str,
    heading: str,
    body: str,
    trace_id: str,
    message: Optional[str] = None,
) -> str:
    """Fill the shared page shell. `body` is trusted markup; everything else is escaped."""
    return _PAGE.format(
        title=html.escape(title),
        heading=html.escape(heading),
        message=f'<p class="message">{html.escape(message)}</p>' if message else "",
        body=body,
        trace_id=html.escape(trace_id),
    )


async def _page(
    latency: LatencyRange,
    rng: random.Random,
    ctx: RequestContext,
    heading: str,
    body: str,
    settings: Settings,
    message: Optional[str] = None,
) -> HTMLResponse:
    await simulate_work(latency, rng)
    return HTMLResponse(
        render_page(settings.app_name, heading, body, ctx.trace_id, message)
    )


@router.get("/", response_class=HTMLResponse, summary="Home page")
async def home(
    message: Optional[str] = Query(default=None, description="Notice shown after a redirect"),
    settings: Settings = Depends(get_settings),
    rng: random.Random = Depends(get_rng),
    ctx: RequestContext = Depends(get_request_context),
) -> HTMLResponse:
    log("INFO", "Home route accessed and simulating database query.", ctx)
    body = (
        "<h2>A unified view of Logs, Metrics, &amp; Traces</h2>"
        "<p>Every request emits a JSON log line, updates Prometheus metrics "
        "and carries a trace id for correlation.</p>"
    )
    return await _page(
        settings.latency_home, rng, ctx, settings.app_name, body, settings, message
    )


@router.get("/products", response_class=HTMLResponse, summary="Product catalogue")
async def products(
    settings: Settings = Depends(get_settings),
    rng: random.Random = Depends(get_rng),
    ctx: RequestContext = Depends(get_request_context),
) -> HTMLResponse:
    log("INFO", "Products route accessed and loading catalogue.", ctx)
    items = "".join(
        f'<li>{html.escape(name)} <a href="/add-to-cart?sku={sku}">Add to cart</a></li>'
        for sku, name in _PRODUCTS
    )
    return await _page(
        settings.latency_products, rng, ctx, "Products", f"<ul>{items}</ul>", settings
    )


@router.get("/cart", response_class=HTMLResponse, summary="Shopping cart")
async def cart(
    settings: Settings = Depends(get_settings),
    rng: random.Random = Depends(get_rng),
    ctx: RequestContext = Depends(get_request_context),
) -> HTMLResponse:
    log("INFO", "Cart route accessed and reading session.", ctx)
    return await _page(
        settings.latency_cart, rng, ctx, "Your Cart", "<p>Your cart is a simulation.</p>", settings
    )


@router.get("/account", response_class=HTMLResponse, summary="Account page")
async def account(
    settings: Settings = Depends(get_settings),
    rng: random.Random = Depends(get_rng),
    ctx: RequestContext = Depends(get_request_context),
) -> HTMLResponse:
    log("INFO", "Account route accessed and fetching profile.", ctx)
    return await _page(
        settings.latency_account, rng, ctx, "Account", "<p>Signed in as demo user.</p>", settings
    )
