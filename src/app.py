"""Dee-licious Bakes FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from datetime import UTC, datetime

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV controls which config overlay is applied:
#   - default      → event_processing = "sync"  (handlers fire in UoW)
#   - "production" → event_processing = "async" (handlers fire via Engine)
from catalogue.domain import catalogue
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from identity.domain import identity
from messaging.domain import messaging
from notifications.domain import notifications
from ordering.domain import ordering
from protean.integrations.fastapi import register_exception_handlers

DOMAINS = (identity, catalogue, ordering, messaging, notifications)

for _domain in DOMAINS:
    _domain.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/customers": identity,
    "/admin": identity,
    "/products": catalogue,
    "/categories": catalogue,
    "/tags": catalogue,
    "/allergens": catalogue,
    "/carts": ordering,
    "/wishlists": ordering,
    "/orders": ordering,
    "/threads": messaging,
    "/custom-requests": messaging,
    "/notifications": notifications,
    "/subscribe": notifications,
    "/unsubscribe": notifications,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path == prefix or path.startswith(prefix + "/"):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Dee-licious Bakes API",
    description="Bakery storefront and back-office: accounts, catalogue, ordering, messaging and email",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: pass through (health check, docs, etc.)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from catalogue.api import allergen_router, category_router, product_router, tag_router  # noqa: E402
from identity.api import admin_router  # noqa: E402
from identity.api import router as identity_router  # noqa: E402
from identity.customer.queries import NEW_CUSTOMER_WINDOW, dashboard_stats  # noqa: E402
from messaging.api import request_router, thread_router  # noqa: E402
from notifications.api.routes import newsletter_router  # noqa: E402
from notifications.api.routes import router as notification_router  # noqa: E402
from ordering.api import cart_router, order_router, wishlist_router  # noqa: E402
from ordering.order.queries import order_stats_since  # noqa: E402

for _router in (
    identity_router,
    admin_router,
    category_router,
    product_router,
    tag_router,
    allergen_router,
    cart_router,
    wishlist_router,
    order_router,
    thread_router,
    request_router,
    notification_router,
    newsletter_router,
):
    app.include_router(_router)


@app.get("/admin/dashboard", tags=["admin"])
async def admin_dashboard() -> dict:
    """Customer counters from Identity joined with order counters from Ordering."""
    now = datetime.now(UTC)
    stats = dashboard_stats(now)
    with ordering.domain_context():
        stats.update(order_stats_since(now - NEW_CUSTOMER_WINDOW))
    return stats


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {domain.name: {"name": domain.name} for domain in DOMAINS},
        }
    )
