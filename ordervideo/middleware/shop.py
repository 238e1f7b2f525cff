"""Shop middleware — resolves the merchant's Shopify session per request.

Runs before every /api/* request (except the platform's own webhook
endpoint and the health check). Sets g.shop and g.shopify_session; it never
rejects a request itself, that is left to @shopify_session_required so each
route decides.

The shop comes from the ``shop`` query parameter, falling back to the
``X-Shopify-Shop-Domain`` header.

This is NOT a session-token check. A request that names a shop with a
stored offline session is treated as that merchant; the App Bridge session
token (JWT) is not verified here. Verifying it belongs to the Shopify app
layer in front of this service.
"""

import logging

from flask import g, request

from ordervideo.services.shopify_service import load_offline_session

logger = logging.getLogger(__name__)

# Platform-facing endpoints that never carry a merchant session
SKIPPED_API_PATHS = ("/api/webhooks", "/api/health")


def log_request():
    """Log every incoming request (method, path, query args)."""
    logger.info(f"Incoming: {request.method} {request.path} {request.args.to_dict()}")


def resolve_shop():
    """Before-request hook for the embedded-app API."""
    g.shop = None
    g.shopify_session = None

    path = request.path
    if not path.startswith("/api/") or path.startswith(SKIPPED_API_PATHS):
        return

    shop = (
        request.args.get("shop")
        or request.headers.get("X-Shopify-Shop-Domain")
        or ""
    ).strip()
    if not shop:
        return

    g.shop = shop
    g.shopify_session = load_offline_session(shop)
    if g.shopify_session is None:
        logger.warning(f"No offline session stored for {shop}")


def init_shop_middleware(app):
    """Register the request logger and shop resolver as before_request hooks."""
    app.before_request(log_request)
    app.before_request(resolve_shop)
