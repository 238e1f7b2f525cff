"""Shopify service — thin calls into the Admin REST API for one shop.

Sessions (shop + offline access token) are written by the Shopify OAuth
install flow, which runs outside this service. We only read them here.

Uses:
- Admin REST ``orders.json`` for the dashboard order list.
- Admin REST ``files.json`` to host merchant-uploaded videos.
"""

import base64
import logging

import requests
from flask import current_app

from ordervideo.errors import ShopifyAPIError
from ordervideo.extensions import db
from ordervideo.models.shopify_session import ShopifySession

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 15  # seconds
UPLOAD_TIMEOUT = 60
MAX_ORDERS_LIMIT = 250  # Shopify's page size cap


def get_offline_id(shop):
    """Session id the Shopify SDK uses for a shop's offline token."""
    return f"offline_{shop}"


def load_offline_session(shop):
    """Return the stored offline ShopifySession for a shop, or None."""
    if not shop:
        return None
    return db.session.get(ShopifySession, get_offline_id(shop))


def store_offline_session(shop, access_token, scope=None):
    """Create or replace the offline session for a shop. Commits."""
    session = load_offline_session(shop)
    if session is None:
        session = ShopifySession(id=get_offline_id(shop), shop=shop)
        db.session.add(session)
    session.access_token = access_token
    session.scope = scope
    session.is_online = False
    db.session.commit()
    return session


def _admin_url(shop, resource):
    version = current_app.config["SHOPIFY_API_VERSION"]
    return f"https://{shop}/admin/api/{version}/{resource}.json"


def _headers(session):
    return {
        "X-Shopify-Access-Token": session.access_token,
        "Content-Type": "application/json",
        "Accept": "application/json",
    }


def _error_body(resp):
    try:
        return resp.json().get("errors", resp.text)
    except ValueError:
        return resp.text


def list_orders(session, limit=10, status="any"):
    """Fetch the shop's most recent orders (one page).

    Returns a list of order dicts as Shopify sends them.

    Raises:
        ShopifyAPIError: On network failure or a non-2xx response.
    """
    limit = max(1, min(int(limit), MAX_ORDERS_LIMIT))
    url = _admin_url(session.shop, "orders")

    try:
        resp = requests.get(
            url,
            headers=_headers(session),
            params={"status": status, "limit": limit},
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error(f"Orders request to {session.shop} failed: {e}")
        raise ShopifyAPIError("Could not reach Shopify") from e

    if not resp.ok:
        body = _error_body(resp)
        logger.error(f"Orders request to {session.shop} returned {resp.status_code}: {body}")
        raise ShopifyAPIError(f"Shopify returned {resp.status_code}", body=body)

    orders = resp.json().get("orders", [])
    logger.info(f"Fetched {len(orders)} orders for {session.shop}")
    return orders


def upload_file(session, filename, content_type, data):
    """Create a Shopify File from raw bytes and return its public URL.

    Raises:
        ShopifyAPIError: On network failure, a non-2xx response, or a
            response without a public_url.
    """
    payload = {
        "file": {
            "attachment": base64.b64encode(data).decode("ascii"),
            "filename": filename,
            "content_type": content_type,
        }
    }

    try:
        resp = requests.post(
            _admin_url(session.shop, "files"),
            headers=_headers(session),
            json=payload,
            timeout=UPLOAD_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error(f"File upload to {session.shop} failed: {e}")
        raise ShopifyAPIError("Could not reach Shopify") from e

    if not resp.ok:
        body = _error_body(resp)
        logger.error(f"File upload to {session.shop} returned {resp.status_code}: {body}")
        raise ShopifyAPIError(f"Shopify returned {resp.status_code}", body=body)

    public_url = (resp.json().get("file") or {}).get("public_url")
    if not public_url:
        raise ShopifyAPIError("Shopify response had no public_url")

    logger.info(f"Uploaded {filename} for {session.shop}: {public_url}")
    return public_url
