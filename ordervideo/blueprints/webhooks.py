"""Webhooks blueprint — /webhook/orders/create, /api/webhooks

Receives Shopify webhook deliveries. Signature (HMAC) validation is done
upstream by the Shopify app layer before a delivery reaches these routes.

orders/create is idempotent: a re-delivered order overwrites its own row
with the same video URL, so Shopify retries are harmless.
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from ordervideo.errors import ValidationError
from ordervideo.services import order_video_store
from ordervideo.services.qr_links import (
    ScanState,
    build_scan_link,
    render_qr_data_url,
)
from ordervideo.services.video_tiers import video_url_for

logger = logging.getLogger(__name__)

webhooks_bp = Blueprint("webhooks", __name__)

# Mandatory GDPR topics every public Shopify app must accept.
PRIVACY_TOPICS = {
    "customers/data_request",
    "customers/redact",
    "shop/redact",
}


@webhooks_bp.route("/webhook/orders/create", methods=["POST"])
def order_created():
    """Assign a tier video to a new order and answer with its QR code.

    1. Classify total_price into small / medium / large
    2. Upsert order id -> tier video URL
    3. Build the scan link {HOST}/qr/{order_id}-{phone_tag}
    4. Return the link rendered as a QR data URI
    """
    order = request.get_json(silent=True)
    if not isinstance(order, dict):
        raise ValidationError("Invalid order payload")

    order_id = order.get("id")
    if order_id is None or str(order_id).strip() == "":
        raise ValidationError("Missing order id")
    order_id = str(order_id).strip()

    customer = order.get("customer") or {}
    phone = customer.get("phone") if isinstance(customer, dict) else None

    video_url = video_url_for(
        order.get("total_price"), current_app.config["MEDIA_BASE_URL"]
    )
    order_video_store.upsert(order_id, video_url)
    logger.info(f"[Webhook QR] order={order_id} state={ScanState.CREATED.value}")

    link = build_scan_link(current_app.config["HOST"], order_id, phone)
    qr_data_url = render_qr_data_url(link)
    logger.info(f"[Webhook QR] order={order_id} state={ScanState.LINKED.value} link={link}")

    return jsonify({
        "qrDataUrl": qr_data_url,
        "link": link,
        "video_url": video_url,
    })


@webhooks_bp.route("/api/webhooks", methods=["POST"])
def privacy_webhook():
    """Acknowledge the mandatory privacy webhooks.

    This service stores no customer data (only order ids and video URLs),
    so there is nothing to export or redact; we log and return 200.
    """
    topic = request.headers.get("X-Shopify-Topic", "")
    shop = request.headers.get("X-Shopify-Shop-Domain", "")

    if topic in PRIVACY_TOPICS:
        logger.info(f"Privacy webhook {topic} from {shop}: no customer data stored")
    else:
        logger.warning(f"Unhandled webhook topic {topic!r} from {shop}")

    return jsonify({"status": "ok"}), 200
