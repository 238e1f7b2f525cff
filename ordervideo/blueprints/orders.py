"""Orders blueprint — /api/orders/*, /api/qr

JSON API used by the embedded admin dashboard. Every route needs a
merchant session (see decorators.shopify_session_required).

Route Map:
  GET  /api/orders                    — recent Shopify orders + their video_url
  GET  /api/orders/<order_id>         — stored video for one order
  POST /api/orders/<order_id>/video   — save (upsert) an order's video URL
  GET  /api/qr?data=...               — render any text as a QR data URI
"""

import logging

from flask import Blueprint, g, jsonify, request

from ordervideo.decorators import shopify_session_required
from ordervideo.errors import NotFoundError, ValidationError
from ordervideo.extensions import limiter
from ordervideo.services import order_video_store, shopify_service
from ordervideo.services.qr_links import render_qr_data_url

logger = logging.getLogger(__name__)

orders_bp = Blueprint("orders", __name__, url_prefix="/api")

DEFAULT_ORDERS_LIMIT = 10


@orders_bp.route("/orders", methods=["GET"])
@shopify_session_required
def list_orders():
    """Recent orders for the shop, each with a ``video_url`` ("" if unmapped)."""
    limit = request.args.get("limit", DEFAULT_ORDERS_LIMIT, type=int)
    orders = shopify_service.list_orders(g.shopify_session, limit=limit)
    return jsonify(order_video_store.enrich_orders(orders))


@orders_bp.route("/orders/<order_id>", methods=["GET"])
@shopify_session_required
def get_order_video(order_id):
    video_url = order_video_store.get(order_id)
    if video_url is None:
        raise NotFoundError("Order not found")
    return jsonify({"video_url": video_url})


@orders_bp.route("/orders/<order_id>/video", methods=["POST"])
@shopify_session_required
def save_order_video(order_id):
    """Assign a video URL to an order by hand, replacing any earlier one."""
    data = request.get_json(silent=True) or {}
    video_url = data.get("videoUrl")
    if not isinstance(video_url, str) or not video_url.strip():
        raise ValidationError("Missing videoUrl")

    logger.info(f"[Save Video] order={order_id} shop={g.shop}")
    order_video_store.upsert(order_id, video_url)
    return jsonify({"success": True})


@orders_bp.route("/qr", methods=["GET"])
@limiter.limit("60 per minute")
@shopify_session_required
def qr_code():
    data = request.args.get("data")
    if not data:
        raise ValidationError("Missing data")
    return jsonify({"qrDataUrl": render_qr_data_url(data)})
