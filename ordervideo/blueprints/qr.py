"""QR blueprint — /qr/<tag>

Public endpoint hit by a customer's phone camera. Resolves the scan tag to
the order's stored video and redirects to the player page. An unknown
order is a terminal 404; the scan is not queued or retried.
"""

import logging

from flask import Blueprint, current_app, redirect

from ordervideo.errors import NotFoundError
from ordervideo.extensions import limiter
from ordervideo.services import order_video_store
from ordervideo.services.qr_links import (
    ScanState,
    render_redirect_target,
    resolve_scan,
)

logger = logging.getLogger(__name__)

qr_bp = Blueprint("qr", __name__, url_prefix="/qr")


@qr_bp.route("/<tag>", methods=["GET"])
@limiter.limit("120 per minute")
def scan(tag):
    """302 to the video player for the scanned order, or 404."""
    order_id = resolve_scan(tag)
    video_url = order_video_store.get(order_id)

    if video_url is None:
        logger.info(f"[Scan] order={order_id} state={ScanState.NOT_FOUND.value}")
        raise NotFoundError("Order not found")

    logger.info(f"[Scan] order={order_id} state={ScanState.RESOLVED.value}")
    target = render_redirect_target(current_app.config["HOST"], video_url)
    logger.info(f"[Scan] order={order_id} state={ScanState.REDIRECTED.value}")
    return redirect(target, code=302)
