"""Files blueprint — /api/files/upload

Forwards one multipart upload (field "file") to Shopify Files so merchants
can host their own order videos. Size is capped by MAX_CONTENT_LENGTH
(50 MB); Flask answers 413 above that before this view runs.
"""

import logging

from flask import Blueprint, g, jsonify, request

from ordervideo.decorators import shopify_session_required
from ordervideo.errors import ValidationError
from ordervideo.services import shopify_service

logger = logging.getLogger(__name__)

files_bp = Blueprint("files", __name__, url_prefix="/api/files")


@files_bp.route("/upload", methods=["POST"])
@shopify_session_required
def upload():
    file = request.files.get("file")
    if file is None or not file.filename:
        raise ValidationError("No file selected")

    data = file.read()
    if not data:
        raise ValidationError("File is empty")

    content_type = file.mimetype or "application/octet-stream"
    logger.info(
        f"[Files Upload] incoming: name={file.filename} size={len(data)} type={content_type}"
    )

    public_url = shopify_service.upload_file(
        g.shopify_session, file.filename, content_type, data
    )
    return jsonify({"public_url": public_url})
