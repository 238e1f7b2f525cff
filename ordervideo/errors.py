"""Error taxonomy and the JSON error handlers installed on the app.

Services raise these; the request boundary (Flask errorhandlers) turns them
into ``{"error": "..."}`` responses. Nothing is retried here — a client
retry is the only recovery path.

    ValidationError  -> 400  missing/malformed input
    AuthError        -> 403  no merchant session
    NotFoundError    -> 404  no stored record (not a fault)
    StorageError     -> 500  database I/O failure
    ShopifyAPIError  -> 502  the platform rejected or failed a call
"""

import json
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500
    default_message = "Internal error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError, ValueError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(AppError):
    status_code = 403
    default_message = "No session"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class StorageError(AppError):
    status_code = 500
    default_message = "Storage failure"


class ShopifyAPIError(AppError):
    status_code = 502

    def __init__(self, message=None, body=None):
        super().__init__(message or "Shopify request failed")
        self.body = body


def register_error_handlers(app):
    """Render every error as JSON so the embedded frontend can read it."""

    @app.errorhandler(AppError)
    def handle_app_error(e):
        if e.status_code >= 500:
            logger.error(f"{type(e).__name__}: {e.message}")
        payload = {"error": e.message}
        if isinstance(e, ShopifyAPIError) and e.body is not None:
            payload["details"] = e.body
        return jsonify(payload), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        # Keep the exception's own headers (Allow on 405, Retry-After on 429)
        response = e.get_response()
        response.data = json.dumps({"error": e.description})
        response.content_type = "application/json"
        return response

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception(f"Unhandled error: {e}")
        return jsonify({"error": "Internal server error"}), 500
