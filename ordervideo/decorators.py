"""
Custom route decorators for access control.

- shopify_session_required: ensures the request names a shop (400 otherwise)
  AND that shop has a stored Shopify session (403 otherwise). It does not
  verify an App Bridge session token; see middleware/shop.py.
"""

from functools import wraps

from flask import g

from ordervideo.errors import AuthError, ValidationError


def shopify_session_required(f):
    """Require a shop + its Shopify session (set by shop middleware)."""

    @wraps(f)
    def decorated(*args, **kwargs):
        if not getattr(g, "shop", None):
            raise ValidationError("Missing shop")
        if getattr(g, "shopify_session", None) is None:
            raise AuthError("No session")
        return f(*args, **kwargs)

    return decorated
