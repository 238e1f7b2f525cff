"""Video tiers — pick one of three static videos from an order's total price.

    total < 50          -> small
    50 <= total < 200   -> medium
    total >= 200        -> large

Prices that do not parse to a finite, non-negative number are rejected
rather than falling through to a default tier.
"""

import math

from ordervideo.errors import AppError, ValidationError

TIER_SMALL_MAX = 50
TIER_MEDIUM_MAX = 200

VIDEO_TIERS = ("small", "medium", "large")


def _parse_price(total_price):
    if isinstance(total_price, bool) or total_price is None:
        raise ValidationError(f"Invalid total_price: {total_price!r}")
    try:
        price = float(total_price)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid total_price: {total_price!r}")
    if not math.isfinite(price) or price < 0:
        raise ValidationError(f"Invalid total_price: {total_price!r}")
    return price


def classify_video(total_price):
    """Return the tier name ("small", "medium" or "large") for a total price.

    Accepts numbers and numeric strings such as Shopify's "75.00".

    Raises:
        ValidationError: If the price is missing, unparsable, negative or
            not finite.
    """
    price = _parse_price(total_price)
    if price < TIER_SMALL_MAX:
        return "small"
    if price < TIER_MEDIUM_MAX:
        return "medium"
    return "large"


def video_url_for(total_price, media_base_url):
    """Full URL of the tier video for a total price."""
    if not media_base_url:
        raise AppError("MEDIA_BASE_URL is not configured")
    tier = classify_video(total_price)
    return f"{media_base_url.rstrip('/')}/{tier}.mp4"
