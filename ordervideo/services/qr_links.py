"""QR links — build the scan link printed on an order and resolve it back.

A scan link looks like ``{HOST}/qr/{order_id}-{phone_tag}``. The phone tag
is the last 10 digits of the customer's phone, or "unknown". Only the
order id (text before the first "-") is used on lookup; the phone part is
carried for display and never checked against the stored record.

Scan lifecycle:

    CREATED -> LINKED -> RESOLVED -> REDIRECTED
                                  \\-> NOT_FOUND   (terminal, not retried)
"""

import base64
import enum
import io
import re
from urllib.parse import quote

import qrcode
from qrcode.image.pil import PilImage

from ordervideo.errors import ValidationError

UNKNOWN_PHONE = "unknown"
PHONE_TAG_DIGITS = 10

# Characters JavaScript's encodeURIComponent leaves alone, besides alphanumerics and "_.-~".
_URI_COMPONENT_SAFE = "!*'()"


class ScanState(enum.Enum):
    CREATED = "created"
    LINKED = "linked"
    RESOLVED = "resolved"
    REDIRECTED = "redirected"
    NOT_FOUND = "not_found"


def phone_tag(phone):
    """Last 10 digits of the phone number, or "unknown" if fewer remain.

    Non-string phones (a JSON number, say) are read through str().
    """
    if phone is None:
        return UNKNOWN_PHONE
    digits = re.sub(r"\D", "", str(phone))
    if len(digits) < PHONE_TAG_DIGITS:
        return UNKNOWN_PHONE
    return digits[-PHONE_TAG_DIGITS:]


def build_scan_link(host, order_id, phone):
    return f"{host.rstrip('/')}/qr/{order_id}-{phone_tag(phone)}"


def resolve_scan(tag):
    """Extract the order id from a scan tag such as "123-5551234567"."""
    order_id = (tag or "").split("-", 1)[0]
    if not order_id:
        raise ValidationError("Malformed scan link")
    return order_id


def render_redirect_target(host, video_url):
    """Player page URL with the video URL percent-encoded as ``video``."""
    encoded = quote(video_url, safe=_URI_COMPONENT_SAFE)
    return f"{host.rstrip('/')}/video-player.html?video={encoded}"


def render_qr_data_url(text):
    """Render text as a QR code PNG and return it as a data URI."""
    if not text:
        raise ValidationError("Missing data")

    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=4,
        border=4,
        image_factory=PilImage,
    )
    qr.add_data(text)
    qr.make(fit=True)
    img = qr.make_image()

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    encoded = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
