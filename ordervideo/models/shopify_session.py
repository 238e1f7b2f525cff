"""Shopify session model.

Rows are written by the Shopify OAuth install flow, which lives outside this
service; we only read the offline session for a shop to call the Admin API.
Offline session ids follow the platform convention ``offline_{shop}``.
"""

from ordervideo.extensions import db


class ShopifySession(db.Model):
    __tablename__ = "shopify_sessions"

    id = db.Column(db.String(255), primary_key=True)  # e.g. "offline_demo.myshopify.com"
    shop = db.Column(db.String(255), nullable=False, index=True)
    access_token = db.Column(db.String(255), nullable=False)
    scope = db.Column(db.String(1024), nullable=True)
    is_online = db.Column(
        db.Boolean, default=False, server_default=db.false(), nullable=False
    )
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )

    def __repr__(self):
        kind = "online" if self.is_online else "offline"
        return f"<ShopifySession {self.shop} ({kind})>"
