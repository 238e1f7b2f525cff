import os
import logging

import click
from flask import Flask, current_app, jsonify

from ordervideo.config import config_by_name
from ordervideo.errors import register_error_handlers
from ordervideo.extensions import db, migrate, limiter


def create_app(config_name=None):
    """Application factory."""

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # --- Validate required env vars (skip in testing) ---
    if config_name != "testing":
        try:
            config_by_name[config_name].validate()
        except RuntimeError as e:
            app.logger.warning(f"Config validation: {e}")

    # --- Init extensions ---
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    # --- Import models so Alembic can discover them ---
    with app.app_context():
        from ordervideo import models  # noqa: F401

    # --- Create tables once, before the first request is served ---
    from ordervideo.services.order_video_store import init_store
    init_store(app)

    # --- Request logging + shop session middleware ---
    from ordervideo.middleware.shop import init_shop_middleware
    init_shop_middleware(app)

    # --- Register blueprints ---
    from ordervideo.blueprints.orders import orders_bp
    from ordervideo.blueprints.webhooks import webhooks_bp
    from ordervideo.blueprints.qr import qr_bp
    from ordervideo.blueprints.files import files_bp

    app.register_blueprint(orders_bp)
    app.register_blueprint(webhooks_bp)
    app.register_blueprint(qr_bp)
    app.register_blueprint(files_bp)

    @app.route("/health")
    @app.route("/api/health")
    def health():
        return jsonify({"status": "ok"})

    # --- Error handlers ---
    register_error_handlers(app)

    # --- CLI commands ---
    register_cli(app)

    # --- Security headers ---
    @app.after_request
    def add_security_headers(response):
        """Add security headers to every response."""
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Embedded apps are framed by the Shopify admin, so no X-Frame-Options: DENY
        response.headers["Content-Security-Policy"] = (
            "frame-ancestors https://*.myshopify.com https://admin.shopify.com;"
        )
        return response

    # --- Logging ---
    if not app.debug:
        logging.basicConfig(level=logging.INFO)

    return app


def register_cli(app):
    """Register custom CLI commands with the Flask app."""

    @app.cli.command("init-db")
    def init_db():
        """Create the orders and sessions tables if they are missing."""
        db.create_all()
        click.echo("Tables ready.")

    @app.cli.command("store-session")
    @click.option("--shop", required=True, help="Shop domain, e.g. demo.myshopify.com")
    @click.option("--token", required=True, help="Offline Admin API access token")
    @click.option("--scope", default=None, help="Granted scopes (comma separated)")
    def store_session(shop, token, scope):
        """Seed an offline Shopify session for local development.

        Usage:
            flask store-session --shop demo.myshopify.com --token shpat_xxx
        """
        from ordervideo.services.shopify_service import store_offline_session

        session = store_offline_session(shop, token, scope=scope)
        click.echo(f"Stored session {session.id}")

    @app.cli.command("set-video")
    @click.argument("order_id")
    @click.argument("video_url")
    def set_video(order_id, video_url):
        """Assign VIDEO_URL to ORDER_ID (insert or replace)."""
        from ordervideo.services import order_video_store

        order_video_store.upsert(order_id, video_url)
        click.echo(f"Order {order_id} -> {video_url}")

    @app.cli.command("scan-link")
    @click.argument("order_id")
    @click.option("--phone", default=None, help="Customer phone number")
    def scan_link(order_id, phone):
        """Print the QR scan link for ORDER_ID."""
        from ordervideo.services.qr_links import build_scan_link

        host = current_app.config["HOST"]
        if not host:
            click.echo("ERROR: HOST is not set.")
            return
        click.echo(build_scan_link(host, order_id, phone))
