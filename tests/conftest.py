"""Shared test fixtures for the order video test suite.

Provides:
- app: Flask app configured for testing (in-memory SQLite, fixed HOST/MEDIA_BASE_URL)
- client: Flask test client
- db_session: clean database per test (tables created/dropped)
- shop_session: a stored offline Shopify session for SHOP
"""

import pytest

from ordervideo import create_app
from ordervideo.extensions import db as _db
from ordervideo.models.shopify_session import ShopifySession

SHOP = "test-shop.myshopify.com"
HOST = "https://app.example.test"
MEDIA_BASE_URL = "https://cdn.example/videos"


@pytest.fixture(scope="session")
def app():
    """Create the Flask application configured for testing."""
    app = create_app("testing")
    yield app


@pytest.fixture(autouse=True)
def db_session(app):
    """Create all tables before each test, drop after."""
    with app.app_context():
        _db.create_all()
        yield _db.session
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def shop_session(app, db_session):
    """Store an offline session for SHOP, as the OAuth install flow would."""
    session = ShopifySession(
        id=f"offline_{SHOP}",
        shop=SHOP,
        access_token="shpat_test_token",
        scope="read_orders,write_files",
        is_online=False,
    )
    db_session.add(session)
    db_session.commit()
    return {"shop": SHOP, "session": session, "session_id": session.id}
