import os
import tempfile


def _default_database_uri():
    """Resolve the orders database location.

    DATABASE_URL wins when set. Otherwise a SQLite file: serverless
    deployments (Vercel) only have a writable temp dir, everywhere else the
    file lives in the working directory.
    """
    db_url = os.environ.get("DATABASE_URL", "")
    # Some PaaS providers still hand out "postgres://", which SQLAlchemy 1.4+ rejects.
    if db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql://", 1)
    if db_url:
        return db_url

    if os.environ.get("VERCEL"):
        db_path = os.path.join(tempfile.gettempdir(), "orders.sqlite")
    else:
        db_path = os.path.join(os.getcwd(), "orders.sqlite")
    return f"sqlite:///{db_path}"


class Config:
    """Base configuration. Shared across all environments."""

    # --- Required ---
    SECRET_KEY = os.environ.get("SECRET_KEY")
    HOST = os.environ.get("HOST", "")
    MEDIA_BASE_URL = os.environ.get("MEDIA_BASE_URL", "")

    # --- Shopify app credentials ---
    SHOPIFY_API_KEY = os.environ.get("SHOPIFY_API_KEY")
    SHOPIFY_API_SECRET_KEY = os.environ.get("SHOPIFY_API_SECRET_KEY")
    SHOPIFY_API_VERSION = os.environ.get("SHOPIFY_API_VERSION", "2024-10")
    SCOPES = os.environ.get("SCOPES", "read_orders,write_files")

    # --- SQLAlchemy ---
    SQLALCHEMY_DATABASE_URI = _default_database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --- Uploads ---
    MAX_CONTENT_LENGTH = 50 * 1024 * 1024  # 50 MB, matches Shopify Files limit

    # --- Rate limiting ---
    RATELIMIT_ENABLED = True

    @staticmethod
    def validate():
        """Fail fast if required env vars are missing."""
        required = [
            "HOST",
            "MEDIA_BASE_URL",
            "SHOPIFY_API_KEY",
            "SHOPIFY_API_SECRET_KEY",
        ]
        missing = [v for v in required if not os.environ.get(v)]
        if missing:
            raise RuntimeError(
                f"Missing required environment variables: {', '.join(missing)}"
            )


class DevConfig(Config):
    """Local development (ngrok tunnel in front of the dev server)."""

    DEBUG = True


class TestConfig(Config):
    """Testing — in-memory SQLite, fixed hosts, no rate limiting."""

    TESTING = True
    DEBUG = True
    SECRET_KEY = "test-secret-key-not-for-production"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    HOST = "https://app.example.test"
    MEDIA_BASE_URL = "https://cdn.example/videos"
    SHOPIFY_API_KEY = "test-api-key"
    SHOPIFY_API_SECRET_KEY = "test-api-secret"
    SHOPIFY_API_VERSION = "2024-10"
    RATELIMIT_ENABLED = False

    @staticmethod
    def validate():
        """Skip validation in test mode — everything is hardcoded."""
        pass


class ProdConfig(Config):
    """Production (Vercel or any long-running host)."""

    DEBUG = False


config_by_name = {
    "development": DevConfig,
    "production": ProdConfig,
    "testing": TestConfig,
}
