# Models package — import all models here so Alembic can discover them.

from ordervideo.models.order import OrderVideo  # noqa: F401
from ordervideo.models.shopify_session import ShopifySession  # noqa: F401
