"""Order video store — durable, idempotent ``order id -> video URL`` mapping.

Writes are a single ``INSERT ... ON CONFLICT(id) DO UPDATE`` statement, so
concurrent writers for the same order are serialized by the database on the
primary key and the last committed write wins. Reads are not isolated from
in-flight writes; a read racing an upsert may see either value.

Order ids are opaque text. Integer ids coming from the platform payload are
converted with str() so they address the same row as ids taken from a URL.

Unlike the other services, upsert() commits: every caller wants the write
durable before answering.
"""

import logging

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from ordervideo.errors import StorageError, ValidationError
from ordervideo.extensions import db
from ordervideo.models.order import OrderVideo

logger = logging.getLogger(__name__)

_DIALECT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}


def _normalize_id(order_id):
    """Return the order id as stripped text, or raise ValidationError."""
    if order_id is None:
        raise ValidationError("Missing order id")
    value = str(order_id).strip()
    if not value:
        raise ValidationError("Missing order id")
    return value


def init_store(app):
    """Create the backing tables if they do not exist yet.

    Called once from create_app(), before the app can serve a request, so
    every store operation runs against a ready table.
    """
    with app.app_context():
        db.create_all()
    logger.info("Order video store ready")


def upsert_statement(dialect, order_id, video_url):
    """Build the single INSERT .. ON CONFLICT(id) DO UPDATE statement.

    Raises:
        StorageError: If the dialect has no ON CONFLICT insert.
    """
    insert = _DIALECT_INSERTS.get(dialect)
    if insert is None:
        raise StorageError(f"Unsupported database dialect: {dialect}")

    stmt = insert(OrderVideo.__table__).values(id=order_id, video_url=video_url)
    return stmt.on_conflict_do_update(
        index_elements=[OrderVideo.__table__.c.id],
        set_={"video_url": stmt.excluded.video_url},
    )


def upsert(order_id, video_url):
    """Insert the order's video URL, or replace it if the order already exists.

    Raises:
        ValidationError: If order_id or video_url is empty.
        StorageError: If the database write fails.
    """
    order_id = _normalize_id(order_id)
    video_url = (video_url or "").strip()
    if not video_url:
        raise ValidationError("Missing videoUrl")

    stmt = upsert_statement(db.engine.dialect.name, order_id, video_url)

    try:
        db.session.execute(stmt)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception(f"Upsert failed for order {order_id}")
        raise StorageError(f"Could not save video for order {order_id}") from e

    logger.info(f"Stored video for order {order_id}: {video_url}")


def get(order_id):
    """Return the stored video URL for the order, or None if there is none."""
    order_id = _normalize_id(order_id)
    try:
        return db.session.execute(
            select(OrderVideo.video_url).where(OrderVideo.id == order_id)
        ).scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.exception(f"Lookup failed for order {order_id}")
        raise StorageError(f"Could not read order {order_id}") from e


def list_enriched(order_ids):
    """Pair each order id with its video URL ("" when unmapped).

    Output order matches input order. Missing rows are an enrichment gap,
    not an error, so this never raises NotFoundError.
    """
    keys = [str(order_id) for order_id in order_ids]
    if not keys:
        return []

    try:
        rows = db.session.execute(
            select(OrderVideo.id, OrderVideo.video_url).where(
                OrderVideo.id.in_(set(keys))
            )
        ).all()
    except SQLAlchemyError as e:
        logger.exception("Batch lookup of order videos failed")
        raise StorageError("Could not read order videos") from e

    found = {row.id: row.video_url for row in rows}
    return [{"order_id": key, "video_url": found.get(key, "")} for key in keys]


def enrich_orders(orders):
    """Return copies of platform order dicts with a ``video_url`` key added."""
    pairs = list_enriched(order["id"] for order in orders)
    return [
        {**order, "video_url": pair["video_url"]}
        for order, pair in zip(orders, pairs)
    ]
