"""Tests for the order video store.

Covers:
- Insert-then-read
- Idempotent upsert (second write replaces, no duplicate row)
- Absent records return None, not an error
- Opaque text ids (integer and string forms address the same row)
- Input validation (empty id / url)
- Batch enrichment (input order, "" for gaps)
- Storage failures surface as StorageError
- ON CONFLICT statement for SQLite and PostgreSQL
- Concurrent upserts of one order against a file-backed database
"""

import threading
from unittest.mock import patch

import pytest
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import OperationalError

from ordervideo import create_app
from ordervideo.config import TestConfig, config_by_name
from ordervideo.errors import StorageError, ValidationError
from ordervideo.extensions import db
from ordervideo.models.order import OrderVideo
from ordervideo.services import order_video_store


class TestUpsertAndGet:
    """Tests for upsert() and get()."""

    def test_insert_then_read(self, app):
        order_video_store.upsert("1001", "https://cdn.example/videos/small.mp4")
        assert order_video_store.get("1001") == "https://cdn.example/videos/small.mp4"

    def test_second_upsert_replaces_url(self, app):
        """upsert(id, url1); upsert(id, url2) -> get(id) == url2, one row."""
        order_video_store.upsert("1002", "https://cdn.example/videos/small.mp4")
        order_video_store.upsert("1002", "https://cdn.example/videos/large.mp4")

        assert order_video_store.get("1002") == "https://cdn.example/videos/large.mp4"
        assert OrderVideo.query.filter_by(id="1002").count() == 1

    def test_repeated_identical_upsert_is_harmless(self, app):
        for _ in range(3):
            order_video_store.upsert("1003", "https://cdn.example/videos/medium.mp4")
        assert OrderVideo.query.count() == 1

    def test_missing_record_returns_none(self, app):
        assert order_video_store.get("never-stored") is None

    def test_integer_and_text_ids_are_the_same_key(self, app):
        """Platform ids arrive as ints, URL ids as text — both hit one row."""
        order_video_store.upsert(5501234567, "https://cdn.example/videos/small.mp4")
        assert order_video_store.get("5501234567") == "https://cdn.example/videos/small.mp4"

    def test_non_numeric_ids_are_stored_verbatim(self, app):
        order_video_store.upsert("gid-ABC", "https://cdn.example/videos/small.mp4")
        row = db.session.get(OrderVideo, "gid-ABC")
        assert row is not None
        assert row.video_url == "https://cdn.example/videos/small.mp4"

    @pytest.mark.parametrize("order_id", ["", "   ", None])
    def test_empty_order_id_rejected(self, app, order_id):
        with pytest.raises(ValidationError):
            order_video_store.upsert(order_id, "https://cdn.example/videos/small.mp4")

    @pytest.mark.parametrize("video_url", ["", "   ", None])
    def test_empty_video_url_rejected(self, app, video_url):
        with pytest.raises(ValidationError):
            order_video_store.upsert("1004", video_url)
        assert order_video_store.get("1004") is None


class TestStorageFailures:
    """Database errors become StorageError and leave the session usable."""

    def test_upsert_failure_raises_storage_error(self, app):
        error = OperationalError("INSERT", {}, Exception("disk I/O error"))
        with patch.object(db.session, "execute", side_effect=error):
            with pytest.raises(StorageError):
                order_video_store.upsert("2001", "https://cdn.example/videos/small.mp4")

        # Session was rolled back; later writes still work
        order_video_store.upsert("2001", "https://cdn.example/videos/small.mp4")
        assert order_video_store.get("2001") == "https://cdn.example/videos/small.mp4"

    def test_get_failure_raises_storage_error(self, app):
        error = OperationalError("SELECT", {}, Exception("database is locked"))
        with patch.object(db.session, "execute", side_effect=error):
            with pytest.raises(StorageError):
                order_video_store.get("2002")


class TestListEnriched:
    """Tests for list_enriched() and enrich_orders()."""

    def test_missing_ids_get_empty_string(self, app):
        order_video_store.upsert("3001", "https://cdn.example/videos/small.mp4")

        result = order_video_store.list_enriched(["3001", "3002"])
        assert result == [
            {"order_id": "3001", "video_url": "https://cdn.example/videos/small.mp4"},
            {"order_id": "3002", "video_url": ""},
        ]

    def test_preserves_input_order_and_duplicates(self, app):
        order_video_store.upsert("3003", "https://cdn.example/videos/large.mp4")

        result = order_video_store.list_enriched(["3004", "3003", "3004"])
        assert [r["order_id"] for r in result] == ["3004", "3003", "3004"]
        assert result[1]["video_url"] == "https://cdn.example/videos/large.mp4"

    def test_empty_input(self, app):
        assert order_video_store.list_enriched([]) == []

    def test_enrich_orders_copies_platform_orders(self, app):
        order_video_store.upsert("3005", "https://cdn.example/videos/medium.mp4")
        orders = [
            {"id": 3005, "name": "#1005", "total_price": "75.00"},
            {"id": 3006, "name": "#1006", "total_price": "10.00"},
        ]

        enriched = order_video_store.enrich_orders(orders)

        assert enriched[0]["video_url"] == "https://cdn.example/videos/medium.mp4"
        assert enriched[0]["name"] == "#1005"
        assert enriched[1]["video_url"] == ""
        # Inputs untouched
        assert "video_url" not in orders[0]


class TestUpsertStatement:
    """The upsert is one INSERT .. ON CONFLICT statement on every dialect."""

    def test_postgresql_on_conflict(self):
        stmt = order_video_store.upsert_statement(
            "postgresql", "4001", "https://cdn.example/videos/small.mp4"
        )
        sql = " ".join(str(stmt.compile(dialect=postgresql.dialect())).split())

        assert sql.startswith("INSERT INTO orders (id, video_url)")
        assert "ON CONFLICT (id) DO UPDATE SET video_url = excluded.video_url" in sql

    def test_sqlite_on_conflict(self):
        stmt = order_video_store.upsert_statement(
            "sqlite", "4002", "https://cdn.example/videos/small.mp4"
        )
        sql = " ".join(str(stmt.compile(dialect=sqlite.dialect())).split())

        assert "ON CONFLICT (id) DO UPDATE SET video_url = excluded.video_url" in sql

    def test_unsupported_dialect_raises_storage_error(self):
        with pytest.raises(StorageError) as exc_info:
            order_video_store.upsert_statement("mysql", "4003", "https://cdn.example/v.mp4")
        assert "mysql" in exc_info.value.message

    def test_upsert_on_unsupported_dialect_writes_nothing(self, app):
        with patch.dict(order_video_store._DIALECT_INSERTS, clear=True):
            with pytest.raises(StorageError):
                order_video_store.upsert("4004", "https://cdn.example/videos/small.mp4")
        assert order_video_store.get("4004") is None


class TestConcurrentUpserts:
    """Many writers on one order leave exactly one row holding one of their URLs."""

    THREADS = 8
    WRITES_PER_THREAD = 5

    @pytest.fixture
    def file_app(self, tmp_path):
        db_path = tmp_path / "orders.sqlite"
        file_config = type("FileDbConfig", (TestConfig,), {
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_path}",
            "SQLALCHEMY_ENGINE_OPTIONS": {
                "connect_args": {"check_same_thread": False, "timeout": 30},
            },
        })
        with patch.dict(config_by_name, {"file-testing": file_config}):
            app = create_app("file-testing")
        yield app
        with app.app_context():
            db.engine.dispose()

    def test_same_order_from_many_threads(self, file_app):
        urls = [
            f"https://cdn.example/videos/{t}-{w}.mp4"
            for t in range(self.THREADS)
            for w in range(self.WRITES_PER_THREAD)
        ]
        errors = []
        start = threading.Barrier(self.THREADS)

        def writer(thread_no):
            start.wait()
            for w in range(self.WRITES_PER_THREAD):
                try:
                    with file_app.app_context():
                        order_video_store.upsert(
                            "race-1", f"https://cdn.example/videos/{thread_no}-{w}.mp4"
                        )
                except Exception as e:
                    errors.append(e)

        threads = [
            threading.Thread(target=writer, args=(t,)) for t in range(self.THREADS)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        with file_app.app_context():
            assert OrderVideo.query.filter_by(id="race-1").count() == 1
            assert order_video_store.get("race-1") in urls
