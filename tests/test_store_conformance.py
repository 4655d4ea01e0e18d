"""
Every store variant must behave identically. SQLite always runs; set
TEST_POSTGRES_URL / TEST_MYSQL_URL to include the other backends.
"""
import os
import threading
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from conftest import build_app
from feedback_desk.errors import PersistenceError
from feedback_desk.extensions import db
from feedback_desk.models import STATUS_PENDING
from feedback_desk.services.store import (
    MySQLFeedbackStore,
    PostgresFeedbackStore,
    SQLiteFeedbackStore,
    day_bounds_utc,
    store_class_for,
)

BACKENDS = [
    pytest.param("sqlite-memory", id="sqlite-memory"),
    pytest.param("sqlite-file", id="sqlite-file"),
    pytest.param(
        os.environ.get("TEST_POSTGRES_URL"), id="postgresql",
        marks=pytest.mark.skipif(not os.environ.get("TEST_POSTGRES_URL"), reason="TEST_POSTGRES_URL not set"),
    ),
    pytest.param(
        os.environ.get("TEST_MYSQL_URL"), id="mysql",
        marks=pytest.mark.skipif(not os.environ.get("TEST_MYSQL_URL"), reason="TEST_MYSQL_URL not set"),
    ),
]


def _fields(**changes):
    fields = {
        "type": "complaint",
        "department": "Radiology",
        "target_role": "nurse",
        "target_name": "",
        "description": "slow response",
        "submitter_name": "",
        "submitter_phone": "",
        "ip_address": "10.0.0.1",
    }
    fields.update(changes)
    return fields


@pytest.fixture(params=BACKENDS)
def backend_app(request, tmp_path):
    url = request.param
    if url == "sqlite-memory":
        url = "sqlite:///:memory:"
    elif url == "sqlite-file":
        url = f"sqlite:///{tmp_path}/feedback.db"
    app = build_app(SQLALCHEMY_DATABASE_URI=url)
    with app.app_context():
        db.drop_all()
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture()
def vstore(backend_app):
    with backend_app.app_context():
        yield backend_app.extensions["feedback_desk"]["store"]


def test_empty_store(vstore):
    assert vstore.list_all() == []
    assert vstore.count_all() == 0
    assert vstore.count_by_type("complaint") == 0


def test_insert_assigns_increasing_ids_and_defaults(vstore):
    first = vstore.insert(_fields())
    second = vstore.insert(_fields(type="praise"))
    assert second > first

    row = vstore.get(first)
    assert row.status == STATUS_PENDING
    assert row.ip_address == "10.0.0.1"
    assert row.created_at_utc is not None
    assert vstore.count_all() == 2


def test_insert_fills_optional_fields_with_empty_strings(vstore):
    new_id = vstore.insert(_fields(target_name=None, submitter_phone=None))
    row = vstore.get(new_id)
    assert row.target_name == ""
    assert row.submitter_phone == ""


def test_list_all_newest_first(vstore):
    ids = [vstore.insert(_fields(description=f"item {i}")) for i in range(3)]
    assert [r.id for r in vstore.list_all()] == list(reversed(ids))


def test_update_status_keeps_created_at(vstore):
    new_id = vstore.insert(_fields())
    created = vstore.get(new_id).created_at_utc

    assert vstore.update_status(new_id, "resolved") is True
    row = vstore.get(new_id)
    assert row.status == "resolved"
    assert row.created_at_utc == created


def test_update_status_to_same_value_still_found(vstore):
    new_id = vstore.insert(_fields())
    assert vstore.update_status(new_id, STATUS_PENDING) is True


def test_update_missing_id_reports_not_found(vstore):
    vstore.insert(_fields())
    assert vstore.update_status(9999, "resolved") is False
    assert [r.status for r in vstore.list_all()] == [STATUS_PENDING]


def test_delete_by_id(vstore):
    keep = vstore.insert(_fields())
    gone = vstore.insert(_fields())
    assert vstore.delete_by_id(gone) is True
    assert vstore.get(gone) is None
    assert [r.id for r in vstore.list_all()] == [keep]


def test_delete_missing_id_leaves_store_intact(vstore):
    vstore.insert(_fields())
    assert vstore.delete_by_id(9999) is False
    assert vstore.count_all() == 1


def test_counts_by_type(vstore):
    vstore.insert(_fields(type="complaint"))
    vstore.insert(_fields(type="complaint"))
    vstore.insert(_fields(type="praise"))
    assert vstore.count_by_type("complaint") == 2
    assert vstore.count_by_type("praise") == 1
    assert vstore.count_by_type("suggestion") == 0
    assert vstore.count_by_status(STATUS_PENDING) == 3


def test_count_created_on_uses_given_zone(vstore):
    new_id = vstore.insert(_fields())
    created = vstore.get(new_id).created_at_utc
    tz = ZoneInfo("Asia/Shanghai")
    local_day = created.astimezone(tz).date()

    assert vstore.count_created_on(local_day, tz) == 1
    assert vstore.count_created_on(local_day - timedelta(days=1), tz) == 0
    assert vstore.count_created_on(local_day + timedelta(days=1), tz) == 0


def test_ping(vstore):
    vstore.ping()


def test_backend_failure_becomes_persistence_error(backend_app, vstore):
    db.drop_all()
    with pytest.raises(PersistenceError) as exc:
        vstore.insert(_fields())
    # generic message only, no driver text
    assert "feedbacks" not in exc.value.message
    with pytest.raises(PersistenceError):
        vstore.list_all()
    db.create_all()
    assert vstore.count_all() == 0


def test_day_bounds_utc_for_shanghai():
    start, end = day_bounds_utc(date(2026, 10, 19), ZoneInfo("Asia/Shanghai"))
    assert start == datetime(2026, 10, 18, 16, 0, tzinfo=timezone.utc)
    assert end == datetime(2026, 10, 19, 16, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("url,expected", [
    ("sqlite:///:memory:", SQLiteFeedbackStore),
    ("sqlite:////var/lib/feedback.db", SQLiteFeedbackStore),
    ("postgresql+psycopg://u:p@db/feedback", PostgresFeedbackStore),
    ("mysql+pymysql://root@mysql/sjrywj", MySQLFeedbackStore),
    ("mariadb+pymysql://root@mysql/sjrywj", MySQLFeedbackStore),
])
def test_store_class_for(url, expected):
    assert store_class_for(url) is expected


def test_unknown_backend_rejected():
    with pytest.raises(RuntimeError):
        store_class_for("oracle://scott:tiger@db/orcl")


def test_engine_options_are_bounded():
    opts = PostgresFeedbackStore.engine_options("postgresql://db/x", pool_size=10, pool_timeout=5)
    assert opts["pool_size"] == 10
    assert opts["max_overflow"] == 0
    assert opts["pool_timeout"] == 5
    assert MySQLFeedbackStore.engine_options("mysql://db/x")["pool_recycle"] == 3600
    assert SQLiteFeedbackStore.engine_options("sqlite:///:memory:") == {}


def test_exhausted_pool_fails_with_persistence_error(tmp_path):
    app = build_app(
        SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path}/pool.db",
        DB_POOL_SIZE=1,
        DB_POOL_TIMEOUT=0.2,
    )
    with app.app_context():
        store = app.extensions["feedback_desk"]["store"]
        held = db.engine.connect()
        try:
            with pytest.raises(PersistenceError):
                store.count_all()
        finally:
            held.close()
        # connection returned: requests proceed again
        assert store.count_all() == 0
        db.session.remove()
        db.engine.dispose()


def test_waiting_request_proceeds_when_connection_returned(tmp_path):
    app = build_app(
        SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path}/queue.db",
        DB_POOL_SIZE=1,
        DB_POOL_TIMEOUT=5,
    )
    with app.app_context():
        store = app.extensions["feedback_desk"]["store"]
        held = db.engine.connect()
        timer = threading.Timer(0.2, held.close)
        timer.start()
        try:
            assert store.count_all() == 0
        finally:
            timer.join()
        db.session.remove()
        db.engine.dispose()
