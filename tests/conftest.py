import os
# Ensure the app factory picks the Testing config & SQLite memory DB
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///:memory:")

import pytest
from feedback_desk import create_app
from feedback_desk.extensions import db

ADMIN_PASSWORD = "test-admin-secret"

BASE_OVERRIDES = dict(
    TESTING=True,
    SQLALCHEMY_DATABASE_URI="sqlite:///:memory:",
    ADMIN_PASSWORD=ADMIN_PASSWORD,
    SECRET_KEY="test-signing-key",
    SUBMIT_RATE_LIMIT="1000 per 10 minutes",
    RATELIMIT_ENABLED=False,
    RATELIMIT_EXEMPT_IPS=(),
    TRUSTED_PROXY_COUNT=0,
    STRICT_SUBMISSIONS=False,
    FEEDBACK_TYPES=("praise", "complaint", "suggestion"),
    INSTITUTION_TIMEZONE="Asia/Shanghai",
)


def build_app(**overrides):
    return create_app({**BASE_OVERRIDES, **overrides})


@pytest.fixture()
def make_app():
    """Factory for tests that need non-default config; each call gets a fresh in-memory DB."""
    apps = []

    def _make(**overrides):
        app = build_app(**overrides)
        apps.append(app)
        return app

    yield _make
    for app in apps:
        with app.app_context():
            db.session.remove()
            db.engine.dispose()


@pytest.fixture()
def app(make_app):
    return make_app()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store(app):
    with app.app_context():
        yield app.extensions["feedback_desk"]["store"]


@pytest.fixture()
def admin_headers(client):
    resp = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


def valid_submission(**changes):
    payload = {
        "type": "complaint",
        "department": "Radiology",
        "targetRole": "nurse",
        "targetName": "",
        "description": "slow response",
        "submitterName": "",
        "submitterPhone": "",
    }
    payload.update(changes)
    return payload
