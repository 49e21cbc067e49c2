"""
Shared fixtures for the Fenix test suite.

NOTE: pytest is listed under extras_require["dev"] in setup.py.
Install with: pip install -e ".[dev]"
"""

import os
import shutil
import tempfile

import pytest
from flask import Flask

from fenix import Fenix
from fenix.core.config import Config


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="fenix-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_config(tmp_db_dir, monkeypatch):
    """Code running outside an app context falls back to Config; keep that
    fallback inside the temp directory too."""
    monkeypatch.setattr(Config, "USER_DB", os.path.join(tmp_db_dir, "users.db"))
    monkeypatch.setattr(Config, "ANALYTICS_DB", os.path.join(tmp_db_dir, "analytics.db"))
    monkeypatch.setattr(Config, "EMAIL_ADMIN_EMAIL", None)


def make_app(db_dir, **overrides):
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = db_dir
    app.config["USER_DB"] = os.path.join(db_dir, "users.db")
    app.config["ANALYTICS_DB"] = os.path.join(db_dir, "analytics.db")
    app.config["RESEND_API_KEY"] = None
    app.config["EMAIL_WEBSITE_URL"] = "https://shop.example.com"
    app.config["CAMPAIGN_BATCH_DELAY"] = 0
    app.config.update(overrides)
    Fenix(app)
    return app


@pytest.fixture
def app(tmp_db_dir):
    """Fully initialised Flask app with all Fenix modules registered."""
    return make_app(tmp_db_dir)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    """Test client with an admin session"""
    client = app.test_client()
    with client.session_transaction() as session:
        session["admin_id"] = 1
    return client


class FakeTransport:
    """Email transport double: records every send, fails for chosen recipients"""

    def __init__(self, fail_for=(), raise_for=()):
        self.fail_for = set(fail_for)
        self.raise_for = set(raise_for)
        self.sent = []

    def send(self, to, subject, html, text=None):
        if to in self.raise_for:
            raise ConnectionError(f"connection reset sending to {to}")
        if to in self.fail_for:
            return {"success": False, "error": "Mailbox unavailable", "id": None}
        self.sent.append({"to": to, "subject": subject, "html": html})
        return {"success": True, "error": None, "id": f"msg-{len(self.sent)}"}


@pytest.fixture
def transport():
    return FakeTransport()
