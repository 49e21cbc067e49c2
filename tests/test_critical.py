"""
Critical Integration Tests for the Fenix Framework
=================================================

Focused tests covering the integration points most likely to break.
Run with: pytest tests/test_critical.py -v
"""

import os
import shutil
import sqlite3
import tempfile

from flask import Flask

from fenix import Fenix
from conftest import make_app


# ---------------------------------------------------------------------------
# 1. Framework initialisation -- Fenix(app) does not raise
# ---------------------------------------------------------------------------

def test_framework_initialisation(tmp_db_dir):
    """Fenix(app) boots without errors and stores itself on the app."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["USER_DB"] = os.path.join(tmp_db_dir, "users.db")
    app.config["ANALYTICS_DB"] = os.path.join(tmp_db_dir, "analytics.db")

    fenix = Fenix(app)

    assert "fenix" in app.extensions
    assert app.extensions["fenix"] is fenix


# ---------------------------------------------------------------------------
# 2. Config resolution -- defaults fill unset keys, host values win
# ---------------------------------------------------------------------------

def test_config_defaults_and_overrides(app):
    assert "users.db" in app.config["USER_DB"]
    assert "analytics.db" in app.config["ANALYTICS_DB"]
    assert app.config["EMAIL_WEBSITE_URL"] == "https://shop.example.com"
    assert app.config["CAMPAIGN_BATCH_SIZE"] == 10
    assert app.config["EMAIL_BRAND_NAME"]


def test_config_dict_argument(tmp_db_dir):
    """The config argument is applied before defaults are filled in."""
    app = Flask(__name__)
    Fenix(app, {
        "USER_DB": os.path.join(tmp_db_dir, "custom.db"),
        "ANALYTICS_DB": os.path.join(tmp_db_dir, "analytics.db"),
        "CAMPAIGN_BATCH_SIZE": 25,
    })
    assert app.config["USER_DB"].endswith("custom.db")
    assert app.config["CAMPAIGN_BATCH_SIZE"] == 25


# ---------------------------------------------------------------------------
# 3. Email service init -- Resend and SMTP
# ---------------------------------------------------------------------------

def test_email_service_init_resend(app):
    """EmailService.init_app() with Resend provider stores config correctly."""
    from fenix.modules.email.email_service import EmailService

    svc = EmailService()
    app.config["RESEND_API_KEY"] = "re_test_fake_key_123"
    app.config["EMAIL_PROVIDER"] = "resend"
    app.config["EMAIL_BRAND_NAME"] = "TestBrand"

    with app.app_context():
        svc.init_app(app)

    assert svc.provider == "resend"
    assert svc.brand_name == "TestBrand"
    assert svc.api_key == "re_test_fake_key_123"
    assert svc.is_configured


def test_email_service_init_smtp_without_password(app):
    """SMTP without a password initialises but reports not configured."""
    from fenix.modules.email.email_service import EmailService

    svc = EmailService()
    app.config["EMAIL_PROVIDER"] = "smtp"
    app.config["EMAIL_PASSWORD"] = None

    with app.app_context():
        svc.init_app(app)

    assert svc.provider == "smtp"
    assert not svc.is_configured


def test_unconfigured_email_service_returns_error(app):
    """send() reports a missing provider instead of raising."""
    from fenix.modules.email.email_service import EmailService

    svc = EmailService()
    app.config["EMAIL_PROVIDER"] = "resend"
    app.config["RESEND_API_KEY"] = None

    with app.app_context():
        svc.init_app(app)
        result = svc.send("buyer@example.com", "Hello", "<p>Hi</p>")

    assert result["success"] is False
    assert "not configured" in result["error"]


# ---------------------------------------------------------------------------
# 4. Blueprint registration -- all modules are registered
# ---------------------------------------------------------------------------

EXPECTED_MODULES = ["templates", "campaigns", "subscribers", "inquiries"]


def test_all_blueprints_registered(app):
    registered = app.extensions["fenix"].get_registered_modules()

    for mod in EXPECTED_MODULES:
        assert mod in registered, (
            f"Module '{mod}' was not registered. Registered: {registered}"
        )
    assert len(registered) == len(EXPECTED_MODULES)


def test_public_routes_exist(app):
    rules = {rule.rule: rule.methods for rule in app.url_map.iter_rules()}
    assert "POST" in rules["/api/subscribers"]
    assert "POST" in rules["/api/inquiries"]
    assert "GET" in rules["/unsubscribe"]
    assert "POST" in rules["/admin/campaigns/<int:campaign_id>/send"]


# ---------------------------------------------------------------------------
# 5. Template context -- brand_name is injected
# ---------------------------------------------------------------------------

def test_template_context_injection(app):
    with app.test_request_context("/"):
        ctx = {}
        for func in app.template_context_processors[None]:
            ctx.update(func())

    assert "brand_name" in ctx, "brand_name missing from template context"
    assert isinstance(ctx["brand_name"], str)
    assert len(ctx["brand_name"]) > 0


# ---------------------------------------------------------------------------
# 6. Database creation -- directory and tables exist after init
# ---------------------------------------------------------------------------

def test_database_dir_and_tables_created():
    d = tempfile.mkdtemp(prefix="fenix-dbtest-")
    target = os.path.join(d, "sub", "databases")

    try:
        app = make_app(target)

        assert os.path.isdir(target), f"DB_DIR was not created at {target}"
        with sqlite3.connect(app.config["USER_DB"]) as conn:
            tables = {row[0] for row in conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            )}
        assert {"email_templates", "campaigns", "subscribers", "inquiries"} <= tables
    finally:
        shutil.rmtree(d, ignore_errors=True)


# ---------------------------------------------------------------------------
# 7. Admin auth guard -- unauthenticated admin requests get 401
# ---------------------------------------------------------------------------

def test_admin_routes_require_session(client):
    for path in ("/admin/templates/", "/admin/campaigns/", "/admin/subscribers",
                 "/admin/inquiries"):
        response = client.get(path)
        assert response.status_code == 401, f"{path} returned {response.status_code}"
        assert response.get_json()["error"] == "Authentication required"


def test_async_send_route_requires_session(client):
    response = client.post("/admin/campaigns/1/send")
    assert response.status_code == 401


# ---------------------------------------------------------------------------
# 8. CORS -- public storefront endpoints answer cross-origin requests
# ---------------------------------------------------------------------------

def test_public_subscribe_sends_cors_headers(client):
    response = client.post(
        "/api/subscribers",
        json={"email": "buyer@example.com"},
        headers={"Origin": "https://fenixbrokers.com"},
    )
    assert response.status_code == 201
    assert response.headers.get("Access-Control-Allow-Origin") == "https://fenixbrokers.com"


# ---------------------------------------------------------------------------
# 9. Persistent logging -- db_log writes to app_logs
# ---------------------------------------------------------------------------

def test_db_log_writes_app_logs(app):
    from fenix.core import LoggingService, db_log

    with app.app_context():
        db_log("error", "campaigns", "Something failed", {"campaign_id": 3})
        logs = LoggingService.get_logs(source="campaigns")

    assert logs
    assert logs[0]["level"] == "ERROR"
    assert logs[0]["message"] == "Something failed"
    assert '"campaign_id": 3' in logs[0]["details"]
