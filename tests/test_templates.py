"""Template persistence and admin routes: compiled HTML stays in sync with blocks."""

import sqlite3

from fenix.modules.templates import blocks as b
from fenix.modules.templates.models import (
    create_template, get_template, update_template, delete_template, get_all_templates
)
from fenix.modules.templates.presets import get_presets, get_preset_by_id, get_presets_by_category


def test_create_compiles_html(app):
    with app.app_context():
        template = create_template({"name": "Launch", "subject": "New line",
                                    "content": [b.heading("Autumn launch")]})

    assert template["id"]
    assert template["content"][0]["content"] == "Autumn launch"
    assert "Autumn launch" in template["html_content"]
    assert "<title>Launch</title>" in template["html_content"]


def test_update_content_recompiles(app):
    with app.app_context():
        template = create_template({"name": "Launch", "content": [b.text("old copy")]})
        updated = update_template(template["id"], {"content": [b.text("new copy")]})

    assert "new copy" in updated["html_content"]
    assert "old copy" not in updated["html_content"]


def test_rename_recompiles_title(app):
    with app.app_context():
        template = create_template({"name": "Draft name", "content": []})
        updated = update_template(template["id"], {"name": "Final name"})

    assert updated["name"] == "Final name"
    assert "<title>Final name</title>" in updated["html_content"]


def test_update_missing_template(app):
    with app.app_context():
        assert update_template(999, {"name": "x"}) is None
        assert get_template(None) is None


def test_delete_template_detaches_campaigns(app):
    from fenix.modules.campaigns.models import create_campaign, get_campaign

    with app.app_context():
        template = create_template({"name": "T", "content": []})
        campaign = create_campaign({"name": "C", "template_id": template["id"], "subject": "S"})
        assert delete_template(template["id"]) is True
        assert get_template(template["id"]) is None
        assert get_campaign(campaign["id"])["template_id"] is None


def test_get_all_templates_newest_first(app):
    with app.app_context():
        first = create_template({"name": "First", "content": []})
        second = create_template({"name": "Second", "content": []})
        ids = [t["id"] for t in get_all_templates()]

    assert ids.index(second["id"]) < ids.index(first["id"])


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

def test_presets_are_fresh_copies():
    first = get_preset_by_id("welcome-email")
    first["blocks"][0]["content"] = "mutated"
    assert get_preset_by_id("welcome-email")["blocks"][0]["content"] != "mutated"


def test_presets_catalog():
    ids = [p["id"] for p in get_presets()]
    assert {"product-announcement", "monthly-newsletter", "sale-event", "welcome-email",
            "product-showcase", "blank"} <= set(ids)
    assert get_preset_by_id("nope") is None
    assert all(p["category"] == "promotional" for p in get_presets_by_category("promotional"))


def test_showcase_preset_has_valid_nesting():
    preset = get_preset_by_id("product-showcase")
    assert b.find_nesting_errors(preset["blocks"]) == []
    assert {blk["type"] for blk in preset["blocks"]} >= {"logo", "section", "columns", "footer"}


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

def test_create_and_fetch_via_routes(admin_client):
    response = admin_client.post("/admin/templates/", json={
        "name": "Route template", "subject": "Hi", "content": [b.text("Body copy")],
        "html_content": "<p>ignored</p>",
    })
    assert response.status_code == 201
    template = response.get_json()["template"]
    assert "Body copy" in template["html_content"]
    assert response.get_json()["warnings"] == []

    response = admin_client.get(f"/admin/templates/{template['id']}")
    assert response.status_code == 200
    assert response.get_json()["template"]["name"] == "Route template"


def test_create_requires_name(admin_client):
    response = admin_client.post("/admin/templates/", json={"content": []})
    assert response.status_code == 400


def test_update_ignores_client_html(admin_client):
    template = admin_client.post("/admin/templates/", json={"name": "T", "content": []}).get_json()["template"]

    response = admin_client.put(f"/admin/templates/{template['id']}", json={
        "content": [b.text("Fresh")], "html_content": "<p>forged</p>",
    })
    assert response.status_code == 200
    html = response.get_json()["template"]["html_content"]
    assert "Fresh" in html
    assert "forged" not in html


def test_update_and_delete_missing(admin_client):
    assert admin_client.put("/admin/templates/999", json={"name": "x"}).status_code == 404
    assert admin_client.get("/admin/templates/999").status_code == 404


def test_preview_route(admin_client):
    response = admin_client.post("/admin/templates/preview", json={
        "name": "Preview", "blocks": [b.heading("Hi {{name}}")],
    })
    assert response.status_code == 200
    assert "Hi John Doe" in response.get_json()["html"]


def test_preview_failure_returns_error_without_saving(admin_client, app, monkeypatch):
    import fenix.modules.campaigns.dispatch as dispatch

    def broken(*args, **kwargs):
        raise RuntimeError("renderer exploded")

    monkeypatch.setattr(dispatch, "preview_blocks", broken)
    response = admin_client.post("/admin/templates/preview", json={"blocks": []})

    assert response.status_code == 500
    assert response.get_json() == {"error": "Preview failed"}
    with sqlite3.connect(app.config["USER_DB"]) as conn:
        assert conn.execute("SELECT COUNT(*) FROM email_templates").fetchone()[0] == 0


def test_presets_and_from_preset_routes(admin_client):
    response = admin_client.get("/admin/templates/presets?category=welcome")
    assert response.status_code == 200
    assert [p["id"] for p in response.get_json()["presets"]] == ["welcome-email"]

    response = admin_client.post("/admin/templates/from-preset/sale-event", json={"name": "Black Friday"})
    assert response.status_code == 201
    template = response.get_json()["template"]
    assert template["name"] == "Black Friday"
    assert "FLASH SALE" in template["html_content"]

    assert admin_client.post("/admin/templates/from-preset/missing").status_code == 404


def test_delete_route(admin_client):
    template = admin_client.post("/admin/templates/", json={"name": "T", "content": []}).get_json()["template"]
    assert admin_client.delete(f"/admin/templates/{template['id']}").status_code == 200
    assert admin_client.get("/admin/templates/").get_json()["templates"] == []
