"""Campaign dispatch workflow against in-memory collaborators.

The campaign row must end every dispatch in Draft or Sent, never Sending.
"""

import asyncio

import pytest

from fenix.modules.campaigns.dispatch import send_campaign, preview_campaign
from conftest import FakeTransport

HTML = '<p>Hello {{name}}</p><a href="{{unsubscribe_url}}">Unsubscribe</a>'


class FakeStore:
    def __init__(self, subscribers=25, template=True, campaign_status="Draft", fail_on_status=None):
        self.campaign = {"id": 1, "name": "Spring", "template_id": 7, "subject": "Spring deals",
                         "status": campaign_status, "sent_count": 0, "sent_at": None}
        self.template = {"id": 7, "name": "Spring", "subject": "", "content": [],
                         "html_content": HTML} if template else None
        self.subscribers = [{"email": f"buyer{i}@example.com", "name": f"Buyer {i}"}
                            for i in range(1, subscribers + 1)]
        self.fail_on_status = fail_on_status
        self.status_writes = []

    def get_campaign(self, campaign_id):
        return dict(self.campaign) if campaign_id == 1 else None

    def get_template(self, template_id):
        return self.template if template_id == 7 else None

    def list_active_subscribers(self):
        return list(self.subscribers)

    def update_campaign(self, campaign_id, fields):
        if fields.get("status") == self.fail_on_status:
            raise RuntimeError("database is locked")
        self.status_writes.append(fields.get("status"))
        self.campaign.update(fields)
        return True


def run(coro):
    return asyncio.run(coro)


def no_sleep_recorder():
    calls = []

    async def sleep(seconds):
        calls.append(seconds)

    return sleep, calls


def test_partial_failure_still_sent():
    store = FakeStore(subscribers=25)
    transport = FakeTransport(fail_for={"buyer7@example.com"})
    sleep, _ = no_sleep_recorder()

    result = run(send_campaign(1, store=store, transport=transport, batch_size=10,
                               batch_delay=0, base_url="https://fenixbrokers.com", sleep=sleep))

    assert result["success"] is True
    assert result["sent_count"] == 24
    assert result["total_subscribers"] == 25
    assert result["errors"] == [{"email": "buyer7@example.com", "error": "Mailbox unavailable"}]
    assert result["error"] is None
    assert store.campaign["status"] == "Sent"
    assert store.campaign["sent_count"] == 24
    assert store.campaign["sent_at"]
    assert store.status_writes == ["Sending", "Sent"]


def test_each_recipient_gets_personalized_copy():
    store = FakeStore(subscribers=2)
    transport = FakeTransport()
    sleep, _ = no_sleep_recorder()

    run(send_campaign(1, store=store, transport=transport, base_url="https://fenixbrokers.com", sleep=sleep))

    by_email = {m["to"]: m for m in transport.sent}
    assert "Hello Buyer 1" in by_email["buyer1@example.com"]["html"]
    assert "unsubscribe?email=buyer2%40example.com" in by_email["buyer2@example.com"]["html"]
    assert by_email["buyer1@example.com"]["subject"] == "Spring deals"


def test_transport_exception_is_isolated_to_recipient():
    store = FakeStore(subscribers=3)
    transport = FakeTransport(raise_for={"buyer2@example.com"})
    sleep, _ = no_sleep_recorder()

    result = run(send_campaign(1, store=store, transport=transport, sleep=sleep))

    assert result["success"] is True
    assert result["sent_count"] == 2
    assert result["errors"][0]["email"] == "buyer2@example.com"
    assert "connection reset" in result["errors"][0]["error"]


def test_delay_only_between_batches():
    store = FakeStore(subscribers=25)
    sleep, calls = no_sleep_recorder()

    run(send_campaign(1, store=store, transport=FakeTransport(), batch_size=10,
                      batch_delay=1.5, sleep=sleep))

    assert calls == [1.5, 1.5]


def test_single_batch_has_no_delay():
    store = FakeStore(subscribers=10)
    sleep, calls = no_sleep_recorder()

    run(send_campaign(1, store=store, transport=FakeTransport(), batch_size=10, batch_delay=1, sleep=sleep))

    assert calls == []


def test_no_active_subscribers_leaves_status_untouched():
    store = FakeStore(subscribers=0)
    transport = FakeTransport()

    result = run(send_campaign(1, store=store, transport=transport))

    assert result["success"] is False
    assert result["error"] == "No active subscribers found"
    assert store.status_writes == []
    assert store.campaign["status"] == "Draft"
    assert transport.sent == []


def test_missing_template_leaves_status_untouched():
    store = FakeStore(template=False)

    result = run(send_campaign(1, store=store, transport=FakeTransport()))

    assert result == {"success": False, "sent_count": 0, "total_subscribers": 0,
                      "errors": None, "error": "Template not found"}
    assert store.status_writes == []


def test_missing_campaign():
    store = FakeStore()
    result = run(send_campaign(99, store=store, transport=FakeTransport()))
    assert result["error"] == "Campaign not found"
    assert store.status_writes == []


def test_all_failures_revert_to_draft():
    store = FakeStore(subscribers=5)
    transport = FakeTransport(fail_for={s["email"] for s in store.subscribers})
    sleep, _ = no_sleep_recorder()

    result = run(send_campaign(1, store=store, transport=transport, batch_size=2, sleep=sleep))

    assert result["success"] is False
    assert result["sent_count"] == 0
    assert len(result["errors"]) == 5
    assert result["error"].startswith("Failed to send to all subscribers: ")
    assert result["error"].count("Mailbox unavailable") == 3
    assert store.campaign["status"] == "Draft"
    assert store.status_writes == ["Sending", "Draft"]


def test_exception_mid_dispatch_forces_draft():
    store = FakeStore(subscribers=12)
    sleep_calls = []

    async def exploding_sleep(seconds):
        sleep_calls.append(seconds)
        raise RuntimeError("event loop shutting down")

    result = run(send_campaign(1, store=store, transport=FakeTransport(), batch_size=10,
                               batch_delay=1, sleep=exploding_sleep))

    assert result["success"] is False
    assert result["error"] == "Failed to send campaign"
    assert result["sent_count"] == 10
    assert store.campaign["status"] == "Draft"
    assert store.status_writes == ["Sending", "Draft"]


def test_failed_final_write_forces_draft():
    store = FakeStore(subscribers=3, fail_on_status="Sent")
    sleep, _ = no_sleep_recorder()

    result = run(send_campaign(1, store=store, transport=FakeTransport(), sleep=sleep))

    assert result["error"] == "Failed to send campaign"
    assert store.campaign["status"] == "Draft"


def test_failed_sending_write_reverts_to_draft():
    store = FakeStore(subscribers=3, fail_on_status="Sending")

    result = run(send_campaign(1, store=store, transport=FakeTransport()))

    assert result["error"] == "Failed to send campaign"
    assert store.status_writes == ["Draft"]
    assert store.campaign["status"] == "Draft"


def test_async_transport_is_awaited():
    store = FakeStore(subscribers=3)
    delivered = []

    class AsyncTransport:
        async def send(self, to, subject, html):
            delivered.append(to)
            return {"success": True, "error": None}

    sleep, _ = no_sleep_recorder()
    result = run(send_campaign(1, store=store, transport=AsyncTransport(), sleep=sleep))

    assert result["sent_count"] == 3
    assert sorted(delivered) == ["buyer1@example.com", "buyer2@example.com", "buyer3@example.com"]


def test_template_without_html_is_compiled():
    store = FakeStore(subscribers=1)
    store.template = {"id": 7, "name": "Plain", "content": [{"type": "text", "content": "Hi {{name}}"}],
                      "html_content": None}
    transport = FakeTransport()
    sleep, _ = no_sleep_recorder()

    run(send_campaign(1, store=store, transport=transport, sleep=sleep))

    assert "Hi Buyer 1" in transport.sent[0]["html"]
    assert "<!DOCTYPE html>" in transport.sent[0]["html"]


@pytest.mark.parametrize("campaign_id,expected_error", [(1, None), (99, "Campaign not found")])
def test_preview_campaign(campaign_id, expected_error):
    result = preview_campaign(campaign_id, store=FakeStore())
    assert result["error"] == expected_error
    if expected_error is None:
        assert "Hello John Doe" in result["html"]
        assert 'href="#"' in result["html"]
