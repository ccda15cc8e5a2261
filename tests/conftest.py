# tests/conftest.py
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from supportdesk.agent.webhook import WebhookClient, get_webhook_client
from supportdesk.core.config import Settings
from supportdesk.main import create_app

WEBHOOK_URL = "http://agent.test/webhook/ticket"
AGENT_ANSWER = "Let me check that order for you."
AGENT_CARDS = [{"type": "action", "label": "Track order", "payload": {"order": "A-100"}}]


def echo_reply(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(
        200,
        json={"ticket_id": body["_id"], "agent_message": AGENT_ANSWER, "cards": AGENT_CARDS},
    )


class FakeWebhook:
    """Answers webhook calls in-process and records every payload."""

    def __init__(self):
        self.requests = []
        self.reply = echo_reply

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        return self.reply(request)

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def webhook():
    return FakeWebhook()


@pytest.fixture
def app(webhook):
    settings = Settings(_env_file=None, DATABASE_URL="sqlite://", WEBHOOK_TICKET_URL=WEBHOOK_URL)
    app = create_app(settings)
    webhook_client = WebhookClient(WEBHOOK_URL, 5.0, transport=httpx.MockTransport(webhook))
    app.dependency_overrides[get_webhook_client] = lambda: webhook_client
    yield app
    webhook_client.close()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def open_ticket(client):
    """Start a conversation through the agent endpoint and return the ticket id."""

    def _open(merchant_id: str = "m1", content: str = "help") -> str:
        r = client.post("/agent", json={"merchant_id": merchant_id, "message": {"content": content}})
        assert r.status_code == 200
        return r.json()["ticket_id"]

    return _open
