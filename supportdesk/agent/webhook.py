# supportdesk/agent/webhook.py
"""HTTP client for the external AI agent webhook.

The webhook receives ``{"_id", "merchant_id", "message": {"content"}}`` and
answers with ``{"ticket_id", "agent_message", "cards"}``, possibly wrapped
in an ``output`` object. Any transport fault, timeout or non-2xx answer is
raised as ``UpstreamError``; there are no retries.
"""
import json
import logging
from typing import Any

import httpx
import pydantic
from fastapi import Request
from pydantic import BaseModel

from supportdesk.core.errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "Your request has been received."
PROCESSING_MESSAGE = "Your request is being processed. Please wait a moment."
MAX_PLAIN_TEXT_REPLY = 2000


class AgentReply(BaseModel):
    ticket_id: str | None = None
    agent_message: str
    cards: list[Any] = []
    tools_used: list[Any] = []
    actions_taken: list[Any] = []
    reasoning: str | dict | list | None = None
    confidence_score: float | None = None
    complexity_score: float | None = None


def _first(data: dict, *keys, kind=str, default=None):
    """First truthy value under ``keys`` that is an instance of ``kind``."""
    for key in keys:
        value = data.get(key)
        if value and isinstance(value, kind) and not isinstance(value, bool):
            return value
    return default


def _message_text(reply: dict) -> str:
    text = _first(reply, "agent_message", "agentMessage", "message", "response")
    if text and text.strip():
        return text
    # some flows answer with the same {"content": ...} shape they were sent
    nested = _first(reply, "agent_message", "agentMessage", "message", "response", kind=dict)
    if nested:
        content = _first(nested, "content", "text")
        if content and content.strip():
            return content
    return DEFAULT_MESSAGE


def parse_reply(body: str) -> AgentReply:
    if not body or not body.strip():
        logger.warning("Agent webhook returned an empty body")
        return AgentReply(agent_message=PROCESSING_MESSAGE)

    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        logger.warning("Agent webhook reply is not JSON (%d chars)", len(body))
        if len(body) < MAX_PLAIN_TEXT_REPLY:
            return AgentReply(agent_message=body)
        return AgentReply(agent_message=DEFAULT_MESSAGE)

    # n8n answers with a one element list when "respond with all items" is on
    if isinstance(data, list):
        data = data[0] if data else {}
    if not isinstance(data, dict):
        logger.warning("Agent webhook reply is a bare %s", type(data).__name__)
        if isinstance(data, str) and data.strip():
            return AgentReply(agent_message=data)
        return AgentReply(agent_message=DEFAULT_MESSAGE)

    output = data.get("output")
    reply = output if isinstance(output, dict) else data

    ticket_id = _first(reply, "ticket_id", "_id", kind=(str, int)) or _first(
        data, "ticket_id", "_id", kind=(str, int)
    )
    return AgentReply(
        ticket_id=str(ticket_id) if ticket_id is not None else None,
        agent_message=_message_text(reply),
        cards=_first(reply, "cards", kind=list, default=[]),
        tools_used=_first(reply, "tools_used", "toolsUsed", kind=list, default=[]),
        actions_taken=_first(reply, "actions_taken", "actionsTaken", kind=list, default=[]),
        reasoning=_first(reply, "reasoning", kind=(str, dict, list)),
        confidence_score=_first(reply, "confidence_score", "confidenceScore", kind=(int, float)),
        complexity_score=_first(reply, "complexity_score", "complexityScore", kind=(int, float)),
    )


class WebhookClient:
    def __init__(self, url: str, timeout: float, transport: httpx.BaseTransport | None = None):
        self.url = url
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def send(self, ticket_id: str, merchant_id: str, content: str) -> AgentReply:
        payload = {"_id": ticket_id, "merchant_id": merchant_id, "message": {"content": content}}
        try:
            response = self._client.post(self.url, json=payload)
        except httpx.TimeoutException as exc:
            logger.warning("Agent webhook timed out for ticket %s", ticket_id)
            raise UpstreamError("Agent webhook timed out") from exc
        except httpx.HTTPError as exc:
            logger.error("Agent webhook network error for ticket %s: %s", ticket_id, exc)
            raise UpstreamError("Agent webhook unreachable") from exc

        logger.info("Agent webhook status %s for ticket %s", response.status_code, ticket_id)
        if not response.is_success:
            raise UpstreamError(f"Agent webhook returned {response.status_code}")

        try:
            reply = parse_reply(response.text)
        except pydantic.ValidationError as exc:
            logger.error("Agent webhook reply for ticket %s is unusable: %s", ticket_id, exc)
            raise UpstreamError("Agent webhook reply is malformed") from exc
        if reply.ticket_id and reply.ticket_id != ticket_id:
            logger.warning("Agent webhook answered for ticket %s, expected %s", reply.ticket_id, ticket_id)
        return reply

    def close(self) -> None:
        self._client.close()


def get_webhook_client(request: Request) -> WebhookClient:
    return request.app.state.webhook
