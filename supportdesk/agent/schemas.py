# supportdesk/agent/schemas.py
from typing import Any

from pydantic import AliasChoices, BaseModel, Field

from supportdesk.ticket.schemas import NonBlankStr


class AgentMessageIn(BaseModel):
    content: NonBlankStr


class AgentRequest(BaseModel):
    ticket_id: str | None = Field(default=None, validation_alias=AliasChoices("ticket_id", "_id"))
    merchant_id: NonBlankStr
    message: AgentMessageIn


class AgentResponse(BaseModel):
    success: bool
    ticket_id: str
    agent_message: str | None = None
    cards: list[Any] = []
    tools_used: list[Any] = []
    actions_taken: list[Any] = []
    reasoning: Any = None
    confidence_score: float | None = None
    complexity_score: float | None = None
    is_escalated: bool = False
