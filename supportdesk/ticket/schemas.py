# supportdesk/ticket/schemas.py
from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, Field, StringConstraints

from supportdesk.ticket.models import MessageSender, TicketPriority, TicketStatus

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class MessageOut(BaseModel):
    id: int
    sender: MessageSender
    content: str
    cards: list[Any] = []
    tools_used: list[Any] = []
    actions_taken: list[Any] = []
    reasoning: Any = None
    confidence_score: float | None = None
    complexity_score: float | None = None
    is_human: bool = False
    created_at: datetime

    model_config = {"from_attributes": True}


class TicketOut(BaseModel):
    id: str
    ticket_ref: str
    merchant_id: str
    title: str
    status: TicketStatus
    priority: TicketPriority
    assigned_admin_id: str | None = None
    escalated: bool
    escalated_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TicketDetailOut(TicketOut):
    chat_history: list[MessageOut] = Field(default=[], validation_alias="messages")


class StatusUpdate(BaseModel):
    status: TicketStatus


class PriorityUpdate(BaseModel):
    priority: TicketPriority


class ChatHistoryOut(BaseModel):
    ticket_id: str
    messages: list[MessageOut]
