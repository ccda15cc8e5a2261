# supportdesk/ticket/routes.py
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from supportdesk.core.database import get_db
from supportdesk.ticket import services as ticket_service
from supportdesk.ticket.schemas import (
    ChatHistoryOut,
    MessageOut,
    PriorityUpdate,
    StatusUpdate,
    TicketDetailOut,
    TicketOut,
)

router = APIRouter(prefix="/tickets", tags=["Tickets"])
history_router = APIRouter(prefix="/chat-history", tags=["Chat history"])


@router.get("/", response_model=list[TicketOut])
def list_all(
    merchant_id: str = Query(..., min_length=1, description="Owning merchant"),
    db: Session = Depends(get_db),
):
    return ticket_service.list_tickets(db, merchant_id)


@router.get("/{ticket_id}", response_model=TicketDetailOut)
def get(
    ticket_id: str,
    merchant_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    return ticket_service.get_ticket(db, ticket_id, merchant_id)


@router.patch("/{ticket_id}/status", response_model=TicketOut)
def set_status(
    ticket_id: str,
    payload: StatusUpdate,
    merchant_id: str | None = Query(default=None, min_length=1),
    db: Session = Depends(get_db),
):
    return ticket_service.update_status(db, ticket_id, payload.status, merchant_id)


@router.patch("/{ticket_id}/priority", response_model=TicketOut)
def set_priority(
    ticket_id: str,
    payload: PriorityUpdate,
    merchant_id: str | None = Query(default=None, min_length=1),
    db: Session = Depends(get_db),
):
    return ticket_service.update_priority(db, ticket_id, payload.priority, merchant_id)


@history_router.get("/{ticket_id}", response_model=ChatHistoryOut)
def chat_history(
    ticket_id: str,
    since: datetime | None = Query(default=None, description="Only messages newer than this"),
    db: Session = Depends(get_db),
):
    messages = ticket_service.get_chat_history(db, ticket_id, since)
    return ChatHistoryOut(
        ticket_id=ticket_id,
        messages=[MessageOut.model_validate(m) for m in messages],
    )
