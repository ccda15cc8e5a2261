# supportdesk/admin/routes.py
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from supportdesk.admin import services as admin_service
from supportdesk.admin.schemas import AdminMessageIn, EscalateRequest, ResolveRequest
from supportdesk.core.database import get_db
from supportdesk.ticket import services as ticket_service
from supportdesk.ticket.schemas import ChatHistoryOut, MessageOut, TicketDetailOut, TicketOut

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/assigned-tickets", response_model=list[TicketDetailOut])
def assigned_tickets(
    admin_id: str | None = Query(default=None, description="Only tickets assigned to this admin"),
    db: Session = Depends(get_db),
):
    return admin_service.list_assigned_tickets(db, admin_id)


@router.get("/tickets/{ticket_id}/messages", response_model=ChatHistoryOut)
def poll_messages(
    ticket_id: str,
    since: datetime | None = Query(default=None),
    db: Session = Depends(get_db),
):
    messages = ticket_service.get_chat_history(db, ticket_id, since)
    return ChatHistoryOut(
        ticket_id=ticket_id,
        messages=[MessageOut.model_validate(m) for m in messages],
    )


@router.post("/tickets/{ticket_id}/message", response_model=MessageOut, status_code=201)
def send_message(ticket_id: str, payload: AdminMessageIn, db: Session = Depends(get_db)):
    return admin_service.send_admin_message(db, ticket_id, payload.content, payload.admin_id)


@router.post("/tickets/{ticket_id}/escalate", response_model=TicketOut)
def escalate(ticket_id: str, payload: EscalateRequest | None = None, db: Session = Depends(get_db)):
    payload = payload or EscalateRequest()
    return admin_service.escalate_ticket(db, ticket_id, payload.admin_id, payload.merchant_id)


@router.patch("/tickets/{ticket_id}/resolve", response_model=TicketOut)
def resolve(ticket_id: str, payload: ResolveRequest | None = None, db: Session = Depends(get_db)):
    payload = payload or ResolveRequest()
    return admin_service.resolve_ticket(db, ticket_id, payload.admin_id)
