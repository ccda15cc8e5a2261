# supportdesk/ticket/services.py
import logging
import secrets
import string
import time
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from supportdesk.core.errors import NotFoundError
from supportdesk.ticket.models import (
    Message,
    MessageSender,
    Ticket,
    TicketPriority,
    TicketStatus,
    utcnow,
)

logger = logging.getLogger(__name__)

TITLE_LENGTH = 60
_BASE36 = string.digits + string.ascii_uppercase


def _base36(number: int) -> str:
    digits = ""
    while number:
        number, rem = divmod(number, 36)
        digits = _BASE36[rem] + digits
    return digits or "0"


def generate_ticket_ref() -> str:
    stamp = _base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(4))
    return f"TKT-{stamp}-{suffix}"


def make_title(content: str) -> str:
    content = content.strip()
    if len(content) > TITLE_LENGTH:
        return content[:TITLE_LENGTH] + "..."
    return content


def list_tickets(db: Session, merchant_id: str) -> list[Ticket]:
    return (
        db.query(Ticket)
        .filter(Ticket.merchant_id == merchant_id)
        .order_by(Ticket.updated_at.desc())
        .all()
    )


def find_ticket(db: Session, ticket_id: str, merchant_id: str | None = None) -> Ticket | None:
    query = db.query(Ticket).filter(Ticket.id == ticket_id)
    if merchant_id is not None:
        query = query.filter(Ticket.merchant_id == merchant_id)
    return query.first()


def get_ticket(db: Session, ticket_id: str, merchant_id: str | None = None) -> Ticket:
    ticket = find_ticket(db, ticket_id, merchant_id)
    if not ticket:
        raise NotFoundError("Ticket not found")
    return ticket


def create_ticket(db: Session, merchant_id: str, opening_message: str) -> Ticket:
    db_ticket = Ticket(
        ticket_ref=generate_ticket_ref(),
        merchant_id=merchant_id,
        title=make_title(opening_message),
        status=TicketStatus.OPEN,
        priority=TicketPriority.MEDIUM,
    )
    db.add(db_ticket)
    db.commit()
    db.refresh(db_ticket)
    logger.info("Created ticket %s (%s) for merchant %s", db_ticket.id, db_ticket.ticket_ref, merchant_id)
    return db_ticket


def append_message(
    db: Session,
    ticket: Ticket,
    sender: MessageSender,
    content: str,
    cards: list | None = None,
    tools_used: list | None = None,
    **agent_details,
) -> Message:
    """Append to the ticket history.

    ``agent_details`` carries the optional AI reply metadata: actions_taken,
    reasoning, confidence_score and complexity_score.
    """
    db_message = Message(
        ticket_id=ticket.id,
        sender=sender,
        content=content,
        cards=cards or [],
        tools_used=tools_used or [],
        **agent_details,
    )
    db.add(db_message)
    ticket.updated_at = utcnow()
    db.commit()
    db.refresh(db_message)
    return db_message


def update_status(
    db: Session, ticket_id: str, status: TicketStatus, merchant_id: str | None = None
) -> Ticket:
    db_ticket = get_ticket(db, ticket_id, merchant_id)
    db_ticket.status = status
    db.commit()
    db.refresh(db_ticket)
    logger.info("Ticket %s status -> %s", ticket_id, status.value)
    return db_ticket


def update_priority(
    db: Session, ticket_id: str, priority: TicketPriority, merchant_id: str | None = None
) -> Ticket:
    db_ticket = get_ticket(db, ticket_id, merchant_id)
    db_ticket.priority = priority
    db.commit()
    db.refresh(db_ticket)
    logger.info("Ticket %s priority -> %s", ticket_id, priority.value)
    return db_ticket


def get_chat_history(db: Session, ticket_id: str, since: datetime | None = None) -> list[Message]:
    """Messages of a ticket in creation order, optionally only those after ``since``."""
    get_ticket(db, ticket_id)
    query = db.query(Message).filter(Message.ticket_id == ticket_id)
    if since is not None:
        if since.tzinfo is not None:
            since = since.astimezone(timezone.utc)
        query = query.filter(Message.created_at > since)
    return query.order_by(Message.created_at, Message.id).all()
