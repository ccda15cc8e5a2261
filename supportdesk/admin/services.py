# supportdesk/admin/services.py
import logging

from sqlalchemy.orm import Session

from supportdesk.ticket import lifecycle
from supportdesk.ticket import services as ticket_service
from supportdesk.ticket.models import Message, MessageSender, Ticket

logger = logging.getLogger(__name__)


def list_assigned_tickets(db: Session, admin_id: str | None = None) -> list[Ticket]:
    query = db.query(Ticket).filter(Ticket.escalated.is_(True))
    if admin_id:
        query = query.filter(Ticket.assigned_admin_id == admin_id)
    return query.order_by(Ticket.updated_at.desc()).all()


def escalate_ticket(
    db: Session, ticket_id: str, admin_id: str | None = None, merchant_id: str | None = None
) -> Ticket:
    db_ticket = ticket_service.get_ticket(db, ticket_id, merchant_id)
    lifecycle.escalate(db_ticket, admin_id)
    db.commit()
    db.refresh(db_ticket)
    logger.info("Ticket %s escalated, assigned to %s", ticket_id, admin_id or "nobody")
    return db_ticket


def resolve_ticket(db: Session, ticket_id: str, admin_id: str | None = None) -> Ticket:
    db_ticket = ticket_service.get_ticket(db, ticket_id)
    lifecycle.resolve(db_ticket)
    db.commit()
    db.refresh(db_ticket)
    logger.info("Ticket %s resolved by %s", ticket_id, admin_id or "unknown admin")
    return db_ticket


def send_admin_message(db: Session, ticket_id: str, content: str, admin_id: str | None = None) -> Message:
    """Post a human reply. The agent webhook is never involved on this path."""
    db_ticket = ticket_service.get_ticket(db, ticket_id)
    lifecycle.take_over(db_ticket, admin_id)
    # the status change is committed together with the message
    db_message = ticket_service.append_message(db, db_ticket, MessageSender.ADMIN, content)
    logger.info("Admin %s replied on ticket %s", admin_id or "unknown", ticket_id)
    return db_message
