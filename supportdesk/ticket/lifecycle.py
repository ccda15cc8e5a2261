# supportdesk/ticket/lifecycle.py
"""Escalation state machine.

A ticket starts AI-handled. Escalation hands it to a human admin, who can
then resolve it. ``status`` and ``priority`` remain freely settable through
the plain setters; only escalate and resolve are guarded here.
"""
import enum

from supportdesk.core.errors import ConflictError, InvalidStateError
from supportdesk.ticket.models import Ticket, TicketStatus, utcnow


class EscalationState(str, enum.Enum):
    AI_HANDLED = "ai_handled"
    ESCALATED_OPEN = "escalated_open"
    RESOLVED = "resolved"
    CLOSED = "closed"


def state_of(ticket: Ticket) -> EscalationState:
    match TicketStatus(ticket.status):
        case TicketStatus.CLOSED:
            return EscalationState.CLOSED
        case TicketStatus.RESOLVED:
            return EscalationState.RESOLVED
        case TicketStatus.OPEN | TicketStatus.IN_PROGRESS:
            if ticket.escalated:
                return EscalationState.ESCALATED_OPEN
            return EscalationState.AI_HANDLED


def escalate(ticket: Ticket, admin_id: str | None = None) -> Ticket:
    match state_of(ticket):
        case EscalationState.AI_HANDLED:
            ticket.escalated = True
            ticket.escalated_at = utcnow()
            ticket.assigned_admin_id = admin_id
            return ticket
        case EscalationState.ESCALATED_OPEN:
            raise ConflictError("Ticket is already escalated")
        case EscalationState.RESOLVED | EscalationState.CLOSED:
            raise ConflictError(f"Cannot escalate a {TicketStatus(ticket.status).value} ticket")


def resolve(ticket: Ticket) -> Ticket:
    match state_of(ticket):
        case EscalationState.ESCALATED_OPEN:
            ticket.status = TicketStatus.RESOLVED
            return ticket
        case EscalationState.AI_HANDLED:
            raise InvalidStateError("Only escalated tickets can be resolved")
        case EscalationState.RESOLVED | EscalationState.CLOSED:
            raise InvalidStateError(f"Ticket is already {TicketStatus(ticket.status).value}")


def take_over(ticket: Ticket, admin_id: str | None = None) -> Ticket:
    """Prepare an escalated ticket for a human reply.

    A resolved ticket is reopened, an unassigned one goes to ``admin_id``.
    """
    match state_of(ticket):
        case EscalationState.ESCALATED_OPEN | EscalationState.RESOLVED:
            ticket.status = TicketStatus.IN_PROGRESS
            if ticket.assigned_admin_id is None:
                ticket.assigned_admin_id = admin_id
            return ticket
        case EscalationState.AI_HANDLED:
            raise InvalidStateError("Ticket has not been escalated to a human")
        case EscalationState.CLOSED:
            raise InvalidStateError("Ticket is closed")
