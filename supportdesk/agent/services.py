# supportdesk/agent/services.py
import logging

from sqlalchemy.orm import Session

from supportdesk.agent.schemas import AgentRequest, AgentResponse
from supportdesk.agent.webhook import WebhookClient
from supportdesk.core.errors import UpstreamError
from supportdesk.ticket import services as ticket_service
from supportdesk.ticket.models import MessageSender, Ticket

logger = logging.getLogger(__name__)

APOLOGY_MESSAGE = "I'm having trouble connecting to the support system. Please try again."


def find_or_create_ticket(db: Session, ticket_id: str | None, merchant_id: str, content: str) -> Ticket:
    """Reuse the merchant's ticket when the id matches, otherwise open a new one."""
    if ticket_id:
        ticket = ticket_service.find_ticket(db, ticket_id, merchant_id)
        if ticket:
            return ticket
        logger.info("Ticket %s not found for merchant %s, opening a new one", ticket_id, merchant_id)
    return ticket_service.create_ticket(db, merchant_id, content)


def send_agent_message(db: Session, webhook: WebhookClient, payload: AgentRequest) -> AgentResponse:
    content = payload.message.content
    ticket = find_or_create_ticket(db, payload.ticket_id, payload.merchant_id, content)
    ticket_service.append_message(db, ticket, MessageSender.USER, content)

    if ticket.escalated:
        logger.info("Ticket %s is escalated, skipping agent webhook", ticket.id)
        return AgentResponse(success=True, ticket_id=ticket.id, agent_message=None, is_escalated=True)

    try:
        reply = webhook.send(ticket.id, payload.merchant_id, content)
    except UpstreamError as exc:
        logger.warning("Degraded reply for ticket %s: %s", ticket.id, exc.message)
        return AgentResponse(success=False, ticket_id=ticket.id, agent_message=APOLOGY_MESSAGE)

    details = reply.model_dump(include={"actions_taken", "reasoning", "confidence_score", "complexity_score"})
    ticket_service.append_message(
        db, ticket, MessageSender.AI, reply.agent_message, reply.cards, reply.tools_used, **details
    )
    return AgentResponse(
        success=True,
        ticket_id=ticket.id,
        agent_message=reply.agent_message,
        cards=reply.cards,
        tools_used=reply.tools_used,
        **details,
    )
