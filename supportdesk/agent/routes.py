# supportdesk/agent/routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from supportdesk.agent import services as agent_service
from supportdesk.agent.schemas import AgentRequest, AgentResponse
from supportdesk.agent.webhook import WebhookClient, get_webhook_client
from supportdesk.core.database import get_db

router = APIRouter(prefix="/agent", tags=["Agent"])


@router.post("", response_model=AgentResponse)
def send_message(
    payload: AgentRequest,
    db: Session = Depends(get_db),
    webhook: WebhookClient = Depends(get_webhook_client),
):
    # webhook failures come back as success=False with a 200
    return agent_service.send_agent_message(db, webhook, payload)
