# supportdesk/admin/schemas.py
from pydantic import BaseModel

from supportdesk.ticket.schemas import NonBlankStr


class EscalateRequest(BaseModel):
    admin_id: str | None = None
    merchant_id: str | None = None


class ResolveRequest(BaseModel):
    admin_id: str | None = None


class AdminMessageIn(BaseModel):
    content: NonBlankStr
    admin_id: str | None = None
