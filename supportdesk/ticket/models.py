# supportdesk/ticket/models.py
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from supportdesk.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TicketStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class TicketPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class MessageSender(str, enum.Enum):
    USER = "user"
    AI = "ai"
    ADMIN = "admin"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    ticket_ref = Column(String(32), unique=True, index=True, nullable=False)
    merchant_id = Column(String, index=True, nullable=False)
    title = Column(String(80), nullable=False, default="Support Request")
    status = Column(
        Enum(TicketStatus, name="ticket_status", values_callable=_enum_values),
        default=TicketStatus.OPEN,
        nullable=False,
        index=True,
    )
    priority = Column(
        Enum(TicketPriority, name="ticket_priority", values_callable=_enum_values),
        default=TicketPriority.MEDIUM,
        nullable=False,
    )
    assigned_admin_id = Column(String, nullable=True, index=True)
    escalated = Column(Boolean, default=False, nullable=False)
    escalated_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    messages = relationship(
        "Message",
        back_populates="ticket",
        order_by=lambda: (Message.created_at, Message.id),
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Ticket id={self.id} merchant={self.merchant_id!r} status={self.status}>"


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticket_id = Column(String(32), ForeignKey("tickets.id"), index=True, nullable=False)
    sender = Column(
        Enum(MessageSender, name="message_sender", values_callable=_enum_values),
        nullable=False,
    )
    content = Column(Text, nullable=False)
    cards = Column(JSON, nullable=False, default=list)
    tools_used = Column(JSON, nullable=False, default=list)
    actions_taken = Column(JSON, nullable=False, default=list)
    reasoning = Column(JSON, nullable=True)
    confidence_score = Column(Float, nullable=True)
    complexity_score = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    ticket = relationship("Ticket", back_populates="messages")

    @property
    def is_human(self) -> bool:
        return self.sender == MessageSender.ADMIN
