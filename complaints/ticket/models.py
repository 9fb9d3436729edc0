# complaints/ticket/models.py
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from complaints.core.database import Base, utcnow


class TicketStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"


class TicketPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(String(32), unique=True, index=True, nullable=False)
    title = Column(String(200), index=True, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(200), nullable=True)
    status = Column(String(16), default=TicketStatus.OPEN.value, index=True, nullable=False)
    priority = Column(String(16), default=TicketPriority.MEDIUM.value, index=True, nullable=False)

    category_id = Column(Integer, ForeignKey("categories.id"), index=True, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    assigned_to_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)

    created_at = Column(DateTime, default=utcnow, index=True, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)
    resolved_at = Column(DateTime, nullable=True)

    category = relationship("Category", back_populates="tickets")
    author = relationship("User", back_populates="authored_tickets", foreign_keys=[author_id])
    assigned_to = relationship("User", back_populates="assigned_tickets", foreign_keys=[assigned_to_id])
    remarks = relationship(
        "Remark",
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="Remark.id",
    )
    attachments = relationship(
        "Attachment",
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="Attachment.id",
    )

    @property
    def remark_count(self) -> int:
        return len(self.remarks)

    @property
    def attachment_count(self) -> int:
        return len(self.attachments)


class Remark(Base):
    __tablename__ = "remarks"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), index=True, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    is_internal = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    ticket = relationship("Ticket", back_populates="remarks")
    author = relationship("User")
