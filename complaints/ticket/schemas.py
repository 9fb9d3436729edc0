# complaints/ticket/schemas.py
from datetime import datetime

from pydantic import BaseModel, Field

from complaints.attachment.schemas import AttachmentOut
from complaints.category.schemas import CategoryBrief
from complaints.ticket.models import TicketPriority, TicketStatus
from complaints.user.models import Role


class TicketBase(BaseModel):
    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=10)
    location: str | None = Field(default=None, max_length=200)
    priority: TicketPriority = TicketPriority.MEDIUM


class TicketCreate(TicketBase):
    category_id: int


class TicketUpdate(BaseModel):
    title: str | None = Field(None, min_length=5, max_length=200)
    description: str | None = Field(None, min_length=10)
    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    # explicit null unassigns; omitted leaves assignment unchanged
    assigned_to_id: int | None = None


class RemarkCreate(BaseModel):
    content: str = Field(..., min_length=1)
    is_internal: bool = False


class PersonBrief(BaseModel):
    id: int
    name: str
    role: Role

    model_config = {"from_attributes": True}


class RemarkOut(BaseModel):
    id: int
    ticket_id: int
    content: str
    is_internal: bool
    created_at: datetime
    author: PersonBrief

    model_config = {"from_attributes": True}


class TicketOut(BaseModel):
    id: int
    ticket_id: str
    title: str
    description: str
    location: str | None = None
    status: TicketStatus
    priority: TicketPriority
    category_id: int
    author_id: int
    assigned_to_id: int | None = None
    created_at: datetime
    updated_at: datetime
    resolved_at: datetime | None = None

    author: PersonBrief
    assigned_to: PersonBrief | None = None
    category: CategoryBrief
    remark_count: int = 0
    attachment_count: int = 0

    model_config = {"from_attributes": True}


class TicketDetail(TicketOut):
    remarks: list[RemarkOut] = []
    attachments: list[AttachmentOut] = []
