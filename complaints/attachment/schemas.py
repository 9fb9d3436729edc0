# complaints/attachment/schemas.py
from datetime import datetime

from pydantic import BaseModel


class AttachmentOut(BaseModel):
    id: int
    ticket_id: int
    filename: str
    mimetype: str
    size: int
    uploaded_by_id: int
    created_at: datetime

    model_config = {"from_attributes": True}
