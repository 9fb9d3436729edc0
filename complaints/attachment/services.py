# complaints/attachment/services.py
import logging
import os

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaints.access.policy import Action, authorize
from complaints.attachment.models import Attachment
from complaints.attachment.storage import remove_file, save_upload
from complaints.core.config import Settings, get_settings
from complaints.core.errors import NotFoundError, ValidationError
from complaints.core.security import Principal
from complaints.ticket.models import Ticket

logger = logging.getLogger(__name__)


def upload_attachment(
    db: Session,
    principal: Principal,
    ticket_pk: int,
    upload: UploadFile,
    settings: Settings | None = None,
) -> Attachment:
    settings = settings or get_settings()
    ticket = db.get(Ticket, ticket_pk)
    if ticket is None:
        raise NotFoundError("Ticket not found")
    authorize(principal, Action.UPLOAD_ATTACHMENT, ticket)

    mimetype = upload.content_type or "application/octet-stream"
    if mimetype not in settings.ALLOWED_UPLOAD_TYPES:
        raise ValidationError(f"File type {mimetype} is not allowed", field="file")

    path, size = save_upload(upload, settings.UPLOAD_DIR, settings.MAX_UPLOAD_BYTES)
    attachment = Attachment(
        ticket_id=ticket.id,
        filename=os.path.basename(upload.filename or "upload"),
        filepath=path,
        mimetype=mimetype,
        size=size,
        uploaded_by_id=principal.user_id,
    )
    db.add(attachment)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        remove_file(path)
        raise
    db.refresh(attachment)
    logger.info("Stored %s (%d bytes) on ticket %s", attachment.filename, size, ticket.ticket_id)
    return attachment


def get_attachment(db: Session, principal: Principal, attachment_id: int) -> Attachment:
    attachment = db.get(Attachment, attachment_id)
    if attachment is None:
        raise NotFoundError("Attachment not found")
    authorize(principal, Action.READ_ATTACHMENT, attachment.ticket)
    if not os.path.exists(attachment.filepath):
        logger.warning("Attachment %s missing on disk at %s", attachment.id, attachment.filepath)
        raise NotFoundError("Attachment file not found")
    return attachment
