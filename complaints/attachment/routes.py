# complaints/attachment/routes.py
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from complaints.attachment import services as attachment_service
from complaints.attachment.schemas import AttachmentOut
from complaints.core.config import Settings, get_settings
from complaints.core.database import get_db
from complaints.core.security import Principal, get_current_principal

router = APIRouter(prefix="/uploads", tags=["Uploads"])


@router.post("/ticket/{ticket_id}", response_model=AttachmentOut, status_code=201)
def upload(
    ticket_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    settings: Settings = Depends(get_settings),
):
    return attachment_service.upload_attachment(db, principal, ticket_id, file, settings)


@router.get("/{attachment_id}")
def download(
    attachment_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    attachment = attachment_service.get_attachment(db, principal, attachment_id)
    return FileResponse(attachment.filepath, media_type=attachment.mimetype, filename=attachment.filename)
