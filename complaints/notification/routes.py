# complaints/notification/routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from complaints.core.config import Settings, get_settings
from complaints.core.database import get_db
from complaints.core.security import Principal, get_current_principal
from complaints.notification import services as notification_service
from complaints.notification.schemas import MarkedRead, NotificationOut, UnreadCount

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("/", response_model=list[NotificationOut])
def list_mine(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    settings: Settings = Depends(get_settings),
):
    return notification_service.list_notifications(db, principal, settings.NOTIFICATION_PAGE_SIZE)


@router.get("/unread-count", response_model=UnreadCount)
def unread_count(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return UnreadCount(count=notification_service.unread_count(db, principal))


@router.put("/mark-all-read", response_model=MarkedRead)
def mark_all_read(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return MarkedRead(updated=notification_service.mark_all_as_read(db, principal))


@router.put("/{notification_id}/read", response_model=NotificationOut)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return notification_service.mark_as_read(db, principal, notification_id)
