# complaints/notification/services.py
import logging

from sqlalchemy.orm import Session

from complaints.core.errors import ForbiddenError, NotFoundError
from complaints.core.security import Principal
from complaints.notification.models import Notification

logger = logging.getLogger(__name__)


class Notifier:
    """Best-effort notification sink.

    ``notify`` never raises: a failed insert is rolled back and logged, and
    the operation that triggered it keeps its result. Callers invoke it only
    after their own transaction has committed.
    """

    def __init__(self, db: Session):
        self.db = db

    def notify(
        self,
        user_id: int,
        title: str,
        message: str,
        type: str,
        link: str | None = None,
    ) -> Notification | None:
        try:
            notification = Notification(
                user_id=user_id, title=title, message=message, type=type, link=link
            )
            self.db.add(notification)
            self.db.commit()
            return notification
        except Exception:
            self.db.rollback()
            logger.warning("Dropped %s notification for user %s", type, user_id, exc_info=True)
            return None


def list_notifications(db: Session, principal: Principal, limit: int = 20) -> list[Notification]:
    return (
        db.query(Notification)
        .filter(Notification.user_id == principal.user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
        .all()
    )


def unread_count(db: Session, principal: Principal) -> int:
    return (
        db.query(Notification)
        .filter(Notification.user_id == principal.user_id, Notification.is_read.is_(False))
        .count()
    )


def mark_as_read(db: Session, principal: Principal, notification_id: int) -> Notification:
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.user_id != principal.user_id:
        raise ForbiddenError("Forbidden")
    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_as_read(db: Session, principal: Principal) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == principal.user_id, Notification.is_read.is_(False))
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return updated
