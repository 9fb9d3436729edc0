# complaints/notification/models.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from complaints.core.database import Base, utcnow


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(32), nullable=False)
    link = Column(String(255), nullable=True)
    is_read = Column(Boolean, default=False, index=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True, nullable=False)
