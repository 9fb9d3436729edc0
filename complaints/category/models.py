# complaints/category/models.py
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from complaints.core.database import Base, utcnow


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    department = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    tickets = relationship("Ticket", back_populates="category")
