# complaints/seed.py
"""Create demo accounts and the default categories.

    python -m complaints.seed

Safe to run repeatedly: existing emails and category names are skipped.
"""
import logging

from sqlalchemy.orm import Session

from complaints import models  # noqa: F401
from complaints.category.models import Category
from complaints.core.config import get_settings
from complaints.core.database import Base, SessionLocal, engine
from complaints.core.logging import configure_logging
from complaints.user.models import Role
from complaints.user.services import create_user, get_user_by_email

logger = logging.getLogger("complaints.seed")

DEMO_USERS = [
    {"name": "Admin User", "email": "admin@astu.edu.et", "password": "admin123", "role": Role.ADMIN},
    {
        "name": "Staff Member",
        "email": "staff@astu.edu.et",
        "password": "staff123",
        "role": Role.STAFF,
        "department": "IT Department",
    },
    {
        "name": "John Doe",
        "email": "student@astu.edu.et",
        "password": "student123",
        "role": Role.STUDENT,
        "identification": "ASTU/2024/001",
    },
]

DEFAULT_CATEGORIES = [
    {"name": "Dormitory", "description": "Dormitory maintenance and issues", "department": "Housing Department"},
    {"name": "Laboratory", "description": "Lab equipment and facility issues", "department": "Lab Management"},
    {"name": "Internet", "description": "Network and connectivity issues", "department": "IT Department"},
    {"name": "Classroom", "description": "Classroom facility issues", "department": "Facilities Management"},
    {"name": "Library", "description": "Library services and resources", "department": "Library Services"},
]


def seed(db: Session) -> None:
    for account in DEMO_USERS:
        if get_user_by_email(db, account["email"]) is None:
            create_user(db, **account)
            logger.info("Created %s account %s", account["role"].value, account["email"])

    for row in DEFAULT_CATEGORIES:
        if db.query(Category).filter(Category.name == row["name"]).first() is None:
            db.add(Category(**row))
            logger.info("Created category %s", row["name"])
    db.commit()


def main() -> None:
    configure_logging(get_settings().LOG_LEVEL)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
