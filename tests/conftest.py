# tests/conftest.py
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from complaints.category.models import Category
from complaints.core.config import get_settings
from complaints.core.database import Base, get_db
from complaints.core.security import Principal, create_access_token
from complaints.main import app
from complaints.ticket import services as ticket_service
from complaints.ticket.schemas import TicketCreate
from complaints.user.models import Role
from complaints.user.services import create_user

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def settings(tmp_path, monkeypatch):
    s = get_settings()
    monkeypatch.setattr(s, "UPLOAD_DIR", str(tmp_path / "uploads"))
    return s


@pytest.fixture
def client(db, settings):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def factory(role=Role.STUDENT, name=None, department=None):
        counter["n"] += 1
        n = counter["n"]
        return create_user(
            db,
            name=name or f"{role.value.title()} {n}",
            email=f"{role.value.lower()}{n}@astu.edu.et",
            password="secret123",
            role=role,
            department=department,
        )

    return factory


@pytest.fixture
def student(make_user):
    return make_user(Role.STUDENT)


@pytest.fixture
def other_student(make_user):
    return make_user(Role.STUDENT)


@pytest.fixture
def staff(make_user):
    return make_user(Role.STAFF, department="IT Department")


@pytest.fixture
def admin(make_user):
    return make_user(Role.ADMIN)


@pytest.fixture
def category(db):
    c = Category(name="Dormitory", description="Dormitory issues", department="Housing Department")
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


def principal(user) -> Principal:
    return Principal.from_user(user)


def auth(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def make_ticket(db, category):
    def factory(author, title="Broken AC unit", description="The AC in room 204 is not working", **extra):
        payload = TicketCreate(title=title, description=description, category_id=category.id, **extra)
        return ticket_service.create_ticket(db, principal(author), payload)

    return factory
