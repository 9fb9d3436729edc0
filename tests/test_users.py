# tests/test_users.py
import jwt

from complaints.core.config import get_settings
from complaints.core.security import decode_access_token
from complaints.user.models import Role, User
from conftest import auth


def _register(client, **overrides):
    body = {
        "name": "Abebe Kebede",
        "email": "abebe@astu.edu.et",
        "password": "secret123",
        "identification": "ASTU/2026/017",
    }
    body.update(overrides)
    return client.post("/auth/register", json=body)


def test_register_returns_student_and_token(client):
    r = _register(client)
    assert r.status_code == 201
    data = r.json()
    assert data["user"]["role"] == "STUDENT"
    assert data["user"]["identification"] == "ASTU/2026/017"
    assert "password" not in data["user"]
    assert decode_access_token(data["token"])["role"] == "STUDENT"


def test_register_ignores_requested_role(client, db):
    r = _register(client, role="ADMIN")
    assert r.status_code == 201
    assert db.query(User).one().role == Role.STUDENT.value


def test_duplicate_email_conflicts(client):
    assert _register(client).status_code == 201
    r = _register(client, email="ABEBE@astu.edu.et")
    assert r.status_code == 409
    assert r.json()["detail"] == "Email already registered"


def test_register_validation(client):
    assert _register(client, password="123").status_code == 422
    assert _register(client, email="not-an-email").status_code == 422


def test_login_and_profile(client):
    _register(client)
    r = client.post("/auth/login", json={"email": "abebe@astu.edu.et", "password": "secret123"})
    assert r.status_code == 200
    token = r.json()["token"]

    r2 = client.get("/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert r2.status_code == 200
    assert r2.json()["email"] == "abebe@astu.edu.et"


def test_login_failures_share_a_message(client):
    _register(client)
    wrong_password = client.post("/auth/login", json={"email": "abebe@astu.edu.et", "password": "nope"})
    unknown = client.post("/auth/login", json={"email": "ghost@astu.edu.et", "password": "secret123"})
    assert wrong_password.status_code == unknown.status_code == 401
    assert wrong_password.json()["detail"] == unknown.json()["detail"] == "Invalid email or password"


def test_bad_tokens_are_unauthenticated(client, student):
    settings = get_settings()
    expired = jwt.encode(
        {"sub": str(student.id), "role": "STUDENT", "exp": 1},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    forged = jwt.encode({"sub": str(student.id)}, "wrong-secret", algorithm="HS256")
    for token in (expired, forged, "garbage"):
        r = client.get("/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 401


def test_token_for_deleted_user_is_rejected(client, db, student):
    headers = auth(student)
    db.delete(student)
    db.commit()
    assert client.get("/auth/profile", headers=headers).status_code == 401


def test_admin_lists_users_with_ticket_counts(client, admin, student, staff, make_ticket, db):
    ticket = make_ticket(student)
    ticket.assigned_to_id = staff.id
    db.commit()

    r = client.get("/admin/users", headers=auth(admin))
    assert r.status_code == 200
    by_id = {u["id"]: u for u in r.json()}
    assert by_id[student.id]["authored_ticket_count"] == 1
    assert by_id[staff.id]["assigned_ticket_count"] == 1
    assert by_id[admin.id]["authored_ticket_count"] == 0


def test_admin_updates_role_and_department(client, admin, student):
    r = client.put(
        f"/admin/users/{student.id}/role",
        json={"role": "STAFF", "department": "Housing Department"},
        headers=auth(admin),
    )
    assert r.status_code == 200
    assert r.json()["role"] == "STAFF"
    assert r.json()["department"] == "Housing Department"


def test_invalid_role_is_rejected(client, admin, student):
    r = client.put(f"/admin/users/{student.id}/role", json={"role": "JANITOR"}, headers=auth(admin))
    assert r.status_code == 422
    assert r.json()["errors"][0]["field"] == "role"


def test_role_update_unknown_user(client, admin):
    r = client.put("/admin/users/9999/role", json={"role": "STAFF"}, headers=auth(admin))
    assert r.status_code == 404


def test_only_admin_manages_users(client, staff, student):
    assert client.get("/admin/users", headers=auth(staff)).status_code == 403
    r = client.put(f"/admin/users/{student.id}/role", json={"role": "ADMIN"}, headers=auth(staff))
    assert r.status_code == 403
