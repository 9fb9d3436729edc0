# tests/test_categories.py
from complaints.category.models import Category
from conftest import auth


def test_list_and_get_are_public(client, category, student, make_ticket):
    make_ticket(student)

    r = client.get("/categories")
    assert r.status_code == 200
    assert [c["name"] for c in r.json()] == ["Dormitory"]

    r2 = client.get(f"/categories/{category.id}")
    assert r2.status_code == 200
    assert r2.json()["ticket_count"] == 1


def test_list_is_alphabetical(client, admin):
    for name in ("Library", "Dormitory", "Internet"):
        client.post("/categories", json={"name": name, "department": "Facilities"}, headers=auth(admin))
    names = [c["name"] for c in client.get("/categories").json()]
    assert names == ["Dormitory", "Internet", "Library"]


def test_admin_creates_and_updates(client, admin):
    r = client.post(
        "/categories",
        json={"name": "Laboratory", "description": "Lab issues", "department": "Lab Management"},
        headers=auth(admin),
    )
    assert r.status_code == 201
    cid = r.json()["id"]

    r2 = client.put(f"/categories/{cid}", json={"department": "Science Faculty"}, headers=auth(admin))
    assert r2.status_code == 200
    assert r2.json()["department"] == "Science Faculty"
    assert r2.json()["name"] == "Laboratory"


def test_duplicate_name_conflicts(client, admin, category):
    r = client.post("/categories", json={"name": "Dormitory", "department": "Housing"}, headers=auth(admin))
    assert r.status_code == 409


def test_non_admin_cannot_mutate(client, staff, student, category):
    for user in (staff, student):
        headers = auth(user)
        assert client.post("/categories", json={"name": "Sports", "department": "Sports"}, headers=headers).status_code == 403
        assert client.put(f"/categories/{category.id}", json={"name": "Dorms"}, headers=headers).status_code == 403
        assert client.delete(f"/categories/{category.id}", headers=headers).status_code == 403


def test_validation(client, admin):
    r = client.post("/categories", json={"name": "X", "department": "Housing"}, headers=auth(admin))
    assert r.status_code == 422


def test_delete_empty_category(client, db, admin, category):
    r = client.delete(f"/categories/{category.id}", headers=auth(admin))
    assert r.status_code == 204
    assert db.query(Category).count() == 0
    assert client.get(f"/categories/{category.id}").status_code == 404


def test_delete_with_tickets_is_refused_without_mutation(client, db, admin, student, category, make_ticket):
    make_ticket(student)
    make_ticket(student, title="Second complaint")

    r = client.delete(f"/categories/{category.id}", headers=auth(admin))
    assert r.status_code == 409
    assert "It has 2 ticket(s)" in r.json()["detail"]
    assert db.query(Category).count() == 1
