# tests/test_notifications.py
from complaints.notification.services import Notifier
from conftest import auth


def test_list_unread_and_mark_read(client, db, student):
    notifier = Notifier(db)
    first = notifier.notify(student.id, "Ticket status updated", "Your ticket is now IN_PROGRESS", "STATUS_CHANGE")
    notifier.notify(student.id, "New remark", "A new remark was added", "REMARK", link="/tickets/1")

    r = client.get("/notifications", headers=auth(student))
    assert r.status_code == 200
    assert [n["type"] for n in r.json()] == ["REMARK", "STATUS_CHANGE"]

    assert client.get("/notifications/unread-count", headers=auth(student)).json() == {"count": 2}

    r2 = client.put(f"/notifications/{first.id}/read", headers=auth(student))
    assert r2.status_code == 200
    assert r2.json()["is_read"] is True
    assert client.get("/notifications/unread-count", headers=auth(student)).json() == {"count": 1}

    r3 = client.put("/notifications/mark-all-read", headers=auth(student))
    assert r3.json() == {"updated": 1}
    assert client.get("/notifications/unread-count", headers=auth(student)).json() == {"count": 0}


def test_notifications_are_private(client, db, student, other_student):
    note = Notifier(db).notify(student.id, "Title", "Message", "STATUS_CHANGE")

    assert client.get("/notifications", headers=auth(other_student)).json() == []
    r = client.put(f"/notifications/{note.id}/read", headers=auth(other_student))
    assert r.status_code == 403


def test_mark_missing_notification(client, student):
    assert client.put("/notifications/999/read", headers=auth(student)).status_code == 404


def test_list_is_capped(client, db, student, settings, monkeypatch):
    monkeypatch.setattr(settings, "NOTIFICATION_PAGE_SIZE", 3)
    notifier = Notifier(db)
    for i in range(5):
        notifier.notify(student.id, f"Title {i}", "Message", "REMARK")

    titles = [n["title"] for n in client.get("/notifications", headers=auth(student)).json()]
    assert titles == ["Title 4", "Title 3", "Title 2"]
