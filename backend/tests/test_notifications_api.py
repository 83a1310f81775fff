from sqlalchemy.exc import OperationalError

from taskbell.api import notifications as notifications_api
from taskbell.models.notification import Notification


def _payload(task_id="t1", notification_type="overdue", **overrides):
    payload = {
        "type": notification_type,
        "task_id": task_id,
        "title": "Task Overdue",
        "message": '"Ship report" is overdue by 5 minutes',
        "task_title": "Ship report",
    }
    payload.update(overrides)
    return payload


def test_create_returns_existing_record_for_same_task_and_type(client, db):
    first = client.post("/api/notifications", json=_payload())
    assert first.status_code == 201
    created = first.json()
    assert created["read"] is False
    assert created["type"] == "overdue"

    second = client.post("/api/notifications", json=_payload(message="different text"))
    assert second.status_code == 200
    assert second.json()["id"] == created["id"]
    assert second.json()["message"] == created["message"]

    assert db.query(Notification).count() == 1


def test_same_task_different_type_creates_new_record(client):
    client.post("/api/notifications", json=_payload(notification_type="end_time"))
    response = client.post("/api/notifications", json=_payload(notification_type="overdue"))

    assert response.status_code == 201
    assert len(client.get("/api/notifications").json()) == 2


def test_create_rejects_unknown_type(client):
    response = client.post("/api/notifications", json=_payload(notification_type="reminder"))

    assert response.status_code == 422


def test_list_is_newest_first_and_capped(client, db):
    for index in range(3):
        db.add(Notification(
            type="overdue",
            task_id=f"t{index}",
            task_title=f"Task {index}",
            title="Task Overdue",
            message="late",
            created_at=f"2026-10-19T09:00:0{index}",
        ))
    db.commit()

    response = client.get("/api/notifications")

    assert response.status_code == 200
    assert [n["task_id"] for n in response.json()] == ["t2", "t1", "t0"]


def test_list_respects_configured_limit(client, api_app, db):
    from taskbell.api.deps import Settings, get_settings

    for index in range(3):
        db.add(Notification(type="overdue", task_id=f"t{index}", task_title="x", title="x", message="x"))
    db.commit()
    api_app.dependency_overrides[get_settings] = lambda: Settings(notification_list_limit=2)

    assert len(client.get("/api/notifications").json()) == 2


def test_mark_one_and_mark_all_read(client):
    first = client.post("/api/notifications", json=_payload("t1")).json()
    client.post("/api/notifications", json=_payload("t2"))

    response = client.put("/api/notifications", json={"id": first["id"]})
    assert response.status_code == 200
    assert response.json()["read"] is True

    unread = [n for n in client.get("/api/notifications").json() if not n["read"]]
    assert len(unread) == 1

    response = client.put("/api/notifications", json={"mark_all_read": True})
    assert response.json() == {"success": True}
    assert all(n["read"] for n in client.get("/api/notifications").json())


def test_mark_read_unknown_id_is_404(client):
    response = client.put("/api/notifications", json={"id": "missing"})

    assert response.status_code == 404


def test_update_without_target_is_400(client):
    response = client.put("/api/notifications", json={})

    assert response.status_code == 400


def test_delete_one_and_delete_all(client):
    first = client.post("/api/notifications", json=_payload("t1")).json()
    client.post("/api/notifications", json=_payload("t2"))
    client.post("/api/notifications", json=_payload("t3"))

    response = client.delete("/api/notifications", params={"id": first["id"]})
    assert response.json() == {"success": True}
    assert len(client.get("/api/notifications").json()) == 2

    # Deleting an absent id is still a success
    response = client.delete("/api/notifications", params={"id": first["id"]})
    assert response.status_code == 200

    response = client.delete("/api/notifications")
    assert response.json() == {"success": True}
    assert client.get("/api/notifications").json() == []


def test_store_failure_returns_json_error(client, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(notifications_api, "create_notification_if_absent", broken)

    response = client.post("/api/notifications", json=_payload())

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create notification"}
