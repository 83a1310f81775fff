from datetime import datetime

from taskbell.database import get_db_context
from taskbell.models.notification import Notification
from taskbell.models.todo import Todo
from taskbell.services.notification_center import NotificationCenter
from taskbell.services.notification_store import DatabaseNotificationStore
from taskbell.services.reminder_poller import make_reminder_check
from taskbell.services.todos import snapshot_all_todos

NOW = datetime(2026, 10, 19, 9, 0, 0)


def _create(client, **fields):
    payload = {"title": "Ship report"}
    payload.update(fields)
    response = client.post("/api/todos", json=payload)
    assert response.status_code == 201
    return response.json()


def test_create_applies_defaults(client):
    todo = _create(client, title="  Buy groceries  ")

    assert todo["title"] == "Buy groceries"
    assert todo["completed"] is False
    assert todo["ongoing"] is False
    assert todo["priority"] == "medium"
    assert todo["category"] == "Personal"
    assert todo["status"] == "pending"


def test_create_rejects_blank_title_and_bad_priority(client):
    assert client.post("/api/todos", json={"title": "   "}).status_code == 422
    assert client.post("/api/todos", json={"title": "x", "priority": "urgent"}).status_code == 422


def test_list_paginates_newest_first(client, db):
    for index in range(3):
        db.add(Todo(title=f"Task {index}", created_at=f"2026-10-19T09:00:0{index}"))
    db.commit()

    first_page = client.get("/api/todos", params={"skip": 0, "limit": 2}).json()
    second_page = client.get("/api/todos", params={"skip": 2, "limit": 2}).json()

    assert [t["title"] for t in first_page["todos"]] == ["Task 2", "Task 1"]
    assert first_page["pagination"] == {"total": 3, "skip": 0, "limit": 2, "has_more": True}
    assert [t["title"] for t in second_page["todos"]] == ["Task 0"]
    assert second_page["pagination"]["has_more"] is False


def test_list_uses_default_page_size(client):
    response = client.get("/api/todos")

    assert response.json()["pagination"]["limit"] == 10


def test_update_sets_and_clears_completed_at(client):
    todo = _create(client)

    completed = client.put(f"/api/todos/{todo['id']}", json={"completed": True}).json()
    assert completed["completed"] is True
    assert completed["completed_at"]
    assert completed["status"] == "completed"

    reopened = client.put(f"/api/todos/{todo['id']}", json={"completed": False}).json()
    assert reopened["completed"] is False
    assert reopened["completed_at"] is None


def test_update_without_ongoing_resets_it(client):
    todo = _create(client, ongoing=True)
    assert todo["status"] == "ongoing"

    updated = client.put(f"/api/todos/{todo['id']}", json={"title": "Renamed"}).json()

    assert updated["title"] == "Renamed"
    assert updated["ongoing"] is False


def test_overdue_status_for_bare_past_end_date(client):
    todo = _create(client, end_date="2000-01-01")

    assert todo["status"] == "overdue"


def test_get_update_delete_unknown_todo_is_404(client):
    assert client.get("/api/todos/missing").status_code == 404
    assert client.put("/api/todos/missing", json={"title": "x"}).status_code == 404
    response = client.delete("/api/todos/missing")
    assert response.status_code == 404
    assert response.json() == {"detail": "Todo not found"}


def test_delete_one_and_all(client):
    first = _create(client, title="One")
    _create(client, title="Two")

    assert client.delete(f"/api/todos/{first['id']}").json() == {"message": "Todo deleted"}
    assert client.get(f"/api/todos/{first['id']}").status_code == 404

    assert client.delete("/api/todos").json() == {"message": "All todos deleted"}
    assert client.get("/api/todos").json()["pagination"]["total"] == 0


def test_update_rejects_blank_title_and_strips_text(client):
    todo = _create(client)

    assert client.put(f"/api/todos/{todo['id']}", json={"title": "   "}).status_code == 422

    updated = client.put(
        f"/api/todos/{todo['id']}",
        json={"title": "  Renamed  ", "description": " notes "},
    ).json()
    assert updated["title"] == "Renamed"
    assert updated["description"] == "notes"


def test_todo_changes_run_a_reminder_pass(api_app, client, db, session_factory):
    def fetch_todos():
        with get_db_context(session_factory) as session:
            return snapshot_all_todos(session)

    center = NotificationCenter(DatabaseNotificationStore(session_factory), clock=lambda: NOW)
    api_app.state.reminder_check = make_reminder_check(center, fetch_todos)

    todo = _create(client, end_date="2026-10-19", end_time="09:05")

    rows = db.query(Notification).all()
    assert [(n.task_id, n.type) for n in rows] == [(todo["id"], "end_time")]

    client.put(
        f"/api/todos/{todo['id']}",
        json={"end_date": "2026-10-19", "end_time": "08:00"},
    )

    db.expire_all()
    assert sorted(n.type for n in db.query(Notification).all()) == ["end_time", "overdue"]
    assert center.unread_count() == 2


def test_todo_changes_without_poller_create_no_notifications(client, db):
    _create(client, end_date="2026-10-19", end_time="09:05")

    assert db.query(Notification).count() == 0
