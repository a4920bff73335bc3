from datetime import date

from planner.model.tasks import Task


def create_task(client, headers, title="Pagar luz", **extra):
    res = client.post("/api/tasks", json={"title": title, **extra}, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()


def test_create_task_defaults(client, auth_headers):
    task = create_task(client, auth_headers)
    assert task["priority"] == "media"
    assert task["status"] == "Pendiente"
    assert task["is_recurring"] is False
    assert task["frequency"] is None
    assert task["is_overdue"] is False


def test_priority_is_case_insensitive(client, auth_headers):
    assert create_task(client, auth_headers, priority="Alta")["priority"] == "alta"
    res = client.post("/api/tasks", json={"title": "X", "priority": "urgente"}, headers=auth_headers)
    assert res.status_code == 422


def test_due_date_accepts_timestamps(client, auth_headers):
    task = create_task(client, auth_headers, due_date="2024-05-01T00:00:00.000Z")
    assert task["due_date"] == "2024-05-01"
    assert create_task(client, auth_headers, due_date="")["due_date"] is None


def test_recurrence_fields(client, auth_headers, db_session):
    single = create_task(
        client, auth_headers, "Una vez", is_recurring=False, frequency="Diaria", recurrence_end_date="2024-12-31"
    )
    assert single["recurrence_end_date"] is None

    weekly = create_task(client, auth_headers, "Cada semana", is_recurring=True)
    assert weekly["frequency"] == "Semanal"

    res = client.post("/api/tasks", json={
        "title": "Mal", "is_recurring": True, "due_date": "2024-06-01", "recurrence_end_date": "2024-05-01",
    }, headers=auth_headers)
    assert res.status_code == 400
    assert db_session.query(Task).count() == 2


def test_list_ordering(client, auth_headers):
    low = create_task(client, auth_headers, "Baja", priority="baja")
    high_late = create_task(client, auth_headers, "Alta tarde", priority="alta", due_date="2024-02-01")
    high_soon = create_task(client, auth_headers, "Alta pronto", priority="alta", due_date="2024-01-10")
    done = create_task(client, auth_headers, "Hecha", priority="alta", status="Completada")
    mid = create_task(client, auth_headers, "Media")

    res = client.get("/api/tasks", headers=auth_headers)
    assert [t["id"] for t in res.json()] == [high_soon["id"], high_late["id"], mid["id"], low["id"], done["id"]]


def test_overdue_only_for_pending_past_due(client, auth_headers, set_today):
    set_today(date(2024, 3, 1))
    late = create_task(client, auth_headers, "Vencida", due_date="2024-02-28")
    today = create_task(client, auth_headers, "Hoy", due_date="2024-03-01")
    done = create_task(client, auth_headers, "Hecha", due_date="2024-02-01", status="Completada")

    tasks = {t["id"]: t for t in client.get("/api/tasks", headers=auth_headers).json()}
    assert tasks[late["id"]]["is_overdue"] is True
    assert tasks[today["id"]]["is_overdue"] is False
    assert tasks[done["id"]]["is_overdue"] is False


def test_update_task(client, auth_headers):
    task = create_task(client, auth_headers)
    res = client.put(f"/api/tasks/{task['id']}", json={
        "title": "Pagar agua", "priority": "baja", "due_date": "2024-04-01",
    }, headers=auth_headers)
    assert res.status_code == 200
    body = res.json()
    assert (body["title"], body["priority"], body["due_date"]) == ("Pagar agua", "baja", "2024-04-01")


def test_toggle_status(client, auth_headers, set_today):
    set_today(date(2024, 3, 1))
    task = create_task(client, auth_headers, due_date="2024-01-01")
    assert task["is_overdue"] is True

    res = client.put(f"/api/tasks/{task['id']}/status", json={"status": "Completada"}, headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["status"] == "Completada"
    assert res.json()["is_overdue"] is False

    res = client.put(f"/api/tasks/{task['id']}/status", json={"status": "Pendiente"}, headers=auth_headers)
    assert res.json()["status"] == "Pendiente"

    res = client.put(f"/api/tasks/{task['id']}/status", json={"status": "Cancelada"}, headers=auth_headers)
    assert res.status_code == 422


def test_delete_task(client, auth_headers):
    task = create_task(client, auth_headers)
    assert client.delete(f"/api/tasks/{task['id']}", headers=auth_headers).status_code == 200
    assert client.get("/api/tasks", headers=auth_headers).json() == []
    assert client.delete(f"/api/tasks/{task['id']}", headers=auth_headers).status_code == 404


def test_tasks_are_private(client, auth_headers, other_headers):
    task = create_task(client, auth_headers)
    assert client.get("/api/tasks", headers=other_headers).json() == []
    assert client.put(f"/api/tasks/{task['id']}", json={"title": "X"}, headers=other_headers).status_code == 404
    assert client.put(
        f"/api/tasks/{task['id']}/status", json={"status": "Completada"}, headers=other_headers
    ).status_code == 404
    assert client.delete(f"/api/tasks/{task['id']}", headers=other_headers).status_code == 404
