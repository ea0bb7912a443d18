# tests/test_api.py

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient


def _login(client: TestClient, email: str, name: str = "Student", password: str = "secret1") -> dict:
    r = client.post(
        "/register",
        json={"email": email, "full_name": name, "password": password, "confirm_password": password},
    )
    assert r.status_code == 201, r.text
    r = client.post("/token", data={"username": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture()
def alice(client) -> dict:
    return _login(client, "alice@school.edu", "Alice")


@pytest.fixture()
def bob(client) -> dict:
    return _login(client, "bob@school.edu", "Bob")


def _deadline(**delta) -> str:
    return (datetime.now() + timedelta(**delta)).replace(microsecond=0).isoformat()


def test_requests_without_token_are_rejected(client) -> None:
    assert client.get("/tasks").status_code == 401
    assert client.get("/dashboard", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_register_rejects_invalid_input(client) -> None:
    r = client.post("/register", json={"email": "x", "full_name": "", "password": "1", "confirm_password": "2"})
    assert r.status_code == 400
    assert "Email format is invalid." in r.json()["detail"]


def test_register_rejects_address_the_response_model_would_refuse(client) -> None:
    r = client.post(
        "/register",
        json={"email": "x@b..com", "full_name": "X", "password": "secret1", "confirm_password": "secret1"},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Email format is invalid."
    assert client.post("/token", data={"username": "x@b..com", "password": "secret1"}).status_code == 401


def test_wrong_password_gets_401(client, alice) -> None:
    r = client.post("/token", data={"username": "alice@school.edu", "password": "nope-nope"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid email or password."


def test_me(client, alice) -> None:
    r = client.get("/me", headers=alice)
    assert r.status_code == 200
    assert r.json()["full_name"] == "Alice"


def test_task_lifecycle(client, alice) -> None:
    r = client.post("/subjects", json={"name": "Math"}, headers=alice)
    assert r.status_code == 201
    subject_id = r.json()["id"]

    r = client.post(
        "/tasks",
        json={"title": "Problem set 1", "deadline": _deadline(days=2), "subject_id": subject_id},
        headers=alice,
    )
    assert r.status_code == 201, r.text
    task = r.json()
    assert task["subject_name"] == "Math"

    r = client.post(f"/tasks/{task['id']}/toggle", headers=alice)
    assert r.json()["success"] is True
    assert client.get(f"/tasks/{task['id']}", headers=alice).json()["is_done"] is True

    r = client.put(
        f"/tasks/{task['id']}",
        json={"title": "Problem set 1b", "deadline": _deadline(days=3), "is_done": False, "subject_id": None},
        headers=alice,
    )
    assert r.status_code == 200
    assert r.json()["subject_id"] is None

    r = client.get("/tasks", params={"search_term": "SET 1B", "status": "pending"}, headers=alice)
    assert [t["id"] for t in r.json()] == [task["id"]]

    assert client.delete(f"/tasks/{task['id']}", headers=alice).status_code == 200
    assert client.delete(f"/tasks/{task['id']}", headers=alice).status_code == 404


def test_create_task_with_past_deadline_is_400(client, alice) -> None:
    r = client.post("/tasks", json={"title": "Too late", "deadline": _deadline(hours=-1)}, headers=alice)
    assert r.status_code == 400
    assert r.json()["detail"] == "Deadline cannot be in the past."


def test_create_task_with_short_title_is_422(client, alice) -> None:
    r = client.post("/tasks", json={"title": "x", "deadline": _deadline(days=1)}, headers=alice)
    assert r.status_code == 422


def test_dashboard_and_mark_done(client, alice) -> None:
    empty = client.get("/dashboard", headers=alice).json()
    assert empty["has_no_tasks"] is True

    later = client.post("/tasks", json={"title": "Next week", "deadline": _deadline(days=7)}, headers=alice).json()
    client.post("/tasks", json={"title": "In two days", "deadline": _deadline(days=2)}, headers=alice)

    r = client.post(f"/dashboard/tasks/{later['id']}/done", headers=alice)
    assert r.json() == {"success": True, "message": None}
    # second call is a no-op success
    assert client.post(f"/dashboard/tasks/{later['id']}/done", headers=alice).status_code == 200

    dash = client.get("/dashboard", headers=alice).json()
    assert dash["total_tasks"] == 2
    assert dash["completed_tasks"] == 1
    assert dash["progress_percentage"] == 50.0
    assert [t["title"] for t in dash["upcoming_tasks"]] == ["In two days"]


def test_other_students_data_is_not_found(client, alice, bob) -> None:
    subject = client.post("/subjects", json={"name": "Secret"}, headers=alice).json()
    task = client.post("/tasks", json={"title": "Private", "deadline": _deadline(days=1)}, headers=alice).json()

    assert client.get(f"/tasks/{task['id']}", headers=bob).status_code == 404
    assert client.post(f"/tasks/{task['id']}/toggle", headers=bob).status_code == 404
    assert client.post(f"/dashboard/tasks/{task['id']}/done", headers=bob).status_code == 404
    assert client.delete(f"/tasks/{task['id']}", headers=bob).status_code == 404
    r = client.put(
        f"/tasks/{task['id']}", json={"title": "Mine now", "deadline": _deadline(days=1)}, headers=bob
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Task not found or access denied."

    assert client.get(f"/subjects/{subject['id']}", headers=bob).status_code == 404
    assert client.get(f"/subjects/{subject['id']}/tasks", headers=bob).status_code == 404
    assert client.get("/tasks", headers=bob).json() == []

    r = client.post(
        "/tasks", json={"title": "Sneaky", "deadline": _deadline(days=1), "subject_id": subject["id"]}, headers=bob
    )
    assert r.status_code == 400


def test_subject_rules_over_http(client, alice, bob) -> None:
    math = client.post("/subjects", json={"name": "Math"}, headers=alice).json()
    assert client.post("/subjects", json={"name": "math"}, headers=alice).status_code == 400
    assert client.post("/subjects", json={"name": "Math"}, headers=bob).status_code == 201

    client.post("/tasks", json={"title": "Homework", "deadline": _deadline(days=1), "subject_id": math["id"]},
                headers=alice)
    r = client.delete(f"/subjects/{math['id']}", headers=alice)
    assert r.status_code == 409
    assert "associated tasks" in r.json()["detail"]

    listed = client.get("/subjects", headers=alice).json()
    assert listed[0]["task_count"] == 1
    assert len(client.get(f"/subjects/{math['id']}/tasks", headers=alice).json()) == 1

    empty = client.post("/subjects", json={"name": "Art"}, headers=alice).json()
    r = client.put(f"/subjects/{empty['id']}", json={"name": "Fine Art", "description": "drawing"}, headers=alice)
    assert r.json()["name"] == "Fine Art"
    assert client.delete(f"/subjects/{empty['id']}", headers=alice).status_code == 200
    assert client.delete(f"/subjects/{empty['id']}", headers=alice).status_code == 404


def test_overdue_listing(client, alice) -> None:
    task = client.post("/tasks", json={"title": "Slipped", "deadline": _deadline(days=1)}, headers=alice).json()
    client.post("/tasks", json={"title": "On track", "deadline": _deadline(days=1)}, headers=alice)
    # update does not re-check the deadline, so a task can be moved into the past
    client.put(f"/tasks/{task['id']}", json={"title": "Slipped", "deadline": _deadline(days=-2)}, headers=alice)

    overdue = client.get("/tasks/overdue", headers=alice).json()
    assert [t["id"] for t in overdue] == [task["id"]]
    assert overdue[0]["status_text"] == "Overdue"


def test_today_and_upcoming_listings(client, alice) -> None:
    task = client.post("/tasks", json={"title": "Later this week", "deadline": _deadline(days=3)}, headers=alice).json()

    assert [t["id"] for t in client.get("/tasks/upcoming", headers=alice).json()] == [task["id"]]
    assert client.get("/tasks/upcoming", params={"days": 1}, headers=alice).json() == []
    assert client.get("/tasks/upcoming", params={"days": 0}, headers=alice).status_code == 422
    assert client.get("/tasks/today", headers=alice).json() == []
