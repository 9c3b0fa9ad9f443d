# File: tests/test_work_sessions.py

from datetime import datetime, timedelta

import pytest

from fundiflow.models.work_session import WorkSession
from fundiflow.schemas.work_session import WorkSessionComplete
from fundiflow.services import work_session_service


@pytest.fixture
def setup(client, admin_headers, assembler_headers):
    me = client.get("/api/v1/auth/me", headers=assembler_headers).json()
    worker = client.post(
        "/api/v1/workers/",
        json={"name": "Alice", "user_id": me["id"]},
        headers=admin_headers,
    ).json()
    project = client.post(
        "/api/v1/projects/",
        json={
            "name": "Drone Frame",
            "deadline": (datetime.utcnow() + timedelta(days=20)).isoformat(),
            "components": [{"id": "arm", "name": "Arm", "quantity_required": 4}],
        },
        headers=admin_headers,
    ).json()
    return worker, project


def test_start_session_marks_worker_and_project(client, admin_headers, setup):
    worker, project = setup
    resp = client.post(
        "/api/v1/work-sessions/",
        json={"worker_id": worker["id"], "project_id": project["id"], "component_id": "arm"},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["end_time"] is None

    worker_now = client.get(f"/api/v1/workers/{worker['id']}", headers=admin_headers).json()
    assert worker_now["active_project_id"] == project["id"]
    project_now = client.get(f"/api/v1/projects/{project['id']}", headers=admin_headers).json()
    assert project_now["status"] == "In Progress"


def test_start_session_unknown_worker(client, admin_headers, setup):
    _, project = setup
    resp = client.post(
        "/api/v1/work-sessions/",
        json={"worker_id": "ghost", "project_id": project["id"]},
        headers=admin_headers,
    )
    assert resp.status_code == 404


def test_complete_session_applies_progress_and_notifies_lead(client, admin_headers, setup):
    worker, project = setup
    session = client.post(
        "/api/v1/work-sessions/",
        json={"worker_id": worker["id"], "project_id": project["id"]},
        headers=admin_headers,
    ).json()

    resp = client.post(
        f"/api/v1/work-sessions/{session['id']}/complete",
        json={
            "completed_components": [{"component_id": "arm", "quantity": 3}],
            "quality_rating": "Good",
            "notes": "Smooth run",
        },
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["end_time"] is not None

    project_now = client.get(f"/api/v1/projects/{project['id']}", headers=admin_headers).json()
    assert project_now["progress"] == 75.0
    worker_now = client.get(f"/api/v1/workers/{worker['id']}", headers=admin_headers).json()
    assert worker_now["active_project_id"] is None

    titles = [n["title"] for n in client.get("/api/v1/notifications/", headers=admin_headers).json()]
    assert "Work Session Completed" in titles


def test_session_cannot_be_completed_twice(client, admin_headers, setup):
    worker, project = setup
    session = client.post(
        "/api/v1/work-sessions/",
        json={"worker_id": worker["id"], "project_id": project["id"]},
        headers=admin_headers,
    ).json()
    url = f"/api/v1/work-sessions/{session['id']}/complete"

    assert client.post(url, json={}, headers=admin_headers).status_code == 200
    assert client.post(url, json={}, headers=admin_headers).status_code == 409


def test_completed_quantities_are_capped(client, admin_headers, setup, db):
    worker, project = setup
    session = client.post(
        "/api/v1/work-sessions/",
        json={"worker_id": worker["id"], "project_id": project["id"]},
        headers=admin_headers,
    ).json()

    session_obj, project_obj, _ = work_session_service.complete_session(
        db,
        session["id"],
        WorkSessionComplete(completed_components=[{"component_id": "arm", "quantity": 10}]),
    )
    assert project_obj.components[0]["quantity_completed"] == 4
    assert project_obj.progress == 100.0


def test_duration_excludes_breaks_and_is_logged(client, admin_headers, setup, db):
    worker, project = setup
    session = client.post(
        "/api/v1/work-sessions/",
        json={"worker_id": worker["id"], "project_id": project["id"]},
        headers=admin_headers,
    ).json()

    # Back-date the start so the session lasted two hours.
    row = db.get(WorkSession, session["id"])
    row.start_time = datetime.utcnow() - timedelta(hours=2)
    db.commit()

    _, _, worker_obj = work_session_service.complete_session(
        db, session["id"], WorkSessionComplete(break_time_seconds=600)
    )
    assert 7190 - 600 <= worker_obj.time_logged_seconds <= 7210 - 600


def test_list_sessions_by_worker(client, admin_headers, setup):
    worker, project = setup
    for _ in range(2):
        client.post(
            "/api/v1/work-sessions/",
            json={"worker_id": worker["id"], "project_id": project["id"]},
            headers=admin_headers,
        )

    resp = client.get(f"/api/v1/work-sessions/?worker_id={worker['id']}", headers=admin_headers)
    assert len(resp.json()) == 2
    assert client.get("/api/v1/work-sessions/?worker_id=other", headers=admin_headers).json() == []
