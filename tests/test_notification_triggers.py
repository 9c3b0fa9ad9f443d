# File: tests/test_notification_triggers.py

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from fundiflow.models.notification import Notification
from fundiflow.models.project import Project
from fundiflow.models.user import User
from fundiflow.models.worker import Worker
from fundiflow.services import notification_triggers as triggers
from fundiflow.services.notification_service import update_notification_preferences

NOW = datetime(2026, 3, 10, 12, 0, 0)


@pytest.fixture
def people(db):
    lead = User(email="lead@admin.com", name="Lead", role="admin", hashed_password="x")
    alice = User(email="alice@fundiflow.app", name="Alice", role="assembler", hashed_password="x")
    bob = User(email="bob@fundiflow.app", name="Bob", role="assembler", hashed_password="x")
    db.add_all([lead, alice, bob])
    db.commit()
    worker = Worker(name="Alice", user_id=alice.id)
    db.add(worker)
    db.commit()
    return {"lead": lead, "alice": alice, "bob": bob, "worker": worker}


def make_project(db, owner_id, deadline, status="In Progress", workers=()):
    project = Project(
        owner_id=owner_id,
        name=f"Project due {deadline:%m-%d %H:%M}",
        deadline=deadline,
        status=status,
        assigned_worker_ids=list(workers),
        components=[{"id": "c", "name": "C", "quantity_required": 10, "quantity_completed": 4}],
    )
    db.add(project)
    db.commit()
    return project


def titles_for(db, user_id):
    return [n.title for n in db.scalars(select(Notification).where(Notification.user_id == user_id))]


def test_days_until_rounds_up():
    assert triggers.days_until(NOW + timedelta(hours=1), NOW) == 1
    assert triggers.days_until(NOW + timedelta(days=2), NOW) == 2
    assert triggers.days_until(NOW + timedelta(days=2, minutes=1), NOW) == 3
    assert triggers.days_until(NOW - timedelta(hours=1), NOW) == 0


@pytest.mark.asyncio
async def test_project_created_skips_owner_in_fan_out(db, people):
    project = make_project(db, people["lead"].id, NOW + timedelta(days=30))
    result = await triggers.notify_project_created(db, project)

    assert result.in_app == 2
    assert result.emails == 2
    assert titles_for(db, people["alice"].id) == ["New Project Available"]
    assert titles_for(db, people["lead"].id) == ["Project Created"]


@pytest.mark.asyncio
async def test_email_preferences_are_respected(db, people):
    update_notification_preferences(db, people["bob"].id, {"email_events": {"project_created": False}})
    project = make_project(db, people["lead"].id, NOW + timedelta(days=30))

    result = await triggers.notify_project_created(db, project)
    assert result.in_app == 2
    assert result.emails == 1


@pytest.mark.asyncio
async def test_deadline_approaching_targets_assemblers_and_leads(db, people):
    project = make_project(db, people["lead"].id, NOW + timedelta(days=2), workers=[people["worker"].id])

    counts = await triggers.notify_deadline_approaching(db, project, 2)
    assert counts == {"assemblers_notified": 1, "leads_notified": 1, "emails_sent": 2}
    assert titles_for(db, people["alice"].id) == ["Project Deadline Approaching"]
    assert titles_for(db, people["lead"].id) == ["Project Deadline Alert"]
    assert titles_for(db, people["bob"].id) == []


@pytest.mark.asyncio
async def test_check_upcoming_deadlines_window(db, people):
    owner = people["lead"].id
    make_project(db, owner, NOW + timedelta(hours=5))                       # 1 day
    make_project(db, owner, NOW + timedelta(days=3))                        # 3 days
    make_project(db, owner, NOW + timedelta(days=3, hours=1))               # 4 days
    make_project(db, owner, NOW - timedelta(days=1))                        # overdue
    make_project(db, owner, NOW + timedelta(days=1), status="Completed")
    make_project(db, owner, NOW + timedelta(days=1), status="Archived")

    assert await triggers.check_upcoming_deadlines(db, now=NOW) == 2


@pytest.mark.asyncio
async def test_announcement_audience_excludes_author(db, people):
    result = await triggers.notify_new_announcement(
        db, "a1", "Safety Drill", "Friday at 10.", created_by=people["lead"].id, audience="all"
    )
    assert result.in_app == 2
    assert titles_for(db, people["lead"].id) == []

    result = await triggers.notify_new_announcement(
        db, "a2", "Leads only", "Sync.", created_by=people["alice"].id, audience="leads"
    )
    assert result.in_app == 1
    assert titles_for(db, people["lead"].id) == ["New Announcement"]


@pytest.mark.asyncio
async def test_work_session_completed_notifies_owner(db, people):
    project = make_project(db, people["lead"].id, NOW + timedelta(days=9))
    result = await triggers.notify_work_session_completed(db, project, people["worker"], 1.5, "ok")
    assert result.as_dict() == {"in_app": 1, "emails": 1}
    note = db.scalars(select(Notification).where(Notification.user_id == people["lead"].id)).one()
    assert note.message == (
        'Alice has completed a work session on project "%s". Duration: 1.5 hours. Progress: 40.0%%'
        % project.name
    )


def test_notify_multiple_users_counts_successes(db, people):
    ids = [people["alice"].id, people["bob"].id]
    assert triggers.notify_multiple_users(db, ids, "SYSTEM_UPDATE") == 2
    assert triggers.notify_multiple_users(db, ids, "NOT_A_TEMPLATE") == 0
