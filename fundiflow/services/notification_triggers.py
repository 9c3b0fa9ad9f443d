# fundiflow/services/notification_triggers.py
"""
Business-event notifications.

Each trigger writes in-app notifications and sends the matching emails.
Triggers never raise: a failure is logged and the returned counts reflect
what was actually delivered, so the operation that fired the trigger is
never rolled back because of a notification problem.
"""

import logging
import math
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from fundiflow.models.base import utcnow
from fundiflow.models.project import Project
from fundiflow.models.user import User
from fundiflow.models.worker import Worker
from fundiflow.services import email_service
from fundiflow.services.notification_service import create_notification

logger = logging.getLogger(__name__)

DEADLINE_WINDOW_DAYS = 3


@dataclass
class FanOutResult:
    in_app: int = 0
    emails: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def _user_ids_with_role(db: Session, role: str) -> List[str]:
    return list(db.scalars(select(User.id).where(User.role == role)))


def _project_metadata(project_id: str, label: str = "View Project") -> Dict[str, Any]:
    return {
        "project_id": project_id,
        "action_url": f"/dashboard/projects/{project_id}",
        "action_label": label,
    }


def _notify_each(
    db: Session,
    user_ids: List[str],
    template_type: str,
    variables: Dict[str, Any],
    metadata: Optional[Dict[str, Any]] = None,
) -> int:
    created = 0
    for user_id in user_ids:
        try:
            create_notification(db, user_id, template_type, variables, metadata)
            created += 1
        except Exception:
            db.rollback()
            logger.exception("[NOTIFY] %s for user %s failed", template_type, user_id)
    return created


def notify_multiple_users(
    db: Session,
    user_ids: List[str],
    template_type: str,
    variables: Optional[Dict[str, Any]] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> int:
    return _notify_each(db, user_ids, template_type, variables or {}, metadata)


async def notify_project_created(db: Session, project: Project) -> FanOutResult:
    """Tell every assembler a project is available, and confirm to its owner."""
    result = FanOutResult()
    assembler_ids = [uid for uid in _user_ids_with_role(db, "assembler") if uid != project.owner_id]
    variables = {"projectName": project.name}

    result.in_app = _notify_each(
        db, assembler_ids, "PROJECT_CREATED_FOR_ASSEMBLERS", variables, _project_metadata(project.id)
    )
    if project.owner_id:
        _notify_each(db, [project.owner_id], "PROJECT_CREATED", variables, _project_metadata(project.id))
    try:
        result.emails = await email_service.send_project_created_email(
            db, assembler_ids, project.name, project.id
        )
    except Exception:
        logger.exception("[NOTIFY] Project-created emails for %s failed", project.id)

    logger.info("[NOTIFY] Project created %s: %s", project.name, result.as_dict())
    return result


async def notify_project_assigned(db: Session, project: Project, worker: Worker) -> FanOutResult:
    """Tell the assigned assembler (if the worker has an account) and the project owner."""
    result = FanOutResult()
    if worker.user_id:
        result.in_app = _notify_each(
            db, [worker.user_id], "PROJECT_ASSIGNED_TO_ASSEMBLER",
            {"projectName": project.name}, _project_metadata(project.id),
        )
        try:
            if await email_service.send_project_assigned_email(
                db, worker.user_id, worker.name, project.name, project.id
            ):
                result.emails = 1
        except Exception:
            logger.exception("[NOTIFY] Assignment email for worker %s failed", worker.id)

    if project.owner_id:
        meta = _project_metadata(project.id, "View Assignment")
        meta["worker_id"] = worker.id
        _notify_each(
            db, [project.owner_id], "WORKER_ASSIGNED",
            {"workerName": worker.name, "projectName": project.name}, meta,
        )
    return result


async def notify_work_session_completed(
    db: Session,
    project: Project,
    worker: Worker,
    duration_hours: float,
    notes: Optional[str] = None,
) -> FanOutResult:
    result = FanOutResult()
    lead_id = project.owner_id
    if not lead_id:
        return result

    progress = project.progress
    result.in_app = _notify_each(
        db, [lead_id], "WORK_SESSION_COMPLETED",
        {
            "assemblerName": worker.name,
            "projectName": project.name,
            "duration": duration_hours,
            "progress": progress,
        },
        {**_project_metadata(project.id), "worker_id": worker.id},
    )
    try:
        if await email_service.send_work_session_completed_email(
            db, lead_id, worker.name, project.name, project.id, duration_hours, progress, notes
        ):
            result.emails = 1
    except Exception:
        logger.exception("[NOTIFY] Work-session email for project %s failed", project.id)
    return result


def notify_project_completed(db: Session, project: Project) -> int:
    if not project.owner_id:
        return 0
    return _notify_each(
        db, [project.owner_id], "PROJECT_COMPLETED",
        {"projectName": project.name}, _project_metadata(project.id),
    )


def _assigned_assembler_user_ids(db: Session, project: Project) -> List[str]:
    if not project.assigned_worker_ids:
        return []
    return [
        uid for uid in db.scalars(
            select(Worker.user_id).where(Worker.id.in_(project.assigned_worker_ids))
        )
        if uid
    ]


async def notify_deadline_approaching(
    db: Session, project: Project, days_until_deadline: int
) -> Dict[str, int]:
    """Remind the assigned assemblers and alert every admin."""
    progress = project.progress
    variables = {"projectName": project.name, "days": days_until_deadline, "progress": progress}
    meta = _project_metadata(project.id)
    meta["days_until_deadline"] = days_until_deadline

    assembler_ids = _assigned_assembler_user_ids(db, project)
    lead_ids = [uid for uid in _user_ids_with_role(db, "admin") if uid not in assembler_ids]

    assemblers_notified = _notify_each(
        db, assembler_ids, "PROJECT_DEADLINE_APPROACHING_ASSEMBLERS", variables, meta
    )
    leads_notified = _notify_each(db, lead_ids, "PROJECT_DEADLINE_APPROACHING_LEADS", variables, meta)

    emails_sent = 0
    try:
        emails_sent = await email_service.send_deadline_approaching_emails(
            db,
            assembler_ids + lead_ids,
            project.name,
            project.id,
            days_until_deadline,
            progress,
            [True] * len(assembler_ids) + [False] * len(lead_ids),
        )
    except Exception:
        logger.exception("[NOTIFY] Deadline emails for project %s failed", project.id)

    return {
        "assemblers_notified": assemblers_notified,
        "leads_notified": leads_notified,
        "emails_sent": emails_sent,
    }


def _audience_user_ids(db: Session, audience: str) -> List[str]:
    stmt = select(User.id).where(User.role != "guest")
    if audience == "assemblers":
        stmt = select(User.id).where(User.role == "assembler")
    elif audience == "leads":
        stmt = select(User.id).where(User.role == "admin")
    return list(db.scalars(stmt))


async def notify_new_announcement(
    db: Session,
    announcement_id: str,
    title: str,
    content: str,
    created_by: str,
    audience: str = "all",
) -> FanOutResult:
    result = FanOutResult()
    user_ids = [uid for uid in _audience_user_ids(db, audience) if uid != created_by]
    result.in_app = _notify_each(
        db, user_ids, "NEW_ANNOUNCEMENT", {"announcementTitle": title},
        {
            "announcement_id": announcement_id,
            "action_url": f"/dashboard/announcements/{announcement_id}",
            "action_label": "Read Announcement",
        },
    )
    try:
        result.emails = await email_service.send_announcement_emails(
            db, user_ids, title, content, announcement_id
        )
    except Exception:
        logger.exception("[NOTIFY] Announcement emails for %s failed", announcement_id)
    return result


def days_until(deadline: datetime, now: datetime) -> int:
    """Whole days remaining, rounded up."""
    return math.ceil((deadline - now).total_seconds() / 86400)


async def check_upcoming_deadlines(db: Session, now: Optional[datetime] = None) -> int:
    """
    Notify every open project whose deadline is 0-3 days away.

    Returns the number of projects notified.
    """
    now = now or utcnow()
    projects = db.scalars(
        select(Project).where(Project.status.not_in(("Completed", "Archived")))
    ).all()

    notified = 0
    for project in projects:
        days = days_until(project.deadline, now)
        if 0 <= days <= DEADLINE_WINDOW_DAYS:
            await notify_deadline_approaching(db, project, days)
            notified += 1

    logger.info("[NOTIFY] Deadline check complete: %d projects notified", notified)
    return notified
