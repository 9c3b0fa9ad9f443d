# fundiflow/services/work_session_service.py
"""
Work sessions: a worker's timed stint on a project.

Starting a session marks the project as the worker's active project.
Completing it applies the finished component quantities to the project,
adds the session duration to the worker's logged time and clears the
active project.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from fundiflow.core.exceptions import NotFoundError
from fundiflow.models.base import utcnow
from fundiflow.models.project import Project
from fundiflow.models.work_session import WorkSession
from fundiflow.models.worker import Worker
from fundiflow.schemas.work_session import WorkSessionComplete, WorkSessionStart
from fundiflow.services.cached_queries import invalidate_project_cache, invalidate_worker_cache
from fundiflow.services.project_service import apply_completed_components, get_project
from fundiflow.services.worker_service import get_worker


class SessionAlreadyCompletedError(ValueError):
    pass


def start_session(db: Session, payload: WorkSessionStart) -> WorkSession:
    worker = get_worker(db, payload.worker_id)
    project = get_project(db, payload.project_id)

    session = WorkSession(**payload.model_dump(), start_time=utcnow())
    worker.active_project_id = project.id
    if project.status == "Not Started":
        project.status = "In Progress"
        project.updated_at = utcnow()
    db.add(session)
    db.commit()
    db.refresh(session)
    invalidate_worker_cache(worker.id)
    invalidate_project_cache(project.id)
    return session


def get_session(db: Session, session_id: str) -> WorkSession:
    session = db.get(WorkSession, session_id)
    if session is None:
        raise NotFoundError("WorkSession", session_id)
    return session


def complete_session(
    db: Session, session_id: str, payload: WorkSessionComplete
) -> tuple[WorkSession, Project, Worker]:
    session = get_session(db, session_id)
    if session.end_time is not None:
        raise SessionAlreadyCompletedError(f"Work session {session_id} is already completed")

    project = get_project(db, session.project_id)
    worker = get_worker(db, session.worker_id)

    completed = [c.model_dump() for c in payload.completed_components]
    session.end_time = utcnow()
    session.completed_components = completed
    session.quality_rating = payload.quality_rating
    session.notes = payload.notes
    session.break_time_seconds = payload.break_time_seconds

    apply_completed_components(project, completed)
    project.updated_at = utcnow()

    worker.time_logged_seconds = (worker.time_logged_seconds or 0) + session.duration_seconds
    if worker.active_project_id == project.id:
        worker.active_project_id = None

    db.commit()
    db.refresh(session)
    db.refresh(project)
    db.refresh(worker)
    invalidate_worker_cache(worker.id)
    invalidate_project_cache(project.id)
    return session, project, worker


def list_sessions(
    db: Session, project_id: Optional[str] = None, worker_id: Optional[str] = None
) -> List[WorkSession]:
    stmt = select(WorkSession).order_by(WorkSession.start_time.desc())
    if project_id is not None:
        stmt = stmt.where(WorkSession.project_id == project_id)
    if worker_id is not None:
        stmt = stmt.where(WorkSession.worker_id == worker_id)
    return list(db.scalars(stmt))
