# fundiflow/services/project_service.py
"""
Project CRUD.

Every write invalidates the cached project reads. Notification fan-out is
left to the route layer so these helpers stay synchronous.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from fundiflow.core.exceptions import NotFoundError
from fundiflow.models.base import new_id, to_naive_utc, utcnow
from fundiflow.models.project import Project
from fundiflow.models.user import User
from fundiflow.models.worker import Worker
from fundiflow.schemas.project import ProjectCreate
from fundiflow.services.cached_queries import invalidate_project_cache, invalidate_worker_cache


def list_projects(
    db: Session, owner_id: Optional[str] = None, status: Optional[str] = None
) -> List[Project]:
    stmt = select(Project).order_by(Project.created_at.desc())
    if owner_id is not None:
        stmt = stmt.where(Project.owner_id == owner_id)
    if status is not None:
        stmt = stmt.where(Project.status == status)
    return list(db.scalars(stmt))


def get_project(db: Session, project_id: str) -> Project:
    project = db.get(Project, project_id)
    if project is None:
        raise NotFoundError("Project", project_id)
    return project


def create_project(db: Session, payload: ProjectCreate, owner_id: Optional[str] = None) -> Project:
    data = payload.model_dump()
    data["deadline"] = to_naive_utc(payload.deadline)
    project = Project(owner_id=owner_id, **data)
    db.add(project)
    db.commit()
    db.refresh(project)
    invalidate_project_cache()
    return project


def update_project(db: Session, project_id: str, updates: Dict[str, Any]) -> Project:
    """
    Apply a partial update.

    ``updates`` holds only the fields the caller set; components must already
    be plain dicts.
    """
    project = get_project(db, project_id)
    for field, value in updates.items():
        if field == "deadline" and value is not None:
            value = to_naive_utc(value)
        setattr(project, field, value)
    project.updated_at = utcnow()
    db.commit()
    db.refresh(project)
    invalidate_project_cache(project_id)
    return project


def delete_project(db: Session, project_id: str) -> None:
    project = get_project(db, project_id)
    db.delete(project)
    db.commit()
    invalidate_project_cache(project_id)


def assign_worker(db: Session, project_id: str, worker_id: str) -> tuple[Project, Worker, bool]:
    """
    Add ``worker_id`` to the project's assigned workers.

    Returns (project, worker, newly_assigned).
    """
    project = get_project(db, project_id)
    worker = db.get(Worker, worker_id)
    if worker is None:
        raise NotFoundError("Worker", worker_id)

    if worker_id in project.assigned_worker_ids:
        return project, worker, False

    project.assigned_worker_ids = [*project.assigned_worker_ids, worker_id]
    project.updated_at = utcnow()
    db.commit()
    db.refresh(project)
    invalidate_project_cache(project_id)
    invalidate_worker_cache(worker_id)
    return project, worker, True


def add_comment(db: Session, project_id: str, user: User, content: str) -> Project:
    project = get_project(db, project_id)
    comment = {
        "id": new_id(),
        "user_id": user.id,
        "user_name": user.display_name,
        "content": content,
        "timestamp": utcnow().isoformat(),
    }
    project.comments = [*project.comments, comment]
    project.updated_at = utcnow()
    db.commit()
    db.refresh(project)
    invalidate_project_cache(project_id)
    return project


def clone_project(
    db: Session, project_id: str, name: str, owner_id: Optional[str] = None, deadline=None
) -> Project:
    """Copy a project's definition with completion and assignments reset."""
    source = get_project(db, project_id)
    components = [
        {**c, "quantity_completed": 0, "completed_processes": []}
        for c in source.components
    ]
    clone = Project(
        owner_id=owner_id or source.owner_id,
        name=name,
        quantity=source.quantity,
        description=source.description,
        image_url=source.image_url,
        documentation_url=source.documentation_url,
        components=components,
        deadline=to_naive_utc(deadline) if deadline else source.deadline,
        status="Not Started",
        priority=source.priority,
        assigned_worker_ids=[],
        process_sequence=list(source.process_sequence) if source.process_sequence else None,
        template_id=source.template_id,
        comments=[],
    )
    db.add(clone)
    db.commit()
    db.refresh(clone)
    invalidate_project_cache()
    return clone


def apply_completed_components(project: Project, completed: List[Dict[str, Any]]) -> None:
    """Add completed quantities to the matching components, capped at the required amount."""
    done = {}
    for item in completed:
        done[item["component_id"]] = done.get(item["component_id"], 0) + int(item["quantity"])

    components = []
    for c in project.components:
        extra = done.get(c["id"], 0)
        if extra:
            c = {**c, "quantity_completed": min(c["quantity_completed"] + extra, c["quantity_required"])}
        components.append(c)
    project.components = components
