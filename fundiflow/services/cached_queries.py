# fundiflow/services/cached_queries.py
"""
Cached read paths for the dashboard.

Cached values are plain dicts/lists (serialized through the Read schemas)
so they never hold on to a closed Session. Writers call
``invalidate_project_cache`` / ``invalidate_worker_cache``.
"""

from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from fundiflow.core.exceptions import NotFoundError
from fundiflow.models.project import Project
from fundiflow.models.worker import Worker
from fundiflow.schemas.project import ProjectRead
from fundiflow.schemas.worker import WorkerRead
from fundiflow.services.cache import (
    CACHE_KEYS,
    CACHE_TTL,
    create_cache_key,
    invalidate_cache,
    with_cache,
)


def _dump_project(project: Project) -> Dict[str, Any]:
    return ProjectRead.model_validate(project).model_dump(mode="json")


def _dump_worker(worker: Worker) -> Dict[str, Any]:
    return WorkerRead.model_validate(worker).model_dump(mode="json")


@with_cache(
    lambda db, owner_id=None, status=None: create_cache_key(
        CACHE_KEYS.PROJECTS, {"owner_id": owner_id, "status": status}
    ),
    ttl=CACHE_TTL.MEDIUM,
)
def get_cached_projects(
    db: Session, owner_id: Optional[str] = None, status: Optional[str] = None
) -> List[Dict[str, Any]]:
    stmt = select(Project).order_by(Project.created_at.desc())
    if owner_id is not None:
        stmt = stmt.where(Project.owner_id == owner_id)
    if status is not None:
        stmt = stmt.where(Project.status == status)
    return [_dump_project(p) for p in db.scalars(stmt)]


@with_cache(
    lambda db, owner_id=None: create_cache_key(CACHE_KEYS.WORKERS, {"owner_id": owner_id}),
    ttl=CACHE_TTL.MEDIUM,
)
def get_cached_workers(db: Session, owner_id: Optional[str] = None) -> List[Dict[str, Any]]:
    stmt = select(Worker).order_by(Worker.name.asc())
    if owner_id is not None:
        stmt = stmt.where(Worker.owner_id == owner_id)
    return [_dump_worker(w) for w in db.scalars(stmt)]


@with_cache(
    lambda db, project_id: create_cache_key(CACHE_KEYS.PROJECT_DETAILS, {"project_id": project_id}),
    ttl=CACHE_TTL.LONG,
)
def get_cached_project_details(db: Session, project_id: str) -> Dict[str, Any]:
    project = db.get(Project, project_id)
    if project is None:
        raise NotFoundError("Project", project_id)
    return _dump_project(project)


@with_cache(
    lambda db, worker_id: create_cache_key(CACHE_KEYS.WORKER_DETAILS, {"worker_id": worker_id}),
    ttl=CACHE_TTL.LONG,
)
def get_cached_worker_details(db: Session, worker_id: str) -> Dict[str, Any]:
    worker = db.get(Worker, worker_id)
    if worker is None:
        raise NotFoundError("Worker", worker_id)
    return _dump_worker(worker)


@with_cache(
    lambda db, owner_id=None: create_cache_key(CACHE_KEYS.DASHBOARD_STATS, {"owner_id": owner_id}),
    ttl=CACHE_TTL.SHORT,
)
def get_cached_dashboard_stats(db: Session, owner_id: Optional[str] = None) -> Dict[str, Any]:
    projects = get_cached_projects(db, owner_id)
    workers = get_cached_workers(db, owner_id)

    by_status = Counter(p["status"] for p in projects)
    recent_workers = sorted(workers, key=lambda w: w["created_at"], reverse=True)
    return {
        "total_projects": len(projects),
        "active_projects": by_status.get("In Progress", 0),
        "completed_projects": by_status.get("Completed", 0),
        "projects_by_status": dict(by_status),
        "total_workers": len(workers),
        "active_workers": sum(1 for w in workers if w["status"] == "active"),
        "average_progress": round(sum(p["progress"] for p in projects) / len(projects), 2)
        if projects else 0.0,
        "recent_projects": projects[:5],
        "recent_workers": recent_workers[:5],
    }


@with_cache(
    lambda db, start, end, owner_id=None: create_cache_key(
        CACHE_KEYS.REPORT_DATA,
        {"owner_id": owner_id, "start": start.isoformat(), "end": end.isoformat()},
    ),
    ttl=CACHE_TTL.MEDIUM,
)
def get_cached_report_data(
    db: Session, start: datetime, end: datetime, owner_id: Optional[str] = None
) -> Dict[str, Any]:
    projects = [
        p for p in get_cached_projects(db, owner_id)
        if start <= datetime.fromisoformat(p["created_at"]) <= end
    ]
    workers = get_cached_workers(db, owner_id)

    by_month = Counter(p["created_at"][:7] for p in projects)
    return {
        "projects": projects,
        "workers": workers,
        "projects_by_status": dict(Counter(p["status"] for p in projects)),
        "projects_by_month": dict(sorted(by_month.items())),
        "total_quantity": sum(p["quantity"] for p in projects),
        "average_progress": round(sum(p["progress"] for p in projects) / len(projects), 2)
        if projects else 0.0,
    }


def invalidate_project_cache(project_id: Optional[str] = None) -> int:
    removed = invalidate_cache(CACHE_KEYS.PROJECTS + ":")
    removed += invalidate_cache(CACHE_KEYS.DASHBOARD_STATS)
    removed += invalidate_cache(CACHE_KEYS.REPORT_DATA)
    if project_id:
        removed += invalidate_cache(
            create_cache_key(CACHE_KEYS.PROJECT_DETAILS, {"project_id": project_id})
        )
    return removed


def invalidate_worker_cache(worker_id: Optional[str] = None) -> int:
    removed = invalidate_cache(CACHE_KEYS.WORKERS + ":")
    removed += invalidate_cache(CACHE_KEYS.DASHBOARD_STATS)
    removed += invalidate_cache(CACHE_KEYS.REPORT_DATA)
    if worker_id:
        removed += invalidate_cache(
            create_cache_key(CACHE_KEYS.WORKER_DETAILS, {"worker_id": worker_id})
        )
    return removed
