# fundiflow/services/worker_service.py

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from fundiflow.core.exceptions import NotFoundError
from fundiflow.models.worker import Worker
from fundiflow.schemas.worker import WorkerCreate
from fundiflow.services.cached_queries import invalidate_worker_cache


def list_workers(db: Session, owner_id: Optional[str] = None) -> List[Worker]:
    stmt = select(Worker).order_by(Worker.name.asc())
    if owner_id is not None:
        stmt = stmt.where(Worker.owner_id == owner_id)
    return list(db.scalars(stmt))


def get_worker(db: Session, worker_id: str) -> Worker:
    worker = db.get(Worker, worker_id)
    if worker is None:
        raise NotFoundError("Worker", worker_id)
    return worker


def create_worker(db: Session, payload: WorkerCreate, owner_id: Optional[str] = None) -> Worker:
    worker = Worker(owner_id=owner_id, **payload.model_dump())
    db.add(worker)
    db.commit()
    db.refresh(worker)
    invalidate_worker_cache()
    return worker


def update_worker(db: Session, worker_id: str, updates: Dict[str, Any]) -> Worker:
    worker = get_worker(db, worker_id)
    for field, value in updates.items():
        setattr(worker, field, value)
    db.commit()
    db.refresh(worker)
    invalidate_worker_cache(worker_id)
    return worker


def delete_worker(db: Session, worker_id: str) -> None:
    worker = get_worker(db, worker_id)
    db.delete(worker)
    db.commit()
    invalidate_worker_cache(worker_id)
