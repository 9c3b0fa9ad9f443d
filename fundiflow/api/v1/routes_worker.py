# File: fundiflow/api/v1/routes_worker.py

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from fundiflow.api.deps import get_current_user, get_db, require_writer
from fundiflow.core.exceptions import NotFoundError
from fundiflow.models.user import User
from fundiflow.schemas.worker import WorkerCreate, WorkerRead, WorkerUpdate
from fundiflow.services import worker_service
from fundiflow.services.cached_queries import get_cached_worker_details, get_cached_workers

router = APIRouter()


@router.get("/", response_model=list[WorkerRead], summary="List workers")
def list_workers(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return get_cached_workers(db)


@router.get("/{worker_id}", response_model=WorkerRead, summary="Get worker")
def get_worker(worker_id: str, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    try:
        return get_cached_worker_details(db, worker_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/",
    response_model=WorkerRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create worker",
)
def create_worker(
    payload: WorkerCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_writer),
):
    return worker_service.create_worker(db, payload, owner_id=user.id)


@router.patch("/{worker_id}", response_model=WorkerRead, summary="Update worker")
def update_worker(
    worker_id: str,
    payload: WorkerUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_writer),
):
    try:
        return worker_service.update_worker(db, worker_id, payload.model_dump(exclude_unset=True))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{worker_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete worker")
def delete_worker(
    worker_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_writer),
):
    try:
        worker_service.delete_worker(db, worker_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
