# File: fundiflow/api/v1/routes_work_sessions.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from fundiflow.api.deps import get_current_user, get_db, require_writer
from fundiflow.core.exceptions import NotFoundError
from fundiflow.models.user import User
from fundiflow.schemas.work_session import WorkSessionComplete, WorkSessionRead, WorkSessionStart
from fundiflow.services import notification_triggers, work_session_service
from fundiflow.services.work_session_service import SessionAlreadyCompletedError

router = APIRouter()


@router.get("/", response_model=list[WorkSessionRead], summary="List work sessions")
def list_sessions(
    project_id: Optional[str] = None,
    worker_id: Optional[str] = None,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return work_session_service.list_sessions(db, project_id=project_id, worker_id=worker_id)


@router.get("/{session_id}", response_model=WorkSessionRead, summary="Get work session")
def get_session(session_id: str, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    try:
        return work_session_service.get_session(db, session_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/",
    response_model=WorkSessionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Start a work session",
)
def start_session(
    payload: WorkSessionStart,
    db: Session = Depends(get_db),
    _: User = Depends(require_writer),
):
    try:
        return work_session_service.start_session(db, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/{session_id}/complete",
    response_model=WorkSessionRead,
    summary="Complete a work session",
)
async def complete_session(
    session_id: str,
    payload: WorkSessionComplete,
    db: Session = Depends(get_db),
    _: User = Depends(require_writer),
):
    """
    Close the session, apply the finished quantities to the project and
    notify the project lead.
    """
    try:
        session, project, worker = work_session_service.complete_session(db, session_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SessionAlreadyCompletedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    duration_hours = round(session.duration_seconds / 3600, 2)
    await notification_triggers.notify_work_session_completed(
        db, project, worker, duration_hours, notes=session.notes
    )
    return session
