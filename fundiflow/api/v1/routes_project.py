# File: fundiflow/api/v1/routes_project.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from fundiflow.api.deps import get_current_user, get_db, require_writer
from fundiflow.core.exceptions import NotFoundError
from fundiflow.models.user import User
from fundiflow.schemas.project import (
    AssignWorkerRequest,
    CloneProjectRequest,
    CommentCreate,
    ProjectCreate,
    ProjectRead,
    ProjectStatus,
    ProjectUpdate,
)
from fundiflow.services import notification_triggers, project_service
from fundiflow.services.cached_queries import get_cached_project_details, get_cached_projects

router = APIRouter()


@router.get("/", response_model=list[ProjectRead], summary="List projects")
def list_projects(
    status_filter: Optional[ProjectStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    """
    Newest first. ``?status=`` narrows to one status.
    """
    return get_cached_projects(db, status=status_filter)


@router.get("/{project_id}", response_model=ProjectRead, summary="Get project")
def get_project(project_id: str, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    try:
        return get_cached_project_details(db, project_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
)
async def create_project(
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_writer),
):
    """
    Create a project owned by the caller and notify every assembler.
    """
    project = project_service.create_project(db, payload, owner_id=user.id)
    await notification_triggers.notify_project_created(db, project)
    return project


@router.patch("/{project_id}", response_model=ProjectRead, summary="Update project")
def update_project(
    project_id: str,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_writer),
):
    try:
        previous_status = project_service.get_project(db, project_id).status
        project = project_service.update_project(
            db, project_id, payload.model_dump(exclude_unset=True)
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if project.status == "Completed" and previous_status != "Completed":
        notification_triggers.notify_project_completed(db, project)
    return project


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete project")
def delete_project(
    project_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_writer),
):
    try:
        project_service.delete_project(db, project_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{project_id}/assign", response_model=ProjectRead, summary="Assign a worker")
async def assign_worker(
    project_id: str,
    payload: AssignWorkerRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_writer),
):
    """
    Add a worker to the project. Re-assigning an already assigned worker is a
    no-op and sends no notification.
    """
    try:
        project, worker, newly_assigned = project_service.assign_worker(
            db, project_id, payload.worker_id
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if newly_assigned:
        await notification_triggers.notify_project_assigned(db, project, worker)
    return project


@router.post("/{project_id}/comments", response_model=ProjectRead, summary="Comment on a project")
def add_comment(
    project_id: str,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_writer),
):
    try:
        return project_service.add_comment(db, project_id, user, payload.content)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/{project_id}/clone",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Clone a project",
)
def clone_project(
    project_id: str,
    payload: CloneProjectRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_writer),
):
    try:
        return project_service.clone_project(
            db, project_id, payload.name, owner_id=user.id, deadline=payload.deadline
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
