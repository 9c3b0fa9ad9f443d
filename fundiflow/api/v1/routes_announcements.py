# File: fundiflow/api/v1/routes_announcements.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fundiflow.api.deps import get_current_user, get_db, require_admin
from fundiflow.models.user import User
from fundiflow.schemas.announcement import AnnouncementCreate, AnnouncementRead
from fundiflow.services import announcement_service
from fundiflow.services.notification_triggers import notify_new_announcement

router = APIRouter()


@router.get("/", response_model=list[AnnouncementRead], summary="List announcements")
def list_announcements(
    limit: int = 50,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return announcement_service.list_announcements(db, limit=limit)


@router.post(
    "/",
    response_model=AnnouncementRead,
    status_code=status.HTTP_201_CREATED,
    summary="Post an announcement",
)
async def create_announcement(
    payload: AnnouncementCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    """
    Store the announcement and notify its audience (the author is skipped).
    """
    announcement = announcement_service.create_announcement(db, payload, created_by=user.id)
    await notify_new_announcement(
        db,
        announcement.id,
        announcement.title,
        announcement.content,
        created_by=user.id,
        audience=announcement.audience,
    )
    return announcement
