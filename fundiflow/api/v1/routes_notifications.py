# File: fundiflow/api/v1/routes_notifications.py

"""
Notification API routes.

Everything here is scoped to the signed-in user except creating a
notification from a template and the deadline sweep, which are admin
operations.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from fundiflow.api.deps import get_current_user, get_db, require_admin, require_writer
from fundiflow.core.exceptions import NotFoundError, UnknownTemplateError
from fundiflow.models.user import User
from fundiflow.schemas.notification import (
    NotificationCreate,
    NotificationPreferencesRead,
    NotificationPreferencesUpdate,
    NotificationRead,
    UnreadCount,
)
from fundiflow.services import notification_service
from fundiflow.services.notification_triggers import check_upcoming_deadlines

router = APIRouter()


def _own_notification(db: Session, notification_id: str, user: User):
    try:
        notification = notification_service.get_notification(db, notification_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if notification.user_id != user.id:
        raise HTTPException(status_code=404, detail=f"Notification {notification_id} not found")
    return notification


@router.get("/", response_model=list[NotificationRead], summary="List my notifications")
def list_notifications(
    limit: int = 20,
    unread_only: bool = False,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return notification_service.get_user_notifications(
        db, user.id, limit=limit, unread_only=unread_only
    )


@router.get("/unread-count", response_model=UnreadCount, summary="Count unread notifications")
def unread_count(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return UnreadCount(unread=notification_service.get_unread_notification_count(db, user.id))


@router.post(
    "/",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a notification from a template",
)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return notification_service.create_notification(
            db, payload.user_id, payload.template_type, payload.variables, payload.metadata
        )
    except UnknownTemplateError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/read-all", summary="Mark all my notifications as read")
def mark_all_read(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return {"updated": notification_service.mark_all_notifications_as_read(db, user.id)}


@router.post("/check-deadlines", summary="Send deadline reminders")
async def check_deadlines(db: Session = Depends(get_db), _: User = Depends(require_admin)):
    """
    Notify every open project whose deadline falls within the next 3 days.
    """
    return {"projects_notified": await check_upcoming_deadlines(db)}


@router.get(
    "/preferences",
    response_model=NotificationPreferencesRead,
    summary="Get my notification preferences",
)
def get_preferences(db: Session = Depends(get_db), user: User = Depends(require_writer)):
    return notification_service.get_notification_preferences(db, user.id)


@router.put(
    "/preferences",
    response_model=NotificationPreferencesRead,
    summary="Update my notification preferences",
)
def update_preferences(
    payload: NotificationPreferencesUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_writer),
):
    updates = payload.model_dump(exclude_unset=True)
    return notification_service.update_notification_preferences(db, user.id, updates)


@router.post("/{notification_id}/read", response_model=NotificationRead, summary="Mark as read")
def mark_read(
    notification_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _own_notification(db, notification_id, user)
    return notification_service.mark_notification_as_read(db, notification_id)


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a notification",
)
def delete_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _own_notification(db, notification_id, user)
    notification_service.delete_notification(db, notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
