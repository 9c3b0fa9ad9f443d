# fundiflow/services/notification_service.py
"""
In-app notification records: templates, CRUD, preferences and
subscriptions.

Notifications are rendered from NOTIFICATION_TEMPLATES at creation time.
Subscribers registered on ``notification_hub`` receive a user's current
notification list whenever one of that user's records changes.
"""

import logging
import re
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from fundiflow.core.exceptions import NotFoundError, UnknownTemplateError
from fundiflow.models.base import utcnow
from fundiflow.models.notification import (
    DEFAULT_CATEGORIES,
    DEFAULT_EMAIL_EVENTS,
    DEFAULT_QUIET_HOURS,
    Notification,
    NotificationPreferences,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationTemplate:
    type: str
    title: str
    message: str
    category: str
    priority: str  # low / medium / high


def _t(type_: str, title: str, message: str, category: str, priority: str) -> NotificationTemplate:
    return NotificationTemplate(type_, title, message, category, priority)


NOTIFICATION_TEMPLATES: Dict[str, NotificationTemplate] = {
    t.type: t
    for t in [
        # Assembler-facing project events
        _t("PROJECT_CREATED_FOR_ASSEMBLERS", "New Project Available",
           'A new project "{projectName}" has been created and is available for assignment.',
           "project", "medium"),
        _t("PROJECT_ASSIGNED_TO_ASSEMBLER", "Project Assigned to You",
           'You have been assigned to work on project "{projectName}". '
           "Please review the project details and start your work session.",
           "project", "high"),
        _t("WORK_SESSION_COMPLETED", "Work Session Completed",
           '{assemblerName} has completed a work session on project "{projectName}". '
           "Duration: {duration} hours. Progress: {progress}%",
           "worker", "high"),
        _t("PROJECT_DEADLINE_APPROACHING_ASSEMBLERS", "Project Deadline Approaching",
           'Project "{projectName}" is due in {days} days. Please ensure your work is completed on time.',
           "reminder", "high"),
        _t("PROJECT_DEADLINE_APPROACHING_LEADS", "Project Deadline Alert",
           'Project "{projectName}" is due in {days} days. Current progress: {progress}%. '
           "Please review and take necessary actions.",
           "reminder", "high"),
        _t("NEW_ANNOUNCEMENT", "New Announcement",
           'New announcement from project lead: "{announcementTitle}". Click to read the full message.',
           "system", "medium"),
        # Owner-facing events
        _t("PROJECT_CREATED", "Project Created",
           'Project "{projectName}" has been successfully created.', "project", "medium"),
        _t("PROJECT_COMPLETED", "Project Completed",
           'Project "{projectName}" has been marked as completed.', "project", "high"),
        _t("WORKER_ASSIGNED", "Worker Assigned",
           '{workerName} has been assigned to project "{projectName}".', "worker", "medium"),
        _t("PAYMENT_DUE", "Payment Due",
           'Payment of ${amount} is due for project "{projectName}".', "payment", "high"),
        _t("PAYMENT_RECEIVED", "Payment Received",
           'Payment of ${amount} has been received for project "{projectName}".', "payment", "medium"),
        _t("SYSTEM_UPDATE", "System Update",
           "FundiFlow has been updated with new features and improvements.", "system", "low"),
    ]
}

_PRIORITY_TO_TYPE = {"high": "warning", "low": "info", "medium": "success"}

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def fill_placeholders(text: str, variables: Dict[str, Any]) -> str:
    """Replace ``{name}`` with ``variables[name]``; unknown placeholders stay as-is."""
    def repl(match: re.Match) -> str:
        key = match.group(1)
        return str(variables[key]) if key in variables else match.group(0)

    return _PLACEHOLDER.sub(repl, text)


# ----------------------------------------------------
# Subscriptions
# ----------------------------------------------------

Listener = Callable[[List[Notification]], None]


class NotificationHub:
    """Per-user listener registry fed after every notification write."""

    def __init__(self, limit: int = 20):
        self.limit = limit
        self._listeners: Dict[str, List[Listener]] = {}
        self._lock = threading.Lock()

    def subscribe(self, user_id: str, callback: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.setdefault(user_id, []).append(callback)

        def unsubscribe() -> None:
            with self._lock:
                listeners = self._listeners.get(user_id, [])
                if callback in listeners:
                    listeners.remove(callback)
                if not listeners:
                    self._listeners.pop(user_id, None)

        return unsubscribe

    def has_listeners(self, user_id: str) -> bool:
        with self._lock:
            return bool(self._listeners.get(user_id))

    def publish(self, db: Session, user_id: str) -> None:
        with self._lock:
            listeners = list(self._listeners.get(user_id, []))
        if not listeners:
            return
        snapshot = get_user_notifications(db, user_id, limit=self.limit)
        for callback in listeners:
            try:
                callback(snapshot)
            except Exception:
                logger.exception("[NOTIFY] Listener for user %s failed", user_id)


notification_hub = NotificationHub()


# ----------------------------------------------------
# CRUD
# ----------------------------------------------------

def create_notification(
    db: Session,
    user_id: str,
    template_type: str,
    variables: Optional[Dict[str, Any]] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Notification:
    """
    Render ``template_type`` with ``variables`` and store it for ``user_id``.

    ``action_url`` / ``action_label`` in metadata are lifted onto the record.
    """
    template = NOTIFICATION_TEMPLATES.get(template_type)
    if template is None:
        raise UnknownTemplateError(template_type)

    variables = variables or {}
    meta = dict(metadata or {})
    now = utcnow()
    notification = Notification(
        user_id=user_id,
        title=fill_placeholders(template.title, variables),
        message=fill_placeholders(template.message, variables),
        type=_PRIORITY_TO_TYPE[template.priority],
        category=template.category,
        is_read=False,
        action_url=meta.pop("action_url", None),
        action_label=meta.pop("action_label", None),
        meta=meta or None,
        created_at=now,
        updated_at=now,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)

    notification_hub.publish(db, user_id)
    return notification


def get_user_notifications(
    db: Session,
    user_id: str,
    limit: int = 20,
    unread_only: bool = False,
) -> List[Notification]:
    stmt = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.is_read.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
    return list(db.scalars(stmt))


def get_notification(db: Session, notification_id: str) -> Notification:
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise NotFoundError("Notification", notification_id)
    return notification


def mark_notification_as_read(db: Session, notification_id: str) -> Notification:
    notification = get_notification(db, notification_id)
    notification.is_read = True
    notification.updated_at = utcnow()
    db.commit()
    db.refresh(notification)
    notification_hub.publish(db, notification.user_id)
    return notification


def mark_all_notifications_as_read(db: Session, user_id: str) -> int:
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True, updated_at=utcnow())
    )
    db.commit()
    if result.rowcount:
        notification_hub.publish(db, user_id)
    return result.rowcount or 0


def delete_notification(db: Session, notification_id: str) -> None:
    notification = get_notification(db, notification_id)
    user_id = notification.user_id
    db.delete(notification)
    db.commit()
    notification_hub.publish(db, user_id)


def get_unread_notification_count(db: Session, user_id: str) -> int:
    return db.scalar(
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
    ) or 0


# ----------------------------------------------------
# Preferences
# ----------------------------------------------------

def get_notification_preferences(db: Session, user_id: str) -> NotificationPreferences:
    """Return the user's preferences, creating the defaults on first access."""
    prefs = db.scalars(
        select(NotificationPreferences).where(NotificationPreferences.user_id == user_id)
    ).first()
    if prefs is not None:
        return prefs

    prefs = NotificationPreferences(
        user_id=user_id,
        email_notifications=True,
        push_notifications=True,
        categories=dict(DEFAULT_CATEGORIES),
        frequency="immediate",
        quiet_hours=dict(DEFAULT_QUIET_HOURS),
        email_events=dict(DEFAULT_EMAIL_EVENTS),
    )
    db.add(prefs)
    db.commit()
    db.refresh(prefs)
    return prefs


def update_notification_preferences(
    db: Session, user_id: str, updates: Dict[str, Any]
) -> NotificationPreferences:
    prefs = get_notification_preferences(db, user_id)
    for field in ("email_notifications", "push_notifications", "frequency"):
        if updates.get(field) is not None:
            setattr(prefs, field, updates[field])
    # Map columns are merged so partial updates keep the other keys.
    for field in ("categories", "quiet_hours", "email_events"):
        if updates.get(field) is not None:
            setattr(prefs, field, {**getattr(prefs, field), **updates[field]})
    db.commit()
    db.refresh(prefs)
    return prefs
