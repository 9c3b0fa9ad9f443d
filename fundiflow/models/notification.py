# File: fundiflow/models/notification.py

"""
Notification records and per-user notification preferences.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fundiflow.models.base import Base, new_id, utcnow


DEFAULT_CATEGORIES = {
    "project": True,
    "worker": True,
    "payment": True,
    "system": True,
    "reminder": True,
}

DEFAULT_QUIET_HOURS = {"enabled": False, "start": "22:00", "end": "08:00"}

DEFAULT_EMAIL_EVENTS = {
    "project_created": True,
    "project_assigned": True,
    "work_session_completed": True,
    "deadline_approaching": True,
    "announcements": True,
}


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(32), index=True, nullable=False)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False, default="info")
    category: Mapped[str] = mapped_column(String(16), nullable=False, default="system")
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    action_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    action_label: Mapped[str | None] = mapped_column(String(128), nullable=True)
    # "metadata" is reserved on declarative classes
    meta: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class NotificationPreferences(Base):
    __tablename__ = "notification_preferences"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)

    email_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    push_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    categories: Mapped[dict[str, bool]] = mapped_column(
        JSON, nullable=False, default=lambda: dict(DEFAULT_CATEGORIES)
    )
    frequency: Mapped[str] = mapped_column(String(16), nullable=False, default="immediate")
    quiet_hours: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=lambda: dict(DEFAULT_QUIET_HOURS)
    )
    email_events: Mapped[dict[str, bool]] = mapped_column(
        JSON, nullable=False, default=lambda: dict(DEFAULT_EMAIL_EVENTS)
    )
