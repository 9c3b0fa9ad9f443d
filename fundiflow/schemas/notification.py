# File: fundiflow/schemas/notification.py

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

NotificationType = Literal["info", "success", "warning", "error"]
NotificationCategory = Literal["project", "worker", "payment", "system", "reminder"]


class NotificationRead(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    category: NotificationCategory
    is_read: bool
    action_url: Optional[str] = None
    action_label: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(default=None, validation_alias="meta")
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class NotificationCreate(BaseModel):
    user_id: str
    template_type: str
    variables: Dict[str, Any] = {}
    metadata: Optional[Dict[str, Any]] = None


class QuietHours(BaseModel):
    enabled: bool = False
    start: str = Field(default="22:00", pattern=r"^\d{2}:\d{2}$")
    end: str = Field(default="08:00", pattern=r"^\d{2}:\d{2}$")


class NotificationPreferencesRead(BaseModel):
    id: str
    user_id: str
    email_notifications: bool
    push_notifications: bool
    categories: Dict[str, bool]
    frequency: Literal["immediate", "daily", "weekly"]
    quiet_hours: QuietHours
    email_events: Dict[str, bool]

    class Config:
        from_attributes = True


class NotificationPreferencesUpdate(BaseModel):
    email_notifications: Optional[bool] = None
    push_notifications: Optional[bool] = None
    categories: Optional[Dict[str, bool]] = None
    frequency: Optional[Literal["immediate", "daily", "weekly"]] = None
    quiet_hours: Optional[QuietHours] = None
    email_events: Optional[Dict[str, bool]] = None


class UnreadCount(BaseModel):
    unread: int
