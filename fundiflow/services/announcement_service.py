# fundiflow/services/announcement_service.py

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from fundiflow.models.announcement import Announcement
from fundiflow.schemas.announcement import AnnouncementCreate


def create_announcement(db: Session, payload: AnnouncementCreate, created_by: str) -> Announcement:
    announcement = Announcement(**payload.model_dump(), created_by=created_by)
    db.add(announcement)
    db.commit()
    db.refresh(announcement)
    return announcement


def list_announcements(db: Session, limit: int = 50) -> List[Announcement]:
    stmt = (
        select(Announcement)
        .order_by(Announcement.created_at.desc(), Announcement.id.desc())
        .limit(limit)
    )
    return list(db.scalars(stmt))
