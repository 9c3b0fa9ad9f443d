# File: fundiflow/models/work_session.py

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fundiflow.models.base import Base, new_id, utcnow


class WorkSession(Base):
    __tablename__ = "work_sessions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    worker_id: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    project_id: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    component_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    process: Mapped[str | None] = mapped_column(String(128), nullable=True)

    start_time: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    end_time: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # [{"component_id": ..., "quantity": ...}]
    completed_components: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    quality_rating: Mapped[str | None] = mapped_column(String(32), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    break_time_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    @property
    def duration_seconds(self) -> int:
        if self.end_time is None:
            return 0
        elapsed = int((self.end_time - self.start_time).total_seconds())
        return max(elapsed - (self.break_time_seconds or 0), 0)
