# File: fundiflow/models/worker.py

from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from fundiflow.models.base import Base, new_id, utcnow


class Worker(Base):
    __tablename__ = "workers"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    owner_id: Mapped[str | None] = mapped_column(String(32), index=True, nullable=True)
    # Account of the assembler behind this worker profile, if any
    user_id: Mapped[str | None] = mapped_column(String(32), index=True, nullable=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    skills: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    availability: Mapped[str] = mapped_column(String(64), nullable=False, default="40 hours/week")
    past_performance: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    time_logged_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active_project_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
