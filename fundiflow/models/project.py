# File: fundiflow/models/project.py

"""
Project model.

Components, comments, assigned worker ids and the process sequence are
stored as JSON lists; they are always replaced wholesale on update.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fundiflow.models.base import Base, new_id, utcnow


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    owner_id: Mapped[str | None] = mapped_column(String(32), index=True, nullable=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    documentation_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    components: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    deadline: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="Not Started")
    priority: Mapped[str] = mapped_column(String(16), nullable=False, default="Medium")
    assigned_worker_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    process_sequence: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    template_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    comments: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    @property
    def progress(self) -> float:
        """Completion percentage (0-100) across all components."""
        required = sum(int(c.get("quantity_required", 0)) for c in self.components or [])
        if required <= 0:
            return 100.0 if self.status == "Completed" else 0.0
        completed = sum(
            min(int(c.get("quantity_completed", 0)), int(c.get("quantity_required", 0)))
            for c in self.components
        )
        return round(completed / required * 100, 2)
