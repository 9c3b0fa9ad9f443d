# File: fundiflow/schemas/work_session.py

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class CompletedComponent(BaseModel):
    component_id: str
    quantity: int = Field(ge=0)


class WorkSessionStart(BaseModel):
    worker_id: str
    project_id: str
    component_id: Optional[str] = None
    process: Optional[str] = None


class WorkSessionComplete(BaseModel):
    completed_components: List[CompletedComponent] = []
    quality_rating: Optional[Literal["Good", "Needs Rework", "Defective"]] = None
    notes: Optional[str] = None
    break_time_seconds: int = Field(default=0, ge=0)


class WorkSessionRead(BaseModel):
    id: str
    worker_id: str
    project_id: str
    component_id: Optional[str] = None
    process: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    completed_components: List[CompletedComponent] = []
    quality_rating: Optional[str] = None
    notes: Optional[str] = None
    break_time_seconds: int = 0
    duration_seconds: int = 0

    class Config:
        from_attributes = True
