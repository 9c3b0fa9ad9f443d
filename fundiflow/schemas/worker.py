# File: fundiflow/schemas/worker.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class WorkerBase(BaseModel):
    name: str = Field(min_length=1)
    email: str = ""
    avatar_url: Optional[str] = None
    skills: List[str] = []
    availability: str = "40 hours/week"
    past_performance: float = Field(default=0.0, ge=0.0, le=1.0)
    user_id: Optional[str] = None
    status: str = "active"


class WorkerCreate(WorkerBase):
    pass


class WorkerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    skills: Optional[List[str]] = None
    availability: Optional[str] = None
    past_performance: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    user_id: Optional[str] = None
    status: Optional[str] = None

    @field_validator("name", "email", "skills", "availability", "past_performance", "status")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class WorkerRead(WorkerBase):
    id: str
    owner_id: Optional[str] = None
    time_logged_seconds: int
    active_project_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
