# File: fundiflow/schemas/announcement.py

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

Audience = Literal["all", "assemblers", "leads"]


class AnnouncementCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    audience: Audience = "all"


class AnnouncementRead(AnnouncementCreate):
    id: str
    created_by: str
    created_at: datetime

    class Config:
        from_attributes = True
