# File: fundiflow/schemas/project.py

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

ProjectStatus = Literal["Not Started", "In Progress", "Completed", "On Hold", "Archived"]
ProjectPriority = Literal["Low", "Medium", "High", "Critical"]


class ComponentSpec(BaseModel):
    id: str
    name: str
    quantity_required: int = Field(ge=0)
    quantity_completed: int = Field(default=0, ge=0)
    available_processes: List[str] = []
    completed_processes: List[str] = []
    image_url: Optional[str] = None
    estimated_time_per_unit: Optional[float] = None  # minutes


class ProjectComment(BaseModel):
    id: str
    user_id: str
    user_name: str
    content: str
    timestamp: datetime


class ProjectBase(BaseModel):
    name: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    description: str = ""
    image_url: str = ""
    documentation_url: Optional[str] = None
    components: List[ComponentSpec] = []
    deadline: datetime
    status: ProjectStatus = "Not Started"
    priority: ProjectPriority = "Medium"
    assigned_worker_ids: List[str] = []
    process_sequence: Optional[List[str]] = None
    template_id: Optional[str] = None


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    quantity: Optional[int] = Field(default=None, ge=1)
    description: Optional[str] = None
    image_url: Optional[str] = None
    documentation_url: Optional[str] = None
    components: Optional[List[ComponentSpec]] = None
    deadline: Optional[datetime] = None
    status: Optional[ProjectStatus] = None
    priority: Optional[ProjectPriority] = None
    process_sequence: Optional[List[str]] = None

    @field_validator(
        "name", "quantity", "description", "image_url", "components",
        "deadline", "status", "priority",
    )
    @classmethod
    def not_null(cls, value):
        # Omit a field to leave it unchanged; these columns cannot be cleared.
        if value is None:
            raise ValueError("may not be null")
        return value


class ProjectRead(ProjectBase):
    id: str
    owner_id: Optional[str] = None
    progress: float
    comments: List[ProjectComment] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AssignWorkerRequest(BaseModel):
    worker_id: str


class CommentCreate(BaseModel):
    content: str = Field(min_length=1)


class CloneProjectRequest(BaseModel):
    name: str = Field(min_length=1)
    deadline: Optional[datetime] = None
