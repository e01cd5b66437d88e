"""
Project Pydantic schemas for form validation and responses.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from app.models.project import ProjectStatus
from app.schemas.common import UserSummary
from app.schemas.milestone import MilestoneResponse
from app.schemas.deliverable import DeliverableResponse
from app.schemas.validation import empty_to_none, require_reference, check_length


class ProjectForm(BaseModel):
    """Project create/update payload. Updates replace every field."""
    title: str
    description: str
    status: ProjectStatus
    budget: Optional[Decimal] = Field(None, max_digits=15, decimal_places=2)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    client_id: UUID

    @field_validator("budget", "start_date", "end_date", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        return empty_to_none(value)

    @field_validator("client_id", mode="before")
    @classmethod
    def client_required(cls, value):
        return require_reference(value, "Client is required")

    @field_validator("title")
    @classmethod
    def title_length(cls, value: str) -> str:
        return check_length(value, "Title", 3, 100)

    @field_validator("description")
    @classmethod
    def description_length(cls, value: str) -> str:
        return check_length(value, "Description", 10, 5000)

    @field_validator("budget")
    @classmethod
    def budget_not_negative(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is not None and value < 0:
            raise ValueError("Budget must not be negative")
        return value


class ProjectResponse(BaseModel):
    """Schema for project response."""
    id: UUID
    title: str
    description: str
    status: ProjectStatus
    budget: Optional[Decimal] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    client_id: UUID
    client: Optional[UserSummary] = None
    milestone_count: Optional[int] = None
    deliverable_count: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectProgress(BaseModel):
    """Milestone completion figures for a project."""
    completed: int
    total: int
    percent: int


class ProjectDetailResponse(ProjectResponse):
    """Project with its milestones, deliverables and progress."""
    milestones: List[MilestoneResponse] = []
    deliverables: List[DeliverableResponse] = []
    progress: ProjectProgress


class ProjectListResponse(BaseModel):
    """Schema for project list response."""
    items: List[ProjectResponse]
    total: int
