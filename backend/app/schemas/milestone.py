"""
Milestone Pydantic schemas.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime
from uuid import UUID

from app.schemas.validation import empty_to_none, require_reference, check_length


class MilestoneForm(BaseModel):
    """Milestone create/update payload."""
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    order: int = Field(0, ge=0)
    project_id: UUID

    @field_validator("description", "due_date", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        return empty_to_none(value)

    @field_validator("project_id", mode="before")
    @classmethod
    def project_required(cls, value):
        return require_reference(value, "Project is required")

    @field_validator("title")
    @classmethod
    def title_length(cls, value: str) -> str:
        return check_length(value, "Title", 3, 100)


class ReorderMilestonesRequest(BaseModel):
    """Milestone ids in their new display order."""
    milestone_ids: List[UUID]


class MilestoneResponse(BaseModel):
    """Schema for milestone response."""
    id: UUID
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    completed_at: Optional[datetime] = None
    is_completed: bool
    order: int
    project_id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MilestoneListResponse(BaseModel):
    items: List[MilestoneResponse]
    total: int
