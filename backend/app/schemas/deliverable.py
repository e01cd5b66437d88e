"""
Deliverable Pydantic schemas.
"""

from pydantic import AnyUrl, BaseModel, TypeAdapter, ValidationError, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from app.schemas.validation import empty_to_none, require_reference, check_length

_url_adapter = TypeAdapter(AnyUrl)


class DeliverableForm(BaseModel):
    """Deliverable create/update payload. ``file_url`` points at external storage."""
    title: str
    description: Optional[str] = None
    file_url: Optional[str] = None
    project_id: UUID

    @field_validator("description", "file_url", mode="before")
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

    @field_validator("file_url")
    @classmethod
    def well_formed_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            _url_adapter.validate_python(value)
        except ValidationError:
            raise ValueError("Must be a valid URL")
        return value


class DeliverableResponse(BaseModel):
    """Schema for deliverable response."""
    id: UUID
    title: str
    description: Optional[str] = None
    file_url: Optional[str] = None
    project_id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DeliverableListResponse(BaseModel):
    items: List[DeliverableResponse]
    total: int
