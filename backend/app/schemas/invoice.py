"""
Invoice Pydantic schemas.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from app.models.invoice import InvoiceStatus
from app.schemas.common import UserSummary, ProjectSummary
from app.schemas.validation import empty_to_none, require_reference


class InvoiceForm(BaseModel):
    """
    Invoice create/update payload.

    A blank ``invoice_number`` is filled in by the service. ``project_id`` is
    optional and not checked against ``client_id``.
    """
    invoice_number: Optional[str] = Field(None, max_length=50)
    amount: Decimal = Field(..., max_digits=15, decimal_places=2)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    due_date: Optional[date] = None
    client_id: UUID
    project_id: Optional[UUID] = None

    @field_validator("invoice_number", "due_date", "project_id", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        return empty_to_none(value)

    @field_validator("amount", mode="before")
    @classmethod
    def amount_required(cls, value):
        return require_reference(value, "Amount is required")

    @field_validator("client_id", mode="before")
    @classmethod
    def client_required(cls, value):
        return require_reference(value, "Client is required")


class InvoiceResponse(BaseModel):
    """Schema for invoice response."""
    id: UUID
    invoice_number: str
    amount: Decimal
    status: InvoiceStatus
    due_date: Optional[date] = None
    paid_at: Optional[datetime] = None
    client_id: UUID
    project_id: Optional[UUID] = None
    client: Optional[UserSummary] = None
    project: Optional[ProjectSummary] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class InvoiceListResponse(BaseModel):
    items: List[InvoiceResponse]
    total: int
