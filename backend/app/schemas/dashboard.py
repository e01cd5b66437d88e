"""
Dashboard summary schemas. Computed on every request, never stored.
"""

from pydantic import BaseModel
from typing import Dict, List, Optional
from decimal import Decimal
from uuid import UUID

from app.schemas.milestone import MilestoneResponse


class AdminDashboardResponse(BaseModel):
    total_clients: int
    total_projects: int
    active_projects: int
    projects_by_status: Dict[str, int]
    total_invoiced: Decimal
    total_paid: Decimal
    total_outstanding: Decimal


class ClientProjectProgress(BaseModel):
    project_id: UUID
    title: str
    status: str
    completed_milestones: int
    total_milestones: int
    percent: int


class ClientDashboardResponse(BaseModel):
    active_projects: int
    outstanding_amount: Decimal
    deliverable_count: int
    next_milestone: Optional[MilestoneResponse] = None
    projects: List[ClientProjectProgress] = []
