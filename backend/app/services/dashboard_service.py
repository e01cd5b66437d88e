"""
Dashboard service: summary figures for the admin and client home views.
"""

from collections import defaultdict
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.permissions import require_admin, require_owner_or_admin
from app.db.repositories.deliverable_repository import DeliverableRepository
from app.db.repositories.invoice_repository import InvoiceRepository
from app.db.repositories.milestone_repository import MilestoneRepository
from app.db.repositories.project_repository import ProjectRepository
from app.db.repositories.user_repository import UserRepository
from app.models.invoice import InvoiceStatus
from app.models.project import ProjectStatus
from app.models.user import User, UserRole
from app.schemas.dashboard import (
    AdminDashboardResponse,
    ClientDashboardResponse,
    ClientProjectProgress,
)
from app.schemas.milestone import MilestoneResponse
from app.services.base_service import BaseService
from app.utils.aggregations import (
    count_projects_by_status,
    count_users_by_role,
    milestone_progress,
    next_milestone,
    outstanding_invoice_amount,
    sum_invoice_amounts,
)

logger = get_logger(__name__)


class DashboardService(BaseService):
    """Read-only service computing dashboard summaries."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.project_repo = ProjectRepository(session)
        self.milestone_repo = MilestoneRepository(session)
        self.deliverable_repo = DeliverableRepository(session)
        self.invoice_repo = InvoiceRepository(session)
        self.user_repo = UserRepository(session)

    async def get_admin_dashboard(self, caller: Optional[User]) -> AdminDashboardResponse:
        require_admin(caller)
        projects = await self.project_repo.list(limit=None)
        users = await self.user_repo.list(limit=None)
        invoices = await self.invoice_repo.list(limit=None)

        by_status = count_projects_by_status(projects)
        return AdminDashboardResponse(
            total_clients=count_users_by_role(users)[UserRole.CLIENT.value],
            total_projects=len(projects),
            active_projects=by_status[ProjectStatus.IN_PROGRESS.value],
            projects_by_status=by_status,
            total_invoiced=sum_invoice_amounts(invoices),
            total_paid=sum_invoice_amounts(invoices, [InvoiceStatus.PAID]),
            total_outstanding=outstanding_invoice_amount(invoices),
        )

    async def get_client_dashboard(
        self,
        caller: Optional[User],
        client_id: Optional[UUID] = None,
    ) -> ClientDashboardResponse:
        """
        Summary for one client. Defaults to the caller's own dashboard;
        admins may pass any ``client_id``.
        """
        caller = require_owner_or_admin(caller, client_id or (caller.id if caller else None))
        client_id = client_id or caller.id

        projects = await self.project_repo.list_by_client(client_id, limit=None)
        project_ids = [p.id for p in projects]
        milestones = await self.milestone_repo.list_by_projects(project_ids)
        deliverables = await self.deliverable_repo.list_by_projects(project_ids)
        invoices = await self.invoice_repo.list_by_client(client_id, limit=None)

        milestones_by_project = defaultdict(list)
        for milestone in milestones:
            milestones_by_project[milestone.project_id].append(milestone)

        progress = []
        for project in projects:
            completed, total, percent = milestone_progress(milestones_by_project[project.id])
            progress.append(ClientProjectProgress(
                project_id=project.id,
                title=project.title,
                status=project.status.value,
                completed_milestones=completed,
                total_milestones=total,
                percent=percent,
            ))

        upcoming = next_milestone(milestones)
        return ClientDashboardResponse(
            active_projects=sum(1 for p in projects if p.status == ProjectStatus.IN_PROGRESS),
            outstanding_amount=outstanding_invoice_amount(invoices),
            deliverable_count=len(deliverables),
            next_milestone=MilestoneResponse.model_validate(upcoming) if upcoming else None,
            projects=progress,
        )
