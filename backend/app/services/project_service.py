"""
Project service with business logic.
"""

from typing import Any, List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import FormValidationError, NotFoundError
from app.core.invalidation import (
    InvalidationBus,
    ADMIN_DASHBOARD,
    CLIENT_DASHBOARD,
    PROJECTS_LIST,
    INVOICES_LIST,
    project_detail,
)
from app.core.logging import get_logger
from app.core.permissions import require_admin, require_authenticated, require_owner_or_admin
from app.db.repositories.project_repository import ProjectRepository
from app.db.repositories.user_repository import UserRepository
from app.models.project import Project, ProjectStatus
from app.models.user import User, UserRole
from app.schemas.deliverable import DeliverableResponse
from app.schemas.milestone import MilestoneResponse
from app.schemas.project import (
    ProjectForm,
    ProjectResponse,
    ProjectDetailResponse,
    ProjectProgress,
)
from app.services.base_service import BaseService
from app.utils.aggregations import milestone_progress

logger = get_logger(__name__)


class ProjectService(BaseService):
    """Service for project operations."""

    def __init__(self, session: AsyncSession, bus: Optional[InvalidationBus] = None):
        super().__init__(session, bus)
        self.project_repo = ProjectRepository(session)
        self.user_repo = UserRepository(session)

    async def _ensure_client(self, client_id: UUID) -> None:
        client = await self.user_repo.get(client_id)
        if not client or client.role != UserRole.CLIENT:
            raise FormValidationError([{"field": "client_id", "message": "Client not found"}])

    async def create_project(self, caller: Optional[User], form: ProjectForm) -> ProjectResponse:
        """Create a new project."""
        require_admin(caller)
        await self._ensure_client(form.client_id)

        project = await self.project_repo.create(**form.model_dump())
        await self.session.commit()
        # Reload with client relationship
        project = await self.project_repo.get(project.id)
        if not project:
            raise NotFoundError("Project")

        logger.info(
            "Created project",
            extra={"project_id": str(project.id), "client_id": str(project.client_id)},
        )
        self._invalidate(ADMIN_DASHBOARD, PROJECTS_LIST, CLIENT_DASHBOARD)
        return self._to_response(project, (0, 0))

    async def get_project(self, caller: Optional[User], project_id: UUID) -> ProjectDetailResponse:
        """Get project with milestones, deliverables and progress."""
        require_authenticated(caller)
        project = await self.project_repo.get_with_relationships(project_id)
        if not project:
            raise NotFoundError("Project")
        require_owner_or_admin(caller, project.client_id)
        return self._to_detail_response(project)

    async def list_projects(
        self,
        caller: Optional[User],
        skip: int = 0,
        limit: int = 100,
        status: Optional[ProjectStatus] = None,
    ) -> tuple[List[ProjectResponse], int]:
        """List every project, newest first."""
        require_admin(caller)
        if status:
            projects = await self.project_repo.list_by_status(status, skip, limit)
        else:
            projects = await self.project_repo.list(skip=skip, limit=limit)
        return await self._with_counts(projects), len(projects)

    async def list_client_projects(
        self,
        caller: Optional[User],
        client_id: UUID,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[List[ProjectResponse], int]:
        """List projects owned by a client, newest first."""
        require_owner_or_admin(caller, client_id)
        projects = await self.project_repo.list_by_client(client_id, skip, limit)
        return await self._with_counts(projects), len(projects)

    async def update_project(
        self,
        caller: Optional[User],
        project_id: UUID,
        form: ProjectForm,
    ) -> ProjectResponse:
        """Replace every field of a project."""
        require_admin(caller)
        await self._ensure_client(form.client_id)

        updated = await self.project_repo.update(project_id, **form.model_dump())
        if not updated:
            raise NotFoundError("Project")
        await self.session.commit()
        updated = await self.project_repo.get(project_id)

        logger.info("Updated project", extra={"project_id": str(project_id)})
        self._invalidate(ADMIN_DASHBOARD, PROJECTS_LIST, project_detail(project_id), CLIENT_DASHBOARD)
        counts = await self.project_repo.child_counts([project_id])
        return self._to_response(updated, counts.get(project_id))

    async def delete_project(self, caller: Optional[User], project_id: UUID) -> None:
        """Delete a project together with its milestones and deliverables."""
        require_admin(caller)
        deleted = await self.project_repo.delete(project_id)
        if not deleted:
            raise NotFoundError("Project")
        await self.session.commit()

        logger.info("Deleted project", extra={"project_id": str(project_id)})
        self._invalidate(
            ADMIN_DASHBOARD,
            PROJECTS_LIST,
            project_detail(project_id),
            INVOICES_LIST,
            CLIENT_DASHBOARD,
        )
        self._retire(project_detail(project_id))

    async def _with_counts(self, projects: List[Project]) -> List[ProjectResponse]:
        counts = await self.project_repo.child_counts([p.id for p in projects])
        return [self._to_response(p, counts.get(p.id)) for p in projects]

    def _to_response(self, project: Project, counts: Optional[tuple] = None) -> ProjectResponse:
        """Convert project model to response schema."""
        data = self._base_fields(project)
        if counts is not None:
            data["milestone_count"], data["deliverable_count"] = counts
        return ProjectResponse.model_validate(data)

    def _to_detail_response(self, project: Project) -> ProjectDetailResponse:
        milestones = list(project.milestones)
        deliverables = list(project.deliverables)
        completed, total, percent = milestone_progress(milestones)

        data = self._base_fields(project)
        data.update({
            "milestone_count": total,
            "deliverable_count": len(deliverables),
            "milestones": [MilestoneResponse.model_validate(m) for m in milestones],
            "deliverables": [DeliverableResponse.model_validate(d) for d in deliverables],
            "progress": ProjectProgress(completed=completed, total=total, percent=percent),
        })
        return ProjectDetailResponse.model_validate(data)

    @staticmethod
    def _base_fields(project: Project) -> dict[str, Any]:
        return {
            "id": project.id,
            "title": project.title,
            "description": project.description,
            "status": project.status,
            "budget": project.budget,
            "start_date": project.start_date,
            "end_date": project.end_date,
            "client_id": project.client_id,
            "client": project.client,
            "created_at": project.created_at,
            "updated_at": project.updated_at,
        }
