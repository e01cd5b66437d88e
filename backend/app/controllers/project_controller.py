"""
Project controller.
"""

from typing import Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.core.invalidation import InvalidationBus
from app.models.project import ProjectStatus
from app.models.user import User
from app.schemas.common import ActionResult
from app.schemas.project import ProjectForm, ProjectListResponse
from app.schemas.validation import parse_id, validate_form
from app.services.project_service import ProjectService


class ProjectController(BaseController):
    """Controller for project operations."""

    def __init__(self, session: AsyncSession, bus: Optional[InvalidationBus] = None):
        super().__init__(session)
        self.project_service = ProjectService(session, self._bus(bus))

    async def create_project(self, caller: Optional[User], payload: Any) -> ActionResult:
        """Create a new project."""
        return await self._run(
            lambda: self.project_service.create_project(caller, validate_form(ProjectForm, payload)),
            "Failed to create project",
            status_code=201,
        )

    async def get_project(self, caller: Optional[User], project_id: Any) -> ActionResult:
        """Get project with milestones, deliverables and progress."""
        return await self._run(
            lambda: self.project_service.get_project(caller, parse_id(project_id, "project")),
            "Failed to fetch project",
        )

    async def list_projects(
        self,
        caller: Optional[User],
        skip: int = 0,
        limit: int = 100,
        status: Optional[ProjectStatus] = None,
    ) -> ActionResult:
        """List every project."""
        async def operation():
            projects, total = await self.project_service.list_projects(caller, skip, limit, status)
            return ProjectListResponse(items=projects, total=total)
        return await self._run(operation, "Failed to fetch projects")

    async def list_client_projects(
        self,
        caller: Optional[User],
        client_id: Any,
        skip: int = 0,
        limit: int = 100,
    ) -> ActionResult:
        """List projects owned by one client."""
        async def operation():
            projects, total = await self.project_service.list_client_projects(
                caller, parse_id(client_id, "client"), skip, limit
            )
            return ProjectListResponse(items=projects, total=total)
        return await self._run(operation, "Failed to fetch projects")

    async def update_project(self, caller: Optional[User], project_id: Any, payload: Any) -> ActionResult:
        """Update a project."""
        return await self._run(
            lambda: self.project_service.update_project(
                caller, parse_id(project_id, "project"), validate_form(ProjectForm, payload)
            ),
            "Failed to update project",
        )

    async def delete_project(self, caller: Optional[User], project_id: Any) -> ActionResult:
        """Delete a project and its milestones and deliverables."""
        return await self._run(
            lambda: self.project_service.delete_project(caller, parse_id(project_id, "project")),
            "Failed to delete project",
        )
