"""
Deliverable service with business logic.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.core.invalidation import (
    InvalidationBus,
    CLIENT_DASHBOARD,
    PROJECTS_LIST,
    project_detail,
)
from app.core.logging import get_logger
from app.core.permissions import require_admin, require_authenticated, require_owner_or_admin
from app.db.repositories.deliverable_repository import DeliverableRepository
from app.db.repositories.project_repository import ProjectRepository
from app.models.user import User
from app.schemas.deliverable import DeliverableForm, DeliverableResponse
from app.services.base_service import BaseService

logger = get_logger(__name__)


class DeliverableService(BaseService):
    """Service for deliverable operations."""

    def __init__(self, session: AsyncSession, bus: Optional[InvalidationBus] = None):
        super().__init__(session, bus)
        self.deliverable_repo = DeliverableRepository(session)
        self.project_repo = ProjectRepository(session)

    async def _project_owner(self, project_id: UUID) -> UUID:
        client_id = await self.project_repo.get_client_id(project_id)
        if client_id is None:
            raise NotFoundError("Project")
        return client_id

    async def create_deliverable(self, caller: Optional[User], form: DeliverableForm) -> DeliverableResponse:
        """Record a deliverable against a project."""
        require_admin(caller)
        await self._project_owner(form.project_id)

        deliverable = await self.deliverable_repo.create(**form.model_dump())
        await self.session.commit()

        logger.info(
            "Created deliverable",
            extra={"deliverable_id": str(deliverable.id), "project_id": str(form.project_id)},
        )
        self._invalidate(PROJECTS_LIST, project_detail(form.project_id), CLIENT_DASHBOARD)
        return DeliverableResponse.model_validate(deliverable)

    async def get_deliverable(self, caller: Optional[User], deliverable_id: UUID) -> DeliverableResponse:
        require_authenticated(caller)
        deliverable = await self.deliverable_repo.get(deliverable_id)
        if not deliverable:
            raise NotFoundError("Deliverable")
        require_owner_or_admin(caller, await self.project_repo.get_client_id(deliverable.project_id))
        return DeliverableResponse.model_validate(deliverable)

    async def list_deliverables(
        self,
        caller: Optional[User],
        project_id: UUID,
    ) -> tuple[List[DeliverableResponse], int]:
        """List a project's deliverables, newest first."""
        require_authenticated(caller)
        require_owner_or_admin(caller, await self.project_repo.get_client_id(project_id))
        deliverables = await self.deliverable_repo.list_by_project(project_id)
        return [DeliverableResponse.model_validate(d) for d in deliverables], len(deliverables)

    async def update_deliverable(
        self,
        caller: Optional[User],
        deliverable_id: UUID,
        form: DeliverableForm,
    ) -> DeliverableResponse:
        """Replace every field of a deliverable."""
        require_admin(caller)
        await self._project_owner(form.project_id)

        existing = await self.deliverable_repo.get(deliverable_id)
        if not existing:
            raise NotFoundError("Deliverable")
        previous_project_id = existing.project_id

        updated = await self.deliverable_repo.update(deliverable_id, **form.model_dump())
        await self.session.commit()

        logger.info("Updated deliverable", extra={"deliverable_id": str(deliverable_id)})
        self._invalidate(
            PROJECTS_LIST,
            project_detail(previous_project_id),
            project_detail(form.project_id),
            CLIENT_DASHBOARD,
        )
        return DeliverableResponse.model_validate(updated)

    async def delete_deliverable(
        self,
        caller: Optional[User],
        deliverable_id: UUID,
        project_id: Optional[UUID] = None,
    ) -> None:
        """Delete a deliverable."""
        require_admin(caller)
        deliverable = await self.deliverable_repo.get(deliverable_id)
        if not deliverable:
            raise NotFoundError("Deliverable")
        owning_project_id = deliverable.project_id

        await self.deliverable_repo.delete(deliverable_id)
        await self.session.commit()

        logger.info("Deleted deliverable", extra={"deliverable_id": str(deliverable_id)})
        self._invalidate(
            PROJECTS_LIST,
            project_detail(owning_project_id),
            project_detail(project_id or owning_project_id),
            CLIENT_DASHBOARD,
        )
