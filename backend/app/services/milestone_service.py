"""
Milestone service with business logic.
"""

from typing import List, Optional, Sequence
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import FormValidationError, NotFoundError
from app.core.invalidation import (
    InvalidationBus,
    CLIENT_DASHBOARD,
    PROJECTS_LIST,
    project_detail,
)
from app.core.logging import get_logger
from app.core.permissions import require_admin, require_authenticated, require_owner_or_admin
from app.db.base import utcnow
from app.db.repositories.milestone_repository import MilestoneRepository
from app.db.repositories.project_repository import ProjectRepository
from app.models.user import User
from app.schemas.milestone import MilestoneForm, MilestoneResponse
from app.services.base_service import BaseService

logger = get_logger(__name__)


class MilestoneService(BaseService):
    """Service for milestone operations."""

    def __init__(self, session: AsyncSession, bus: Optional[InvalidationBus] = None):
        super().__init__(session, bus)
        self.milestone_repo = MilestoneRepository(session)
        self.project_repo = ProjectRepository(session)

    async def _project_owner(self, project_id: UUID) -> UUID:
        client_id = await self.project_repo.get_client_id(project_id)
        if client_id is None:
            raise NotFoundError("Project")
        return client_id

    def _invalidate_project(self, *project_ids: UUID) -> None:
        self._invalidate(
            PROJECTS_LIST,
            *[project_detail(pid) for pid in project_ids],
            CLIENT_DASHBOARD,
        )

    async def create_milestone(self, caller: Optional[User], form: MilestoneForm) -> MilestoneResponse:
        """Create a milestone in a project."""
        require_admin(caller)
        await self._project_owner(form.project_id)

        milestone = await self.milestone_repo.create(**form.model_dump())
        await self.session.commit()

        logger.info(
            "Created milestone",
            extra={"milestone_id": str(milestone.id), "project_id": str(form.project_id)},
        )
        self._invalidate_project(form.project_id)
        return MilestoneResponse.model_validate(milestone)

    async def get_milestone(self, caller: Optional[User], milestone_id: UUID) -> MilestoneResponse:
        """Get milestone by ID."""
        require_authenticated(caller)
        milestone = await self.milestone_repo.get(milestone_id)
        if not milestone:
            raise NotFoundError("Milestone")
        require_owner_or_admin(caller, await self.project_repo.get_client_id(milestone.project_id))
        return MilestoneResponse.model_validate(milestone)

    async def list_milestones(
        self,
        caller: Optional[User],
        project_id: UUID,
    ) -> tuple[List[MilestoneResponse], int]:
        """List a project's milestones in display order."""
        require_authenticated(caller)
        require_owner_or_admin(caller, await self.project_repo.get_client_id(project_id))
        milestones = await self.milestone_repo.list_by_project(project_id)
        return [MilestoneResponse.model_validate(m) for m in milestones], len(milestones)

    async def update_milestone(
        self,
        caller: Optional[User],
        milestone_id: UUID,
        form: MilestoneForm,
    ) -> MilestoneResponse:
        """Replace every field of a milestone except its completion state."""
        require_admin(caller)
        await self._project_owner(form.project_id)

        existing = await self.milestone_repo.get(milestone_id)
        if not existing:
            raise NotFoundError("Milestone")
        previous_project_id = existing.project_id

        updated = await self.milestone_repo.update(milestone_id, **form.model_dump())
        await self.session.commit()

        logger.info("Updated milestone", extra={"milestone_id": str(milestone_id)})
        self._invalidate_project(previous_project_id, form.project_id)
        return MilestoneResponse.model_validate(updated)

    async def delete_milestone(
        self,
        caller: Optional[User],
        milestone_id: UUID,
        project_id: Optional[UUID] = None,
    ) -> None:
        """Delete a milestone."""
        require_admin(caller)
        milestone = await self.milestone_repo.get(milestone_id)
        if not milestone:
            raise NotFoundError("Milestone")
        owning_project_id = milestone.project_id

        await self.milestone_repo.delete(milestone_id)
        await self.session.commit()

        logger.info("Deleted milestone", extra={"milestone_id": str(milestone_id)})
        self._invalidate_project(*{owning_project_id, project_id or owning_project_id})

    async def toggle_milestone_complete(
        self,
        caller: Optional[User],
        milestone_id: UUID,
        project_id: Optional[UUID] = None,
    ) -> MilestoneResponse:
        """Mark an incomplete milestone complete, or a complete one incomplete."""
        require_admin(caller)
        toggled = await self.milestone_repo.toggle_completed(milestone_id, utcnow())
        if not toggled:
            raise NotFoundError("Milestone")
        await self.session.commit()

        logger.info(
            "Toggled milestone completion",
            extra={"milestone_id": str(milestone_id), "completed": toggled.completed_at is not None},
        )
        self._invalidate_project(*{toggled.project_id, project_id or toggled.project_id})
        return MilestoneResponse.model_validate(toggled)

    async def reorder_milestones(
        self,
        caller: Optional[User],
        project_id: UUID,
        milestone_ids: Sequence[UUID],
    ) -> None:
        """
        Give each milestone ``order = position`` in ``milestone_ids``.

        Every id must belong to the project and appear once. All orders are
        written in one transaction; a failure leaves the previous order intact.
        """
        require_admin(caller)
        await self._project_owner(project_id)

        if len(set(milestone_ids)) != len(milestone_ids):
            raise FormValidationError([{"field": "milestone_ids", "message": "Milestone ids must be unique"}])

        owned = set(await self.milestone_repo.list_ids_in_project(project_id))
        foreign = [mid for mid in milestone_ids if mid not in owned]
        if foreign:
            raise FormValidationError([{
                "field": "milestone_ids",
                "message": f"{len(foreign)} milestone(s) do not belong to this project",
            }])

        try:
            await self.milestone_repo.set_orders(milestone_ids)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Reordered milestones",
            extra={"project_id": str(project_id), "count": len(milestone_ids)},
        )
        self._invalidate_project(project_id)
