"""
Milestone controller.
"""

from typing import Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.core.invalidation import InvalidationBus
from app.models.user import User
from app.schemas.common import ActionResult
from app.schemas.milestone import MilestoneForm, MilestoneListResponse, ReorderMilestonesRequest
from app.schemas.validation import parse_id, validate_form
from app.services.milestone_service import MilestoneService


def _optional_id(value: Any, entity: str):
    return parse_id(value, entity) if value is not None else None


class MilestoneController(BaseController):
    """Controller for milestone operations."""

    def __init__(self, session: AsyncSession, bus: Optional[InvalidationBus] = None):
        super().__init__(session)
        self.milestone_service = MilestoneService(session, self._bus(bus))

    async def create_milestone(self, caller: Optional[User], payload: Any) -> ActionResult:
        return await self._run(
            lambda: self.milestone_service.create_milestone(caller, validate_form(MilestoneForm, payload)),
            "Failed to create milestone",
            status_code=201,
        )

    async def get_milestone(self, caller: Optional[User], milestone_id: Any) -> ActionResult:
        return await self._run(
            lambda: self.milestone_service.get_milestone(caller, parse_id(milestone_id, "milestone")),
            "Failed to fetch milestone",
        )

    async def list_milestones(self, caller: Optional[User], project_id: Any) -> ActionResult:
        """List a project's milestones in display order."""
        async def operation():
            milestones, total = await self.milestone_service.list_milestones(
                caller, parse_id(project_id, "project")
            )
            return MilestoneListResponse(items=milestones, total=total)
        return await self._run(operation, "Failed to fetch milestones")

    async def update_milestone(self, caller: Optional[User], milestone_id: Any, payload: Any) -> ActionResult:
        return await self._run(
            lambda: self.milestone_service.update_milestone(
                caller, parse_id(milestone_id, "milestone"), validate_form(MilestoneForm, payload)
            ),
            "Failed to update milestone",
        )

    async def delete_milestone(
        self,
        caller: Optional[User],
        milestone_id: Any,
        project_id: Any = None,
    ) -> ActionResult:
        return await self._run(
            lambda: self.milestone_service.delete_milestone(
                caller, parse_id(milestone_id, "milestone"), _optional_id(project_id, "project")
            ),
            "Failed to delete milestone",
        )

    async def toggle_milestone_complete(
        self,
        caller: Optional[User],
        milestone_id: Any,
        project_id: Any = None,
    ) -> ActionResult:
        """Flip a milestone between complete and incomplete."""
        return await self._run(
            lambda: self.milestone_service.toggle_milestone_complete(
                caller, parse_id(milestone_id, "milestone"), _optional_id(project_id, "project")
            ),
            "Failed to update milestone",
        )

    async def reorder_milestones(self, caller: Optional[User], project_id: Any, payload: Any) -> ActionResult:
        """
        Reorder a project's milestones.

        ``payload`` is ``{"milestone_ids": [...]}`` in the desired order.
        """
        async def operation():
            request = validate_form(ReorderMilestonesRequest, payload)
            await self.milestone_service.reorder_milestones(
                caller, parse_id(project_id, "project"), request.milestone_ids
            )
        return await self._run(operation, "Failed to reorder milestones")
