"""
Deliverable controller.
"""

from typing import Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.core.invalidation import InvalidationBus
from app.models.user import User
from app.schemas.common import ActionResult
from app.schemas.deliverable import DeliverableForm, DeliverableListResponse
from app.schemas.validation import parse_id, validate_form
from app.services.deliverable_service import DeliverableService


class DeliverableController(BaseController):
    """Controller for deliverable operations."""

    def __init__(self, session: AsyncSession, bus: Optional[InvalidationBus] = None):
        super().__init__(session)
        self.deliverable_service = DeliverableService(session, self._bus(bus))

    async def create_deliverable(self, caller: Optional[User], payload: Any) -> ActionResult:
        return await self._run(
            lambda: self.deliverable_service.create_deliverable(caller, validate_form(DeliverableForm, payload)),
            "Failed to create deliverable",
            status_code=201,
        )

    async def get_deliverable(self, caller: Optional[User], deliverable_id: Any) -> ActionResult:
        return await self._run(
            lambda: self.deliverable_service.get_deliverable(caller, parse_id(deliverable_id, "deliverable")),
            "Failed to fetch deliverable",
        )

    async def list_deliverables(self, caller: Optional[User], project_id: Any) -> ActionResult:
        async def operation():
            deliverables, total = await self.deliverable_service.list_deliverables(
                caller, parse_id(project_id, "project")
            )
            return DeliverableListResponse(items=deliverables, total=total)
        return await self._run(operation, "Failed to fetch deliverables")

    async def update_deliverable(self, caller: Optional[User], deliverable_id: Any, payload: Any) -> ActionResult:
        return await self._run(
            lambda: self.deliverable_service.update_deliverable(
                caller, parse_id(deliverable_id, "deliverable"), validate_form(DeliverableForm, payload)
            ),
            "Failed to update deliverable",
        )

    async def delete_deliverable(
        self,
        caller: Optional[User],
        deliverable_id: Any,
        project_id: Any = None,
    ) -> ActionResult:
        return await self._run(
            lambda: self.deliverable_service.delete_deliverable(
                caller,
                parse_id(deliverable_id, "deliverable"),
                parse_id(project_id, "project") if project_id is not None else None,
            ),
            "Failed to delete deliverable",
        )
