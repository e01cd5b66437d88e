"""
Dashboard controller.
"""

from typing import Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.models.user import User
from app.schemas.common import ActionResult
from app.schemas.validation import parse_id
from app.services.dashboard_service import DashboardService


class DashboardController(BaseController):
    """Controller for dashboard summaries."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.dashboard_service = DashboardService(session)

    async def get_admin_dashboard(self, caller: Optional[User]) -> ActionResult:
        return await self._run(
            lambda: self.dashboard_service.get_admin_dashboard(caller),
            "Failed to load dashboard",
        )

    async def get_client_dashboard(self, caller: Optional[User], client_id: Any = None) -> ActionResult:
        return await self._run(
            lambda: self.dashboard_service.get_client_dashboard(
                caller, parse_id(client_id, "client") if client_id is not None else None
            ),
            "Failed to load dashboard",
        )
