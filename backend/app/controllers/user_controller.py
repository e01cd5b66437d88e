"""
User controller.
"""

from typing import Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.core.invalidation import InvalidationBus
from app.models.user import User
from app.schemas.common import ActionResult
from app.schemas.user import ExternalIdentity, UserListResponse, UserRoleUpdate
from app.schemas.validation import parse_id, validate_form
from app.services.user_service import UserService


class UserController(BaseController):
    """Controller for user operations."""

    def __init__(self, session: AsyncSession, bus: Optional[InvalidationBus] = None):
        super().__init__(session)
        self.user_service = UserService(session, self._bus(bus))

    async def sync_current_user(self, identity: Optional[ExternalIdentity]) -> ActionResult:
        """Create or fetch the local user for the signed-in identity."""
        return await self._run(
            lambda: self.user_service.sync_current_user(identity),
            "Failed to sync user",
        )

    async def get_user(self, caller: Optional[User], user_id: Any) -> ActionResult:
        return await self._run(
            lambda: self.user_service.get_user(caller, parse_id(user_id, "user")),
            "Failed to fetch user",
        )

    async def list_users(self, caller: Optional[User], skip: int = 0, limit: int = 100) -> ActionResult:
        async def operation():
            users, total = await self.user_service.list_users(caller, skip, limit)
            return UserListResponse(items=users, total=total)
        return await self._run(operation, "Failed to fetch users")

    async def list_clients(self, caller: Optional[User], skip: int = 0, limit: int = 100) -> ActionResult:
        async def operation():
            users, total = await self.user_service.list_clients(caller, skip, limit)
            return UserListResponse(items=users, total=total)
        return await self._run(operation, "Failed to fetch clients")

    async def update_user_role(self, caller: Optional[User], user_id: Any, payload: Any) -> ActionResult:
        """Change a user's role."""
        async def operation():
            update = validate_form(UserRoleUpdate, payload)
            return await self.user_service.update_user_role(caller, parse_id(user_id, "user"), update.role)
        return await self._run(operation, "Failed to update user role")
