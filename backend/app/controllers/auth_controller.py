"""
Authentication controller for Entra ID SSO.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.core.invalidation import InvalidationBus
from app.schemas.common import ActionResult
from app.services.auth_service import AuthService


class AuthController(BaseController):
    """Controller for authentication operations."""

    def __init__(self, session: AsyncSession, bus: Optional[InvalidationBus] = None):
        super().__init__(session)
        self.auth_service = AuthService(session, self._bus(bus))

    async def login(self, authorization_code: str) -> ActionResult:
        """
        Authenticate user with Entra ID authorization code.

        Returns:
            ActionResult wrapping a LoginResponse with token and user
        """
        return await self._run(
            lambda: self.auth_service.authenticate_with_entra_id(authorization_code=authorization_code),
            "Authentication failed",
        )

    async def get_authorization_url(self, state: Optional[str] = None) -> ActionResult:
        """Get Entra ID authorization URL for SSO login."""
        async def operation():
            return self.auth_service.get_authorization_url(state=state)
        return await self._run(operation, "Failed to start sign-in")
