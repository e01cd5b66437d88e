"""
Authentication service for Entra ID SSO.
Exchanges the provider's authorization code for a profile, syncs the local
user and issues the bearer token used on every later request.
"""

from datetime import timedelta
from typing import Any, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import UnauthorizedError
from app.core.integrations.entra_id import get_entra_id_auth
from app.core.invalidation import InvalidationBus
from app.core.logging import get_logger
from app.core.security import create_access_token
from app.services.base_service import BaseService
from app.services.user_service import UserService
from app.schemas.user import ExternalIdentity, TokenResponse, LoginResponse, UserResponse

logger = get_logger(__name__)


def identity_from_profile(profile: Dict[str, Any]) -> ExternalIdentity:
    """Map a Microsoft Graph ``/me`` profile to an external identity."""
    return ExternalIdentity(
        subject=profile.get("id") or "",
        email=profile.get("mail") or profile.get("userPrincipalName") or "",
        first_name=profile.get("givenName"),
        last_name=profile.get("surname"),
    )


def issue_token(identity: ExternalIdentity) -> TokenResponse:
    """Sign a bearer token carrying the identity claims."""
    token_data = {
        "sub": identity.subject,
        "email": identity.email,
        "given_name": identity.first_name,
        "family_name": identity.last_name,
    }
    expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return TokenResponse(
        access_token=create_access_token(data=token_data, expires_delta=expires_delta),
        token_type="bearer",
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


class AuthService(BaseService):
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession, bus: Optional[InvalidationBus] = None):
        super().__init__(session, bus)
        self.user_service = UserService(session, bus)

    @staticmethod
    def _configured_client():
        entra_id = get_entra_id_auth()
        if not entra_id.validate_config():
            logger.error("Entra ID sign-in attempted with incomplete settings")
            raise UnauthorizedError("Sign-in is not configured")
        return entra_id

    async def authenticate_with_entra_id(self, authorization_code: str) -> LoginResponse:
        """
        Authenticate user with Entra ID authorization code.

        Args:
            authorization_code: Authorization code from OAuth callback

        Returns:
            LoginResponse with token and the synced user

        Raises:
            UnauthorizedError: If sign-in is not configured, the provider rejects the code
                or the profile is unavailable
        """
        entra_id = self._configured_client()

        try:
            token_result = await entra_id.acquire_token_by_authorization_code(code=authorization_code)
        except ValueError as e:
            raise UnauthorizedError(f"Failed to acquire access token from Entra ID: {e}")

        profile = await entra_id.get_user_info(token_result["access_token"])
        if not profile:
            raise UnauthorizedError("Failed to retrieve user information from Entra ID")

        identity = identity_from_profile(profile)
        user = await self.user_service.resolve_user(identity)
        logger.info("User signed in", extra={"user_id": str(user.id)})

        return LoginResponse(
            token=issue_token(identity),
            user=UserResponse.model_validate(user),
        )

    def get_authorization_url(self, state: Optional[str] = None) -> str:
        """
        Get Entra ID authorization URL for SSO login.

        Args:
            state: Optional state parameter for CSRF protection

        Raises:
            UnauthorizedError: If sign-in is not configured
        """
        return self._configured_client().get_authorization_url(state=state)
