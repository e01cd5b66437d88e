"""
User service: identity sync and user listings.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import UnauthorizedError, NotFoundError
from app.core.invalidation import InvalidationBus, ADMIN_DASHBOARD, USERS_LIST
from app.core.logging import get_logger
from app.core.permissions import require_admin, require_owner_or_admin
from app.db.repositories.user_repository import UserRepository
from app.models.user import User, UserRole
from app.schemas.user import ExternalIdentity, UserResponse
from app.services.base_service import BaseService

logger = get_logger(__name__)


class UserService(BaseService):
    """Service for user operations."""

    def __init__(self, session: AsyncSession, bus: Optional[InvalidationBus] = None):
        super().__init__(session, bus)
        self.user_repo = UserRepository(session)

    async def resolve_user(self, identity: Optional[ExternalIdentity]) -> User:
        """
        Map an external identity to its local user, creating it on first sight.

        The lookup and the insert are not atomic. The UNIQUE constraint on
        ``external_id`` rejects a concurrent duplicate insert, in which case
        the row created by the other request is returned.
        """
        if identity is None or not identity.subject:
            raise UnauthorizedError("Not authenticated")

        existing = await self.user_repo.get_by_external_id(identity.subject)
        if existing:
            return existing

        try:
            user = await self.user_repo.create(
                external_id=identity.subject,
                email=identity.email or "",
                first_name=identity.first_name,
                last_name=identity.last_name,
                role=UserRole.CLIENT,
            )
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            winner = await self.user_repo.get_by_external_id(identity.subject)
            if winner is None:
                raise
            logger.info(
                "Concurrent first sync resolved to existing user",
                extra={"user_id": str(winner.id), "external_id": identity.subject},
            )
            return winner

        logger.info(
            "Created user from identity provider",
            extra={"user_id": str(user.id), "external_id": identity.subject},
        )
        self._invalidate(USERS_LIST, ADMIN_DASHBOARD)
        return user

    async def sync_current_user(self, identity: Optional[ExternalIdentity]) -> UserResponse:
        """Sync the caller's identity into a local user."""
        user = await self.resolve_user(identity)
        return UserResponse.model_validate(user)

    async def get_user(self, caller: Optional[User], user_id: UUID) -> UserResponse:
        """Get a user. Clients may only read themselves."""
        require_owner_or_admin(caller, user_id)
        user = await self.user_repo.get(user_id)
        if not user:
            raise NotFoundError("User")
        return UserResponse.model_validate(user)

    async def list_users(
        self,
        caller: Optional[User],
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[List[UserResponse], int]:
        """List all users, newest first."""
        require_admin(caller)
        users = await self.user_repo.list(skip=skip, limit=limit)
        return [UserResponse.model_validate(u) for u in users], len(users)

    async def list_clients(
        self,
        caller: Optional[User],
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[List[UserResponse], int]:
        """List users holding the CLIENT role, newest first."""
        require_admin(caller)
        users = await self.user_repo.list_by_role(UserRole.CLIENT, skip, limit)
        return [UserResponse.model_validate(u) for u in users], len(users)

    async def update_user_role(
        self,
        caller: Optional[User],
        user_id: UUID,
        role: UserRole,
    ) -> UserResponse:
        """Change a user's role. The sync path never does this."""
        require_admin(caller)
        updated = await self.user_repo.update(user_id, role=role)
        if not updated:
            raise NotFoundError("User")
        await self.session.commit()
        logger.info(
            "Changed user role",
            extra={"user_id": str(user_id), "role": role.value, "changed_by": str(caller.id)},
        )
        self._invalidate(USERS_LIST, ADMIN_DASHBOARD)
        return UserResponse.model_validate(updated)
