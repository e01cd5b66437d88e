"""
User repository for database operations.
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.db.repositories.base_repository import BaseRepository
from app.models.user import User, UserRole


class UserRepository(BaseRepository[User]):
    """Repository for user operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_by_external_id(self, external_id: str) -> Optional[User]:
        """Get user by identity-provider subject id."""
        result = await self.session.execute(
            select(User).where(User.external_id == external_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get the oldest user with this email."""
        result = await self.session.execute(
            select(User).where(User.email == email).order_by(User.created_at).limit(1)
        )
        return result.scalar_one_or_none()

    async def list_by_role(
        self,
        role: UserRole,
        skip: int = 0,
        limit: int = 100,
    ) -> List[User]:
        """List users with a role, newest first."""
        return await self.list(skip=skip, limit=limit, role=role)
