"""
Health repository.
Provides database health check functionality.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError


class HealthRepository:
    """Repository for health check operations."""
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def check_database(self) -> bool:
        """True if the database answers a trivial query."""
        try:
            result = await self.session.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return False
        return result.scalar() == 1
