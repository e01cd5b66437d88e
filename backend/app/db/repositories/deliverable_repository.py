"""
Deliverable repository for database operations.
"""

from typing import List, Sequence
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.db.repositories.base_repository import BaseRepository
from app.models.deliverable import Deliverable


class DeliverableRepository(BaseRepository[Deliverable]):
    """Repository for deliverable operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Deliverable, session)

    async def list_by_project(self, project_id: UUID) -> List[Deliverable]:
        """List a project's deliverables, newest first."""
        return await self.list(limit=1000, project_id=project_id)

    async def list_by_projects(self, project_ids: Sequence[UUID]) -> List[Deliverable]:
        if not project_ids:
            return []
        result = await self.session.execute(
            select(Deliverable)
            .where(Deliverable.project_id.in_(project_ids))
            .order_by(Deliverable.created_at.desc())
        )
        return list(result.scalars().all())
