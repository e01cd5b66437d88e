"""
Milestone repository for database operations.
"""

from datetime import datetime
from typing import Optional, List, Sequence
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, case

from app.db.repositories.base_repository import BaseRepository
from app.models.milestone import Milestone


class MilestoneRepository(BaseRepository[Milestone]):
    """Repository for milestone operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Milestone, session)

    async def list_by_project(self, project_id: UUID) -> List[Milestone]:
        """List a project's milestones in display order."""
        result = await self.session.execute(
            select(Milestone)
            .where(Milestone.project_id == project_id)
            .order_by(Milestone.order.asc(), Milestone.created_at.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_by_projects(self, project_ids: Sequence[UUID]) -> List[Milestone]:
        """List milestones across several projects."""
        if not project_ids:
            return []
        result = await self.session.execute(
            select(Milestone)
            .where(Milestone.project_id.in_(project_ids))
            .order_by(Milestone.order.asc(), Milestone.created_at.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_ids_in_project(self, project_id: UUID) -> List[UUID]:
        result = await self.session.execute(
            select(Milestone.id).where(Milestone.project_id == project_id)
        )
        return list(result.scalars().all())

    async def toggle_completed(self, id: UUID, now: datetime) -> Optional[Milestone]:
        """
        Flip completion in one conditional UPDATE.

        Sets ``completed_at`` to ``now`` when it is NULL and clears it otherwise.

        Returns:
            Updated milestone or None if not found
        """
        result = await self.session.execute(
            update(Milestone)
            .where(Milestone.id == id)
            .values(
                completed_at=case(
                    (Milestone.completed_at.is_(None), now),
                    else_=None,
                ),
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        await self.session.flush()
        return await self._reload(id)

    async def set_orders(self, ordered_ids: Sequence[UUID]) -> None:
        """Assign ``order = position`` to each id. Caller owns the transaction."""
        for position, milestone_id in enumerate(ordered_ids):
            await self.session.execute(
                update(Milestone)
                .where(Milestone.id == milestone_id)
                .values(order=position)
                .execution_options(synchronize_session=False)
            )
        await self.session.flush()

    async def _reload(self, id: UUID) -> Optional[Milestone]:
        result = await self.session.execute(
            select(Milestone)
            .where(Milestone.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
