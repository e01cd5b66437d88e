"""
Project repository for database operations.
"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from app.db.repositories.base_repository import BaseRepository
from app.models.project import Project, ProjectStatus
from app.models.milestone import Milestone
from app.models.deliverable import Deliverable


class ProjectRepository(BaseRepository[Project]):
    """Repository for project operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Project, session)

    def _base_query(self):
        """Base query with eager loading of client relationship."""
        return (
            select(Project)
            .options(selectinload(Project.client))
            .execution_options(populate_existing=True)
        )

    async def get(self, id: UUID) -> Optional[Project]:
        """Get project by ID with client relationship loaded."""
        result = await self.session.execute(self._base_query().where(Project.id == id))
        return result.scalar_one_or_none()

    async def get_client_id(self, id: UUID) -> Optional[UUID]:
        """Owning client of a project, without loading the row."""
        result = await self.session.execute(select(Project.client_id).where(Project.id == id))
        return result.scalar_one_or_none()

    async def list(
        self,
        skip: int = 0,
        limit: int = 100,
        **filters,
    ) -> List[Project]:
        """List projects newest first, eagerly loading client."""
        query = self._base_query()

        for key, value in filters.items():
            if hasattr(Project, key):
                query = query.where(getattr(Project, key) == value)

        query = query.order_by(Project.created_at.desc()).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_by_client(
        self,
        client_id: UUID,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Project]:
        """List projects owned by a client."""
        return await self.list(skip=skip, limit=limit, client_id=client_id)

    async def list_by_status(
        self,
        status: ProjectStatus,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Project]:
        """List projects by status."""
        return await self.list(skip=skip, limit=limit, status=status)

    async def get_with_relationships(self, project_id: UUID) -> Optional[Project]:
        """Get project with client, milestones and deliverables."""
        result = await self.session.execute(
            select(Project)
            .options(
                selectinload(Project.client),
                selectinload(Project.milestones),
                selectinload(Project.deliverables),
            )
            .where(Project.id == project_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def child_counts(self, project_ids: List[UUID]) -> dict:
        """
        Count milestones and deliverables per project.

        Returns:
            Mapping of project id to ``(milestone_count, deliverable_count)``
        """
        if not project_ids:
            return {}

        counts = {project_id: [0, 0] for project_id in project_ids}
        milestone_rows = await self.session.execute(
            select(Milestone.project_id, func.count(Milestone.id))
            .where(Milestone.project_id.in_(project_ids))
            .group_by(Milestone.project_id)
        )
        for project_id, count in milestone_rows.all():
            counts[project_id][0] = count

        deliverable_rows = await self.session.execute(
            select(Deliverable.project_id, func.count(Deliverable.id))
            .where(Deliverable.project_id.in_(project_ids))
            .group_by(Deliverable.project_id)
        )
        for project_id, count in deliverable_rows.all():
            counts[project_id][1] = count

        return {project_id: tuple(pair) for project_id, pair in counts.items()}
