"""
Invoice repository for database operations.
"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from app.db.repositories.base_repository import BaseRepository
from app.models.invoice import Invoice, InvoiceStatus


class InvoiceRepository(BaseRepository[Invoice]):
    """Repository for invoice operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Invoice, session)

    def _base_query(self):
        """Base query with client and project eagerly loaded."""
        return (
            select(Invoice)
            .options(selectinload(Invoice.client), selectinload(Invoice.project))
            .execution_options(populate_existing=True)
        )

    async def get(self, id: UUID) -> Optional[Invoice]:
        """Get invoice by ID with client and project loaded."""
        result = await self.session.execute(self._base_query().where(Invoice.id == id))
        return result.scalar_one_or_none()

    async def list(
        self,
        skip: int = 0,
        limit: int = 100,
        **filters,
    ) -> List[Invoice]:
        """List invoices newest first with client and project loaded."""
        query = self._base_query()

        for key, value in filters.items():
            if hasattr(Invoice, key):
                query = query.where(getattr(Invoice, key) == value)

        query = query.order_by(Invoice.created_at.desc()).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_by_client(
        self,
        client_id: UUID,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Invoice]:
        """List invoices billed to a client."""
        return await self.list(skip=skip, limit=limit, client_id=client_id)

    async def mark_paid(self, id: UUID, paid_at: datetime) -> Optional[Invoice]:
        """Set status PAID and stamp ``paid_at`` in a single UPDATE."""
        result = await self.session.execute(
            update(Invoice)
            .where(Invoice.id == id)
            .values(status=InvoiceStatus.PAID, paid_at=paid_at, updated_at=paid_at)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        await self.session.flush()
        return await self.get(id)
