"""
Invoice service with business logic.
"""

import time
from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import FormValidationError, NotFoundError
from app.core.invalidation import (
    InvalidationBus,
    ADMIN_DASHBOARD,
    CLIENT_DASHBOARD,
    INVOICES_LIST,
)
from app.core.logging import get_logger
from app.core.permissions import require_admin, require_authenticated, require_owner_or_admin
from app.db.base import utcnow
from app.db.repositories.invoice_repository import InvoiceRepository
from app.db.repositories.project_repository import ProjectRepository
from app.db.repositories.user_repository import UserRepository
from app.models.invoice import Invoice, InvoiceStatus
from app.models.user import User, UserRole
from app.schemas.invoice import InvoiceForm, InvoiceResponse
from app.services.base_service import BaseService

logger = get_logger(__name__)


def generate_invoice_number() -> str:
    """Invoice number from the configured prefix and the epoch in milliseconds."""
    return f"{settings.INVOICE_NUMBER_PREFIX}-{int(time.time() * 1000)}"


class InvoiceService(BaseService):
    """Service for invoice operations."""

    def __init__(self, session: AsyncSession, bus: Optional[InvalidationBus] = None):
        super().__init__(session, bus)
        self.invoice_repo = InvoiceRepository(session)
        self.project_repo = ProjectRepository(session)
        self.user_repo = UserRepository(session)

    async def _check_references(self, form: InvoiceForm) -> None:
        errors = []
        client = await self.user_repo.get(form.client_id)
        if not client or client.role != UserRole.CLIENT:
            errors.append({"field": "client_id", "message": "Client not found"})
        if form.project_id is not None and await self.project_repo.get_client_id(form.project_id) is None:
            errors.append({"field": "project_id", "message": "Project not found"})
        if errors:
            raise FormValidationError(errors)

    def _fields(self, form: InvoiceForm) -> dict:
        data = form.model_dump()
        if not data.get("invoice_number"):
            data["invoice_number"] = generate_invoice_number()
        return data

    def _invalidate_invoices(self) -> None:
        self._invalidate(ADMIN_DASHBOARD, INVOICES_LIST, CLIENT_DASHBOARD)

    async def create_invoice(self, caller: Optional[User], form: InvoiceForm) -> InvoiceResponse:
        """Create an invoice, numbering it when no number was given."""
        require_admin(caller)
        await self._check_references(form)

        invoice = await self.invoice_repo.create(**self._fields(form))
        await self.session.commit()
        # Reload with client and project
        invoice = await self.invoice_repo.get(invoice.id)
        if not invoice:
            raise NotFoundError("Invoice")

        logger.info(
            "Created invoice",
            extra={
                "invoice_id": str(invoice.id),
                "invoice_number": invoice.invoice_number,
                "client_id": str(invoice.client_id),
            },
        )
        self._invalidate_invoices()
        return InvoiceResponse.model_validate(invoice)

    async def get_invoice(self, caller: Optional[User], invoice_id: UUID) -> InvoiceResponse:
        """Get invoice with client and project summaries."""
        require_authenticated(caller)
        invoice = await self.invoice_repo.get(invoice_id)
        if not invoice:
            raise NotFoundError("Invoice")
        require_owner_or_admin(caller, invoice.client_id)
        return InvoiceResponse.model_validate(invoice)

    async def list_invoices(
        self,
        caller: Optional[User],
        skip: int = 0,
        limit: int = 100,
        status: Optional[InvoiceStatus] = None,
    ) -> tuple[List[InvoiceResponse], int]:
        """List every invoice, newest first."""
        require_admin(caller)
        filters = {"status": status} if status else {}
        invoices = await self.invoice_repo.list(skip=skip, limit=limit, **filters)
        return [InvoiceResponse.model_validate(i) for i in invoices], len(invoices)

    async def list_client_invoices(
        self,
        caller: Optional[User],
        client_id: UUID,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[List[InvoiceResponse], int]:
        """List invoices billed to a client, newest first."""
        require_owner_or_admin(caller, client_id)
        invoices = await self.invoice_repo.list_by_client(client_id, skip, limit)
        return [InvoiceResponse.model_validate(i) for i in invoices], len(invoices)

    async def update_invoice(
        self,
        caller: Optional[User],
        invoice_id: UUID,
        form: InvoiceForm,
    ) -> InvoiceResponse:
        """Replace every field of an invoice. ``paid_at`` is left as it was."""
        require_admin(caller)
        await self._check_references(form)

        existing = await self.invoice_repo.get(invoice_id)
        if not existing:
            raise NotFoundError("Invoice")

        data = form.model_dump()
        if not data.get("invoice_number"):
            data["invoice_number"] = existing.invoice_number

        await self.invoice_repo.update(invoice_id, **data)
        await self.session.commit()
        updated = await self.invoice_repo.get(invoice_id)

        logger.info("Updated invoice", extra={"invoice_id": str(invoice_id)})
        self._invalidate_invoices()
        return InvoiceResponse.model_validate(updated)

    async def delete_invoice(self, caller: Optional[User], invoice_id: UUID) -> None:
        """Delete an invoice."""
        require_admin(caller)
        deleted = await self.invoice_repo.delete(invoice_id)
        if not deleted:
            raise NotFoundError("Invoice")
        await self.session.commit()

        logger.info("Deleted invoice", extra={"invoice_id": str(invoice_id)})
        self._invalidate_invoices()

    async def mark_invoice_as_paid(self, caller: Optional[User], invoice_id: UUID) -> InvoiceResponse:
        """
        Set status PAID and stamp ``paid_at`` with the current time.

        Applies from any prior status. Paying an already paid invoice moves
        ``paid_at`` forward.
        """
        require_admin(caller)
        invoice: Optional[Invoice] = await self.invoice_repo.mark_paid(invoice_id, utcnow())
        if not invoice:
            raise NotFoundError("Invoice")
        await self.session.commit()

        logger.info(
            "Marked invoice as paid",
            extra={"invoice_id": str(invoice_id), "paid_at": invoice.paid_at.isoformat()},
        )
        self._invalidate_invoices()
        return InvoiceResponse.model_validate(invoice)
