"""
Invoice controller.
"""

from typing import Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.core.invalidation import InvalidationBus
from app.models.invoice import InvoiceStatus
from app.models.user import User
from app.schemas.common import ActionResult
from app.schemas.invoice import InvoiceForm, InvoiceListResponse
from app.schemas.validation import parse_id, validate_form
from app.services.invoice_service import InvoiceService


class InvoiceController(BaseController):
    """Controller for invoice operations."""

    def __init__(self, session: AsyncSession, bus: Optional[InvalidationBus] = None):
        super().__init__(session)
        self.invoice_service = InvoiceService(session, self._bus(bus))

    async def create_invoice(self, caller: Optional[User], payload: Any) -> ActionResult:
        """Create a new invoice."""
        return await self._run(
            lambda: self.invoice_service.create_invoice(caller, validate_form(InvoiceForm, payload)),
            "Failed to create invoice",
            status_code=201,
        )

    async def get_invoice(self, caller: Optional[User], invoice_id: Any) -> ActionResult:
        """Get invoice by ID."""
        return await self._run(
            lambda: self.invoice_service.get_invoice(caller, parse_id(invoice_id, "invoice")),
            "Failed to fetch invoice",
        )

    async def list_invoices(
        self,
        caller: Optional[User],
        skip: int = 0,
        limit: int = 100,
        status: Optional[InvoiceStatus] = None,
    ) -> ActionResult:
        """List every invoice."""
        async def operation():
            invoices, total = await self.invoice_service.list_invoices(caller, skip, limit, status)
            return InvoiceListResponse(items=invoices, total=total)
        return await self._run(operation, "Failed to fetch invoices")

    async def list_client_invoices(
        self,
        caller: Optional[User],
        client_id: Any,
        skip: int = 0,
        limit: int = 100,
    ) -> ActionResult:
        """List invoices billed to one client."""
        async def operation():
            invoices, total = await self.invoice_service.list_client_invoices(
                caller, parse_id(client_id, "client"), skip, limit
            )
            return InvoiceListResponse(items=invoices, total=total)
        return await self._run(operation, "Failed to fetch invoices")

    async def update_invoice(self, caller: Optional[User], invoice_id: Any, payload: Any) -> ActionResult:
        """Update an invoice."""
        return await self._run(
            lambda: self.invoice_service.update_invoice(
                caller, parse_id(invoice_id, "invoice"), validate_form(InvoiceForm, payload)
            ),
            "Failed to update invoice",
        )

    async def delete_invoice(self, caller: Optional[User], invoice_id: Any) -> ActionResult:
        """Delete an invoice."""
        return await self._run(
            lambda: self.invoice_service.delete_invoice(caller, parse_id(invoice_id, "invoice")),
            "Failed to delete invoice",
        )

    async def mark_invoice_as_paid(self, caller: Optional[User], invoice_id: Any) -> ActionResult:
        """Mark an invoice as paid."""
        return await self._run(
            lambda: self.invoice_service.mark_invoice_as_paid(caller, parse_id(invoice_id, "invoice")),
            "Failed to mark invoice as paid",
        )
