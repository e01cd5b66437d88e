"""
Invoice API endpoints.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.middleware import require_current_user
from app.api.v1.responses import envelope_response
from app.controllers.invoice_controller import InvoiceController
from app.db.session import get_db
from app.models.invoice import InvoiceStatus
from app.models.user import User

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_invoice(
    payload: Dict[str, Any] = Body(...),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Create a new invoice."""
    controller = InvoiceController(db)
    return envelope_response(await controller.create_invoice(current_user, payload))


@router.get("")
async def list_invoices(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    status: Optional[InvoiceStatus] = Query(None),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """List every invoice (admin)."""
    controller = InvoiceController(db)
    return envelope_response(await controller.list_invoices(current_user, skip, limit, status))


@router.get("/client/{client_id}")
async def list_client_invoices(
    client_id: UUID,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """List invoices billed to a client."""
    controller = InvoiceController(db)
    return envelope_response(await controller.list_client_invoices(current_user, client_id, skip, limit))


@router.get("/{invoice_id}")
async def get_invoice(
    invoice_id: UUID,
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Get invoice with client and project summaries."""
    controller = InvoiceController(db)
    return envelope_response(await controller.get_invoice(current_user, invoice_id))


@router.put("/{invoice_id}")
async def update_invoice(
    invoice_id: UUID,
    payload: Dict[str, Any] = Body(...),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Update an invoice."""
    controller = InvoiceController(db)
    return envelope_response(await controller.update_invoice(current_user, invoice_id, payload))


@router.post("/{invoice_id}/mark-paid")
async def mark_invoice_as_paid(
    invoice_id: UUID,
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Mark an invoice as paid."""
    controller = InvoiceController(db)
    return envelope_response(await controller.mark_invoice_as_paid(current_user, invoice_id))


@router.delete("/{invoice_id}")
async def delete_invoice(
    invoice_id: UUID,
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Delete an invoice."""
    controller = InvoiceController(db)
    return envelope_response(await controller.delete_invoice(current_user, invoice_id))
