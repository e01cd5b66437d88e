"""
Dashboard API endpoints.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.middleware import require_current_user
from app.api.v1.responses import envelope_response
from app.controllers.dashboard_controller import DashboardController
from app.db.session import get_db
from app.models.user import User

router = APIRouter()


@router.get("/admin")
async def get_admin_dashboard(
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Business-wide summary (admin)."""
    controller = DashboardController(db)
    return envelope_response(await controller.get_admin_dashboard(current_user))


@router.get("/client")
async def get_client_dashboard(
    client_id: Optional[UUID] = Query(None, description="Admins may view any client's dashboard"),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Summary of one client's projects, invoices and deliverables."""
    controller = DashboardController(db)
    return envelope_response(await controller.get_client_dashboard(current_user, client_id))
