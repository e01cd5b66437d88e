"""
Deliverable API endpoints.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.middleware import require_current_user
from app.api.v1.responses import envelope_response
from app.controllers.deliverable_controller import DeliverableController
from app.db.session import get_db
from app.models.user import User

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_deliverable(
    payload: Dict[str, Any] = Body(...),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Record a deliverable."""
    controller = DeliverableController(db)
    return envelope_response(await controller.create_deliverable(current_user, payload))


@router.get("")
async def list_deliverables(
    project_id: UUID = Query(...),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """List a project's deliverables, newest first."""
    controller = DeliverableController(db)
    return envelope_response(await controller.list_deliverables(current_user, project_id))


@router.get("/{deliverable_id}")
async def get_deliverable(
    deliverable_id: UUID,
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    controller = DeliverableController(db)
    return envelope_response(await controller.get_deliverable(current_user, deliverable_id))


@router.put("/{deliverable_id}")
async def update_deliverable(
    deliverable_id: UUID,
    payload: Dict[str, Any] = Body(...),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    controller = DeliverableController(db)
    return envelope_response(await controller.update_deliverable(current_user, deliverable_id, payload))


@router.delete("/{deliverable_id}")
async def delete_deliverable(
    deliverable_id: UUID,
    project_id: Optional[UUID] = Query(None),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    controller = DeliverableController(db)
    return envelope_response(
        await controller.delete_deliverable(current_user, deliverable_id, project_id)
    )
