"""
Milestone API endpoints.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.middleware import require_current_user
from app.api.v1.responses import envelope_response
from app.controllers.milestone_controller import MilestoneController
from app.db.session import get_db
from app.models.user import User

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_milestone(
    payload: Dict[str, Any] = Body(...),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Create a milestone."""
    controller = MilestoneController(db)
    return envelope_response(await controller.create_milestone(current_user, payload))


@router.get("")
async def list_milestones(
    project_id: UUID = Query(...),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """List a project's milestones in display order."""
    controller = MilestoneController(db)
    return envelope_response(await controller.list_milestones(current_user, project_id))


@router.post("/reorder")
async def reorder_milestones(
    project_id: UUID = Query(...),
    payload: Dict[str, Any] = Body(...),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Reorder a project's milestones. Body: ``{"milestone_ids": [...]}``."""
    controller = MilestoneController(db)
    return envelope_response(await controller.reorder_milestones(current_user, project_id, payload))


@router.get("/{milestone_id}")
async def get_milestone(
    milestone_id: UUID,
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Get milestone by ID."""
    controller = MilestoneController(db)
    return envelope_response(await controller.get_milestone(current_user, milestone_id))


@router.put("/{milestone_id}")
async def update_milestone(
    milestone_id: UUID,
    payload: Dict[str, Any] = Body(...),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Update a milestone."""
    controller = MilestoneController(db)
    return envelope_response(await controller.update_milestone(current_user, milestone_id, payload))


@router.post("/{milestone_id}/toggle")
async def toggle_milestone_complete(
    milestone_id: UUID,
    project_id: Optional[UUID] = Query(None),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Flip a milestone between complete and incomplete."""
    controller = MilestoneController(db)
    return envelope_response(
        await controller.toggle_milestone_complete(current_user, milestone_id, project_id)
    )


@router.delete("/{milestone_id}")
async def delete_milestone(
    milestone_id: UUID,
    project_id: Optional[UUID] = Query(None),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Delete a milestone."""
    controller = MilestoneController(db)
    return envelope_response(await controller.delete_milestone(current_user, milestone_id, project_id))
