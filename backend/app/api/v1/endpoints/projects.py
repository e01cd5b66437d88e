"""
Project API endpoints.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.middleware import require_current_user
from app.api.v1.responses import envelope_response
from app.controllers.project_controller import ProjectController
from app.db.session import get_db
from app.models.project import ProjectStatus
from app.models.user import User

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: Dict[str, Any] = Body(...),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Create a new project."""
    controller = ProjectController(db)
    return envelope_response(await controller.create_project(current_user, payload))


@router.get("")
async def list_projects(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    status: Optional[ProjectStatus] = Query(None),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """List every project (admin)."""
    controller = ProjectController(db)
    return envelope_response(await controller.list_projects(current_user, skip, limit, status))


@router.get("/client/{client_id}")
async def list_client_projects(
    client_id: UUID,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """List projects owned by a client."""
    controller = ProjectController(db)
    return envelope_response(await controller.list_client_projects(current_user, client_id, skip, limit))


@router.get("/{project_id}")
async def get_project(
    project_id: UUID,
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Get project with milestones, deliverables and progress."""
    controller = ProjectController(db)
    return envelope_response(await controller.get_project(current_user, project_id))


@router.put("/{project_id}")
async def update_project(
    project_id: UUID,
    payload: Dict[str, Any] = Body(...),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Update a project."""
    controller = ProjectController(db)
    return envelope_response(await controller.update_project(current_user, project_id, payload))


@router.delete("/{project_id}")
async def delete_project(
    project_id: UUID,
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Delete a project with its milestones and deliverables."""
    controller = ProjectController(db)
    return envelope_response(await controller.delete_project(current_user, project_id))
