"""
User API endpoints.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.middleware import get_external_identity, require_current_user
from app.api.v1.responses import envelope_response
from app.controllers.user_controller import UserController
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import ExternalIdentity

router = APIRouter()


@router.post("/sync")
async def sync_current_user(
    identity: Optional[ExternalIdentity] = Depends(get_external_identity),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Create the local user for the signed-in identity, or return the existing one."""
    controller = UserController(db)
    return envelope_response(await controller.sync_current_user(identity))


@router.get("/me")
async def get_me(
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Get the caller's own user."""
    controller = UserController(db)
    return envelope_response(await controller.get_user(current_user, current_user.id))


@router.get("")
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """List all users (admin)."""
    controller = UserController(db)
    return envelope_response(await controller.list_users(current_user, skip, limit))


@router.get("/clients")
async def list_clients(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """List users with the CLIENT role (admin)."""
    controller = UserController(db)
    return envelope_response(await controller.list_clients(current_user, skip, limit))


@router.get("/{user_id}")
async def get_user(
    user_id: UUID,
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    controller = UserController(db)
    return envelope_response(await controller.get_user(current_user, user_id))


@router.put("/{user_id}/role")
async def update_user_role(
    user_id: UUID,
    payload: Dict[str, Any] = Body(...),
    current_user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Change a user's role (admin)."""
    controller = UserController(db)
    return envelope_response(await controller.update_user_role(current_user, user_id, payload))
