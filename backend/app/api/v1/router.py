"""
API v1 router that aggregates all endpoint routers.
All routes require authentication except health, auth and user sync.
"""

from fastapi import APIRouter, Depends
from app.api.v1.middleware import require_current_user

from app.api.v1.endpoints import (
    health,
    auth,
    users,
    projects,
    milestones,
    deliverables,
    invoices,
    dashboard,
    invalidation,
)

api_router = APIRouter()

# Public routes (no authentication required)
api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])

# Sync authenticates per endpoint: it must run before the caller has a local user
api_router.include_router(users.router, prefix="/users", tags=["users"])

# Protected routes (authentication required for all endpoints)
api_router.include_router(
    projects.router,
    prefix="/projects",
    tags=["projects"],
    dependencies=[Depends(require_current_user)],
)
api_router.include_router(
    milestones.router,
    prefix="/milestones",
    tags=["milestones"],
    dependencies=[Depends(require_current_user)],
)
api_router.include_router(
    deliverables.router,
    prefix="/deliverables",
    tags=["deliverables"],
    dependencies=[Depends(require_current_user)],
)
api_router.include_router(
    invoices.router,
    prefix="/invoices",
    tags=["invoices"],
    dependencies=[Depends(require_current_user)],
)
api_router.include_router(
    dashboard.router,
    prefix="/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(require_current_user)],
)
api_router.include_router(
    invalidation.router,
    prefix="/invalidation",
    tags=["invalidation"],
    dependencies=[Depends(require_current_user)],
)
