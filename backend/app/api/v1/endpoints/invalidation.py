"""
Invalidation API endpoint.
Views poll topic versions and refetch whatever moved since their last read.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.api.v1.middleware import require_current_user
from app.api.v1.responses import envelope_response
from app.deps.di_container import get_container
from app.models.user import User
from app.schemas.common import ActionResult
from app.schemas.invalidation import InvalidationVersionsResponse

router = APIRouter()


@router.get("")
async def get_topic_versions(
    topic: Optional[List[str]] = Query(None, description="Topics to report; all known topics when omitted"),
    current_user: User = Depends(require_current_user),
) -> JSONResponse:
    """Current version of each invalidation topic."""
    bus = get_container().invalidation_bus()
    versions = bus.versions(topic or ())
    return envelope_response(ActionResult.ok(InvalidationVersionsResponse(topics=versions)))
