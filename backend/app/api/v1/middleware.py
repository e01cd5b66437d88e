"""
API middleware for authentication.
Turns the bearer token into the caller's identity and local user.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import UnauthorizedError
from app.core.security import decode_access_token
from app.db.session import get_db
from app.deps.di_container import get_container
from app.models.user import User
from app.schemas.user import ExternalIdentity
from app.services.user_service import UserService

security = HTTPBearer(auto_error=False)


async def get_external_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[ExternalIdentity]:
    """
    Identity asserted by the bearer token, or None.
    
    The token's ``sub`` is the identity-provider subject id; profile claims
    are optional.
    """
    if credentials is None:
        return None
    
    payload = decode_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        return None
    
    return ExternalIdentity(
        subject=payload["sub"],
        email=payload.get("email") or "",
        first_name=payload.get("given_name"),
        last_name=payload.get("family_name"),
    )


async def require_current_user(
    identity: Optional[ExternalIdentity] = Depends(get_external_identity),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Centralized authentication dependency.
    Resolves the caller to a local user, syncing it on first sight.
    
    Usage:
        @router.get("/endpoint")
        async def my_endpoint(
            current_user: User = Depends(require_current_user)
        ):
            ...
    
    Raises:
        HTTPException: 401 if there is no valid token
    """
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    try:
        return await UserService(db, get_container().invalidation_bus()).resolve_user(identity)
    except UnauthorizedError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
