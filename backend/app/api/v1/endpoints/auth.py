"""
Authentication API endpoints for Entra ID SSO.
"""

import secrets
from typing import Optional
from urllib.parse import urlencode, urlsplit

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.responses import envelope_response
from app.controllers.auth_controller import AuthController
from app.core.config import settings
from app.core.logging import get_logger
from app.db.session import get_db
from app.schemas.user import AuthCallbackRequest

logger = get_logger(__name__)

router = APIRouter()


def _is_frontend_url(url: str) -> bool:
    """True when ``url`` has the frontend's scheme and host and a path under its path."""
    allowed = urlsplit(settings.FRONTEND_URL)
    candidate = urlsplit(url)
    if (candidate.scheme, candidate.netloc) != (allowed.scheme, allowed.netloc):
        return False
    base_path = allowed.path.rstrip("/")
    return candidate.path == base_path or candidate.path.startswith(base_path + "/")


def _frontend_callback_url(state: Optional[str]) -> str:
    """Frontend URL carried in the state as ``<nonce>:<url>``, else the configured default."""
    if state and ":" in state:
        _, frontend_url = state.split(":", 1)
        if _is_frontend_url(frontend_url):
            return frontend_url
        logger.warning("Ignoring redirect outside the frontend", extra={"redirect": frontend_url})
    return f"{settings.FRONTEND_URL}/auth/callback"


@router.get("/login")
async def login(
    redirect_uri: Optional[str] = Query(None, description="Frontend redirect URI after login"),
    db: AsyncSession = Depends(get_db),
):
    """
    Initiate SSO login flow with Entra ID.
    
    The frontend redirect URI travels in the state; the OAuth redirect URI is
    always the backend callback registered as AZURE_REDIRECT_URI.
    """
    state = secrets.token_urlsafe(32)
    if redirect_uri:
        state = f"{state}:{redirect_uri}"
    
    controller = AuthController(db)
    result = await controller.get_authorization_url(state=state)
    if not result.success:
        return envelope_response(result)
    return RedirectResponse(url=result.data)


@router.get("/callback")
async def callback(
    code: str = Query(..., description="Authorization code from Entra ID"),
    state: Optional[str] = Query(None, description="State parameter for CSRF protection"),
    db: AsyncSession = Depends(get_db),
):
    """
    Handle OAuth callback from Entra ID.
    Redirects to the frontend with the bearer token, or with an error code.
    """
    controller = AuthController(db)
    result = await controller.login(code)
    frontend_url = _frontend_callback_url(state)
    
    if not result.success:
        return RedirectResponse(url=f"{settings.FRONTEND_URL}/sign-in?{urlencode({'error': result.error})}")
    
    params = {
        "token": result.data.token.access_token,
        "email": result.data.user.email,
    }
    return RedirectResponse(url=f"{frontend_url}?{urlencode(params)}")


@router.post("/callback")
async def callback_post(
    callback_data: AuthCallbackRequest,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """
    Handle OAuth callback from Entra ID (POST method).
    Returns the token and synced user in the envelope.
    """
    controller = AuthController(db)
    return envelope_response(await controller.login(callback_data.code))


@router.get("/logout")
async def logout():
    """
    Logout endpoint.
    Tokens are stateless; the client discards its token and may follow the
    provider logout URL.
    """
    logout_url = f"{settings.AZURE_AUTHORITY}/{settings.AZURE_TENANT_ID}/oauth2/v2.0/logout"
    return {"success": True, "data": {"logout_url": logout_url}}
