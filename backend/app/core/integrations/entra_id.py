"""
Entra ID (Azure AD) authentication integration.
Handles SSO sign-in using Microsoft Entra ID; the only identity provider.
"""

import httpx
from typing import Optional, Dict, Any
from msal import ConfidentialClientApplication
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

GRAPH_ME_ENDPOINT = "https://graph.microsoft.com/v1.0/me"


class EntraIDAuth:
    """Entra ID authentication handler."""
    
    def __init__(self):
        """Initialize Entra ID client."""
        self.authority = f"{settings.AZURE_AUTHORITY}/{settings.AZURE_TENANT_ID}"
        self.client_id = settings.AZURE_CLIENT_ID
        self.client_secret = settings.AZURE_CLIENT_SECRET
        self.redirect_uri = settings.AZURE_REDIRECT_URI
        self.scopes = settings.AZURE_SCOPES
        
        logger.info(
            "Initializing Entra ID client",
            extra={
                "authority": self.authority,
                "client_id": self.client_id[:8] + "..." if self.client_id else None,
                "redirect_uri": self.redirect_uri,
                "scopes": self.scopes,
            }
        )
        
        if not self.validate_config():
            logger.warning("Entra ID configuration is incomplete; sign-in will fail")

        self._app: Optional[ConfidentialClientApplication] = None

    @property
    def app(self) -> ConfidentialClientApplication:
        """MSAL client, built on first use. MSAL rejects an authority without a tenant."""
        if self._app is None:
            self._app = ConfidentialClientApplication(
                client_id=self.client_id,
                client_credential=self.client_secret,
                authority=self.authority,
            )
        return self._app

    def get_authorization_url(self, state: Optional[str] = None) -> str:
        """
        Generate authorization URL for SSO login.
        
        Args:
            state: Optional state parameter for CSRF protection
            
        Returns:
            Authorization URL to redirect user to
        """
        return self.app.get_authorization_request_url(
            scopes=self.scopes,
            redirect_uri=self.redirect_uri,
            state=state,
        )
    
    async def acquire_token_by_authorization_code(self, code: str) -> Dict[str, Any]:
        """
        Exchange authorization code for access token.
        
        Raises:
            ValueError: If MSAL reports an error
        """
        # MSAL is synchronous
        result = self.app.acquire_token_by_authorization_code(
            code=code,
            scopes=self.scopes,
            redirect_uri=self.redirect_uri,
        )
        
        if "error" in result:
            error_code = result.get("error", "Unknown error")
            error_details = result.get("error_description", "No description provided")
            correlation_id = result.get("correlation_id", "N/A")
            
            logger.error(
                "MSAL token acquisition failed",
                extra={
                    "error": error_code,
                    "error_description": error_details,
                    "correlation_id": correlation_id,
                }
            )
            raise ValueError(f"{error_code} - {error_details} (Correlation ID: {correlation_id})")
        
        logger.info("Acquired access token from Entra ID")
        return result
    
    async def get_user_info(self, access_token: str) -> Optional[Dict[str, Any]]:
        """
        Get the signed-in user's profile from Microsoft Graph.
        
        Returns:
            Profile dictionary or None if the request failed
        """
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }
        
        async with httpx.AsyncClient() as client:
            try:
                response = await client.get(GRAPH_ME_ENDPOINT, headers=headers)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPError as e:
                logger.warning("Microsoft Graph profile request failed", extra={"error": str(e)})
                return None
    
    def validate_config(self) -> bool:
        """True when every setting needed for sign-in is present."""
        return all([
            self.client_id,
            self.client_secret,
            self.redirect_uri,
            settings.AZURE_TENANT_ID,
        ])


# Global instance (lazy initialization)
_entra_id_auth_instance: Optional[EntraIDAuth] = None


def get_entra_id_auth() -> EntraIDAuth:
    """Get or create Entra ID auth instance."""
    global _entra_id_auth_instance
    if _entra_id_auth_instance is None:
        _entra_id_auth_instance = EntraIDAuth()
    return _entra_id_auth_instance
