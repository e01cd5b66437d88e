"""
Health check response schemas.
"""

from pydantic import BaseModel
from typing import Dict


class HealthResponse(BaseModel):
    """Overall status plus one entry per dependency check."""
    status: str
    uptime: str
    checks: Dict[str, str] = {}
