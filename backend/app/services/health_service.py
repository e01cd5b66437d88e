"""
Health service.
Reports uptime and whether the database answers.
"""

import time
from sqlalchemy.exc import SQLAlchemyError

from app.core.logging import get_logger
from app.db import session as db_session
from app.db.repositories.health_repository import HealthRepository
from app.schemas.health import HealthResponse

logger = get_logger(__name__)


class HealthService:
    """Service for health check operations."""
    
    def __init__(self):
        self.start_time = time.time()
    
    async def get_health(self) -> HealthResponse:
        """
        Get system health status.
        
        Returns:
            HealthResponse with status, uptime, and checks
        """
        uptime_seconds = int(time.time() - self.start_time)
        checks = {"database": await self._check_database()}
        status = "ok" if all(check == "ok" for check in checks.values()) else "degraded"
        
        return HealthResponse(
            status=status,
            uptime=f"PT{uptime_seconds}S",  # ISO 8601 duration
            checks=checks,
        )
    
    async def _check_database(self) -> str:
        if db_session.async_session_maker is None:
            return "not initialized"
        try:
            async with db_session.async_session_maker() as session:
                ok = await HealthRepository(session).check_database()
        except SQLAlchemyError as e:
            logger.warning("Database health check failed", extra={"error": str(e)})
            return "error"
        return "ok" if ok else "error"
