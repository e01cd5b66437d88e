"""
Base controller class.
Controllers validate raw payloads, call services and return the uniform
``ActionResult`` envelope. Nothing raised by a service escapes a controller.
"""

from abc import ABC
from typing import Any, Awaitable, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppException, FormValidationError
from app.core.integrations.observability import record_exception
from app.core.invalidation import InvalidationBus
from app.core.logging import get_logger
from app.schemas.common import ActionResult

logger = get_logger(__name__)


class BaseController(ABC):
    """Base controller class for all controllers."""

    def __init__(self, session: Optional[AsyncSession] = None):
        self.session = session

    @staticmethod
    def _bus(bus: Optional[InvalidationBus]) -> InvalidationBus:
        if bus is not None:
            return bus
        from app.deps.di_container import get_container
        return get_container().invalidation_bus()

    async def _run(
        self,
        operation: Callable[[], Awaitable[Any]],
        fallback: str,
        status_code: int = 200,
    ) -> ActionResult:
        """
        Await ``operation`` and wrap its outcome.

        Args:
            operation: Zero-argument callable returning the service coroutine
            fallback: Message used when persistence or an unexpected error fails the call
            status_code: HTTP status for a successful outcome
        """
        try:
            data = await operation()
        except AppException as e:
            errors = e.errors if isinstance(e, FormValidationError) else None
            return ActionResult.fail(e.message, e.status_code, errors)
        except SQLAlchemyError as e:
            await self._rollback()
            logger.exception(fallback, extra={"exception_type": type(e).__name__})
            record_exception(e)
            return ActionResult.fail(fallback, 500)
        except Exception as e:
            await self._rollback()
            logger.exception(fallback, extra={"exception_type": type(e).__name__})
            record_exception(e)
            return ActionResult.fail(fallback, 500)
        return ActionResult.ok(data, status_code)

    async def _rollback(self) -> None:
        if self.session is None:
            return
        try:
            await self.session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed")
