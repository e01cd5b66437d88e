"""
Base service class.
Services contain business logic and coordinate repositories.
"""

from abc import ABC
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.invalidation import InvalidationBus


class BaseService(ABC):
    """Base service class for domain services."""

    def __init__(self, session: AsyncSession, bus: Optional[InvalidationBus] = None):
        self.session = session
        self.bus = bus

    def _invalidate(self, *topics: str) -> None:
        """Publish invalidation topics once the mutation has committed."""
        if self.bus is not None:
            self.bus.publish(*topics)

    def _retire(self, *topics: str) -> None:
        """Drop topics whose subject no longer exists."""
        if self.bus is not None:
            self.bus.retire(*topics)
