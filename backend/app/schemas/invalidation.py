"""
Invalidation topic schemas.
"""

from pydantic import BaseModel
from typing import Dict


class InvalidationVersionsResponse(BaseModel):
    """Current version per topic. A changed version means refetch."""
    topics: Dict[str, int]
