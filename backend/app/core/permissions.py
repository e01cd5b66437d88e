"""
Authorization rules shared by every domain service.

Admins administer every record. Clients may read the records they own
(projects and invoices billed to them, plus the children of their projects)
and may not mutate anything.
"""

from typing import Optional
from uuid import UUID

from app.core.exceptions import UnauthorizedError, ForbiddenError
from app.models.user import User


def require_authenticated(caller: Optional[User]) -> User:
    """Return the caller or raise UnauthorizedError."""
    if caller is None:
        raise UnauthorizedError()
    return caller


def require_admin(caller: Optional[User]) -> User:
    """Caller must be authenticated and hold the ADMIN role."""
    caller = require_authenticated(caller)
    if not caller.is_admin:
        raise ForbiddenError()
    return caller


def can_read_owned(caller: User, owner_id: Optional[UUID]) -> bool:
    return caller.is_admin or (owner_id is not None and caller.id == owner_id)


def require_owner_or_admin(caller: Optional[User], owner_id: Optional[UUID]) -> User:
    """Caller must be an admin or the owning client of the record."""
    caller = require_authenticated(caller)
    if not can_read_owned(caller, owner_id):
        raise ForbiddenError()
    return caller
