"""
Shared schemas: the operation result envelope and embedded summaries.
"""

from pydantic import BaseModel, PrivateAttr
from typing import Any, Dict, List, Optional
from uuid import UUID


class FieldError(BaseModel):
    """Single field-level validation message."""
    field: str
    message: str


class ActionResult(BaseModel):
    """
    Uniform operation result.

    ``{"success": true, "data": ...}`` on success,
    ``{"success": false, "error": "...", "errors": [...]}`` on failure.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    errors: Optional[List[FieldError]] = None

    _status_code: int = PrivateAttr(default=200)

    @classmethod
    def ok(cls, data: Any = None, status_code: int = 200) -> "ActionResult":
        result = cls(success=True, data=data)
        result._status_code = status_code
        return result

    @classmethod
    def fail(
        cls,
        error: str,
        status_code: int = 500,
        errors: Optional[List[Dict[str, str]]] = None,
    ) -> "ActionResult":
        result = cls(
            success=False,
            error=error,
            errors=[FieldError(**e) for e in errors] if errors else None,
        )
        result._status_code = status_code
        return result

    @property
    def status_code(self) -> int:
        return self._status_code

    def to_body(self) -> Dict[str, Any]:
        """JSON-ready body with only the keys that apply to the outcome."""
        body = self.model_dump(mode="json")
        if self.success:
            body.pop("error")
            body.pop("errors")
        else:
            body.pop("data")
            if body["errors"] is None:
                body.pop("errors")
        return body


class UserSummary(BaseModel):
    """Embedded user info for project and invoice responses."""
    id: UUID
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    class Config:
        from_attributes = True


class ProjectSummary(BaseModel):
    """Embedded project info for invoice responses."""
    id: UUID
    title: str

    class Config:
        from_attributes = True
