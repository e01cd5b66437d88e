"""
Form payload validation.

Every mutation runs its raw payload through ``validate_form`` before touching
storage. A payload is either accepted whole or rejected with field-level
messages.
"""

from typing import Any, Mapping, Type, TypeVar
from uuid import UUID

from pydantic import BaseModel, ValidationError

from app.core.exceptions import FormValidationError, serialize_validation_errors

FormType = TypeVar("FormType", bound=BaseModel)


def empty_to_none(value: Any) -> Any:
    """Optional form fields submitted as "" mean "absent"."""
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def require_reference(value: Any, message: str) -> Any:
    """Reject a missing or blank reference id with a readable message."""
    if value is None or (isinstance(value, str) and value.strip() == ""):
        raise ValueError(message)
    return value


def check_length(value: str, label: str, min_length: int, max_length: int) -> str:
    if len(value) < min_length:
        raise ValueError(f"{label} must be at least {min_length} characters")
    if len(value) > max_length:
        raise ValueError(f"{label} must be less than {max_length} characters")
    return value


def validate_form(schema: Type[FormType], payload: Any) -> FormType:
    """
    Validate a raw payload against a form schema.

    Raises:
        FormValidationError: with ``{field, message}`` entries for every problem
    """
    if isinstance(payload, schema):
        return payload
    if not isinstance(payload, Mapping):
        raise FormValidationError([{"field": "__root__", "message": "Payload must be an object"}])
    try:
        return schema.model_validate(dict(payload))
    except ValidationError as e:
        raise FormValidationError(serialize_validation_errors(e.errors()))


def parse_id(value: Any, entity: str) -> UUID:
    """Coerce an id argument, reporting malformed ids as a validation failure."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise FormValidationError([{"field": "id", "message": f"Invalid {entity} id"}])
