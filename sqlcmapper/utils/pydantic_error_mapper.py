"""Convert Pydantic validation errors to the MappingError contract."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from sqlcmapper.models.errors import MappingError, create_construction_error


def _loc_to_field(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc if part != "__root__"]
    return ".".join(parts)


def _clean_pydantic_message(message: str) -> str:
    if message.startswith("Value error, "):
        return message[len("Value error, ") :]
    return message


def _join_path(prefix: Optional[str], field: str) -> Optional[str]:
    if prefix and field:
        return f"{prefix}.{field}"
    return prefix or field or None


def map_pydantic_validation_error(error: ValidationError, path: Optional[str] = None) -> MappingError:
    """Map a model construction ValidationError to a CONSTRUCTION_ERROR MappingError.

    ``path`` is the dotted location of the model being built, prefixed to the
    failing field.
    """
    issues = error.errors()
    if not issues:
        return create_construction_error(
            f"Cannot construct {error.title}", field_path=path, original_error=error
        )

    first = issues[0]
    field = _loc_to_field(first.get("loc", ()))
    message = _clean_pydantic_message(first.get("msg", "Invalid value"))
    field_path = _join_path(path, field)

    if field_path:
        return create_construction_error(
            f"Invalid {field_path}: {message}", field_path=field_path, original_error=error
        )
    return create_construction_error(message, original_error=error)
