"""Map database records with nullable column wrappers onto pydantic models."""

from sqlcmapper.mapper import GenericMapper, map_many, map_one
from sqlcmapper.models.errors import ErrorCode, MappingError
from sqlcmapper.models.nullable import (
    NullableValue,
    PgBool,
    PgFloat8,
    PgInt4,
    PgText,
    PgTimestamptz,
    PgUUID,
    WrapperKind,
)
from sqlcmapper.schemas.plan import db_field

__all__ = [
    "map_one",
    "map_many",
    "GenericMapper",
    "db_field",
    "MappingError",
    "ErrorCode",
    "NullableValue",
    "WrapperKind",
    "PgText",
    "PgFloat8",
    "PgInt4",
    "PgBool",
    "PgTimestamptz",
    "PgUUID",
]
