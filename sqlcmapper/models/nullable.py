"""
Nullable column wrapper types produced by the database access layer.

Each wrapper is a ``(valid, value)`` pair distinguishing SQL NULL from a
present value. ``value`` is meaningful only when ``valid`` is true and
defaults to the zero value of its payload type.

The set of wrappers is closed: ``WrapperKind`` enumerates every shape the
mapper knows how to convert, and each wrapper class declares its kind.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

INT4_MIN = -(2**31)
INT4_MAX = 2**31 - 1
UUID_BYTE_LENGTH = 16

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


class WrapperKind(str, Enum):
    """Closed set of nullable wrapper shapes."""

    TEXT = "text"
    FLOAT8 = "float8"
    INT4 = "int4"
    BOOL = "bool"
    TIMESTAMPTZ = "timestamptz"
    UUID = "uuid"


class NullableValue(BaseModel):
    """Base for nullable wrappers: immutable, strictly typed, no extras."""

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    kind: ClassVar[WrapperKind]

    valid: bool = False

    @classmethod
    def from_value(cls, value: Optional[Any]):
        """Wrap a raw column value; ``None`` becomes an invalid wrapper."""
        if value is None:
            return cls(valid=False)
        return cls(valid=True, value=value)


class PgText(NullableValue):
    """Nullable text column."""

    kind: ClassVar[WrapperKind] = WrapperKind.TEXT

    value: str = ""


class PgFloat8(NullableValue):
    """Nullable double precision column."""

    kind: ClassVar[WrapperKind] = WrapperKind.FLOAT8

    value: float = 0.0


class PgInt4(NullableValue):
    """Nullable 32-bit integer column."""

    kind: ClassVar[WrapperKind] = WrapperKind.INT4

    value: int = Field(default=0, ge=INT4_MIN, le=INT4_MAX)


class PgBool(NullableValue):
    """Nullable boolean column."""

    kind: ClassVar[WrapperKind] = WrapperKind.BOOL

    value: bool = False


class PgTimestamptz(NullableValue):
    """Nullable timestamp-with-time-zone column."""

    kind: ClassVar[WrapperKind] = WrapperKind.TIMESTAMPTZ

    value: datetime = ZERO_TIME


class PgUUID(NullableValue):
    """Nullable UUID column, carried as its 16 raw bytes."""

    kind: ClassVar[WrapperKind] = WrapperKind.UUID

    value: bytes = bytes(UUID_BYTE_LENGTH)

    @field_validator("value", mode="before")
    @classmethod
    def coerce_uuid(cls, value: Any) -> Any:
        """Accept ``uuid.UUID`` instances as well as raw bytes."""
        if isinstance(value, uuid.UUID):
            return value.bytes
        return value

    @field_validator("value")
    @classmethod
    def validate_length(cls, value: bytes) -> bytes:
        """A UUID payload is exactly 16 bytes."""
        if len(value) != UUID_BYTE_LENGTH:
            raise ValueError(
                f"Invalid uuid: expected {UUID_BYTE_LENGTH} bytes, got {len(value)}"
            )
        return value

