"""
Converters from nullable wrapper values to plain model values.

Every converter is pure and total: an invalid wrapper degrades to an empty
string or ``None``, never to an error.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, NamedTuple, Optional

from sqlcmapper.models.nullable import (
    PgBool,
    PgFloat8,
    PgInt4,
    PgText,
    PgTimestamptz,
    PgUUID,
    WrapperKind,
)
from sqlcmapper.schemas.plan import FieldShape


def format_rfc3339(ts: datetime) -> str:
    """
    Format a datetime as RFC 3339 text with second precision.

    Keeps the datetime's own offset: ``Z`` for UTC, ``+HH:MM``/``-HH:MM``
    otherwise. Naive datetimes are treated as UTC.

    Args:
        ts: The datetime to format

    Returns:
        Text such as ``2024-01-02T03:04:05Z``
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)

    text = (
        f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d}"
        f"T{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d}"
    )

    offset = ts.utcoffset()
    # Sub-minute offset seconds are truncated toward zero.
    total_minutes = int(offset.total_seconds() / 60) if offset else 0
    if total_minutes == 0:
        return text + "Z"

    sign = "+" if total_minutes > 0 else "-"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


def pg_uuid_to_string(wrapper: PgUUID) -> str:
    """Canonical UUID text, or ``""`` when NULL."""
    if not wrapper.valid:
        return ""
    return str(uuid.UUID(bytes=wrapper.value))


def pg_text_to_optional_str(wrapper: PgText) -> Optional[str]:
    if not wrapper.valid:
        return None
    return wrapper.value


def pg_float8_to_optional_float(wrapper: PgFloat8) -> Optional[float]:
    if not wrapper.valid:
        return None
    return wrapper.value


def pg_int4_to_optional_int(wrapper: PgInt4) -> Optional[int]:
    if not wrapper.valid:
        return None
    return wrapper.value


def pg_bool_to_optional_bool(wrapper: PgBool) -> Optional[bool]:
    if not wrapper.valid:
        return None
    return wrapper.value


def pg_timestamptz_to_string(wrapper: PgTimestamptz) -> str:
    """RFC 3339 text of the timestamp, or ``""`` when NULL."""
    if not wrapper.valid:
        return ""
    return format_rfc3339(wrapper.value)


class WrapperConverter(NamedTuple):
    """A converter and the target field shape it produces."""

    convert: Callable[[Any], Any]
    target_shape: FieldShape


WRAPPER_CONVERTERS: Dict[WrapperKind, WrapperConverter] = {
    WrapperKind.UUID: WrapperConverter(pg_uuid_to_string, FieldShape.TEXT),
    WrapperKind.TEXT: WrapperConverter(pg_text_to_optional_str, FieldShape.OPTIONAL_TEXT),
    WrapperKind.FLOAT8: WrapperConverter(pg_float8_to_optional_float, FieldShape.OPTIONAL_FLOAT),
    WrapperKind.INT4: WrapperConverter(pg_int4_to_optional_int, FieldShape.OPTIONAL_INT),
    WrapperKind.BOOL: WrapperConverter(pg_bool_to_optional_bool, FieldShape.OPTIONAL_BOOL),
    WrapperKind.TIMESTAMPTZ: WrapperConverter(pg_timestamptz_to_string, FieldShape.TEXT),
}

_unregistered = set(WrapperKind) - set(WRAPPER_CONVERTERS)
if _unregistered:
    raise RuntimeError(
        f"No converter registered for wrapper kinds: {sorted(k.value for k in _unregistered)}"
    )
