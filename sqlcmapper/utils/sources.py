"""
Field access over source records.

A source record is any struct-shaped value produced by the database access
layer: pydantic models, dataclass instances, named tuples, mappings (including
``sqlite3.Row``) and plain objects with public attributes. Nullable wrappers
are values, not records.
"""

import dataclasses
import sqlite3
import types
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Dict
from uuid import UUID

from pydantic import BaseModel

from sqlcmapper.models.nullable import NullableValue

_ATOMIC_TYPES = (
    str, bytes, bytearray, int, float, complex, bool, Decimal,
    date, datetime, time, timedelta, UUID, Enum, type(None),
)


def _is_named_tuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(value, "_asdict")


def is_record(value: Any) -> bool:
    """Whether ``value`` is struct-shaped and can be mapped field by field."""
    if isinstance(value, (NullableValue, type)) or isinstance(value, _ATOMIC_TYPES):
        return False
    if isinstance(value, (BaseModel, Mapping, sqlite3.Row)):
        return True
    if dataclasses.is_dataclass(value) or _is_named_tuple(value):
        return True
    if isinstance(value, (list, tuple, set, frozenset, types.ModuleType)) or callable(value):
        return False
    return hasattr(value, "__dict__")


def is_sequence(value: Any) -> bool:
    """Whether ``value`` is a list or tuple that maps onto a sequence field."""
    return isinstance(value, (list, tuple)) and not _is_named_tuple(value)


def source_fields(record: Any) -> Dict[str, Any]:
    """
    Collect the fields of a source record in declaration order.

    Args:
        record: A value for which ``is_record`` holds

    Returns:
        Ordered mapping of field name to value
    """
    if isinstance(record, BaseModel):
        return {name: getattr(record, name) for name in type(record).model_fields}
    if isinstance(record, sqlite3.Row):
        return {key: record[key] for key in record.keys()}
    if isinstance(record, Mapping):
        return {str(key): value for key, value in record.items()}
    if dataclasses.is_dataclass(record):
        return {f.name: getattr(record, f.name) for f in dataclasses.fields(record)}
    if _is_named_tuple(record):
        return dict(record._asdict())
    return {name: value for name, value in vars(record).items() if not name.startswith("_")}
