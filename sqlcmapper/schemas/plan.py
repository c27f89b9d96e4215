"""Mapping descriptors built once per target model type.

A ``MappingPlan`` lists, for every field of a pydantic target model, the
source name to resolve and the classification of its declared type. The
mapper consults the plan instead of re-inspecting annotations on every call.
"""

from __future__ import annotations

import types
import uuid
from collections.abc import Mapping as AbcMapping
from collections.abc import Sequence as AbcSequence
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from inspect import isclass
from typing import Any, Callable, Dict, Optional, Tuple, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field
from pydantic.fields import FieldInfo

from sqlcmapper.models.errors import create_invalid_target_error
from sqlcmapper.models.nullable import ZERO_TIME

DB_TAG = "db"

_SEQUENCE_ORIGINS = (list, tuple, AbcSequence)
_UNION_ORIGINS = (Union, types.UnionType)
# Factories so mutable zeros are never shared between mapped instances.
_ZERO_FACTORIES: Dict[Any, Callable[[], Any]] = {
    str: str,
    int: int,
    float: float,
    bool: bool,
    bytes: bytes,
    Decimal: Decimal,
    datetime: lambda: ZERO_TIME,
    date: lambda: date(1, 1, 1),
    time: time,
    timedelta: timedelta,
    uuid.UUID: lambda: uuid.UUID(int=0),
    dict: dict,
    AbcMapping: dict,
    set: set,
    frozenset: frozenset,
}


class FieldShape(str, Enum):
    """Classification of a declared target type."""

    TEXT = "text"
    OPTIONAL_TEXT = "optional_text"
    OPTIONAL_FLOAT = "optional_float"
    OPTIONAL_INT = "optional_int"
    OPTIONAL_BOOL = "optional_bool"
    NESTED = "nested"
    SEQUENCE = "sequence"
    SCALAR = "scalar"


_OPTIONAL_SHAPES = {
    str: FieldShape.OPTIONAL_TEXT,
    float: FieldShape.OPTIONAL_FLOAT,
    int: FieldShape.OPTIONAL_INT,
    bool: FieldShape.OPTIONAL_BOOL,
}


class TypePlan(BaseModel):
    """Classified declared type of a field or sequence element."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    shape: FieldShape
    annotation: Any
    # Declared type with ``Optional`` removed.
    base: Any
    optional: bool = False
    model: Optional[Any] = None
    element: Optional[TypePlan] = None

    def describe(self) -> str:
        """Readable form of the declared type, for diagnostics."""
        if isclass(self.annotation):
            return self.annotation.__name__
        return str(self.annotation)

    def scalar_zero(self) -> Any:
        """
        Zero value for non-nested shapes.

        Generic types resolve through their origin (``Dict[str, int]`` -> ``{}``).
        Returns ``None`` for optional types and for types with no zero value
        (``Enum``, ``Literal``, arbitrary classes).
        """
        if self.optional:
            return None
        if self.shape is FieldShape.SEQUENCE:
            return []
        factory = _ZERO_FACTORIES.get(get_origin(self.base) or self.base)
        return factory() if factory else None


class FieldPlan(BaseModel):
    """Resolution rule for one target field."""

    model_config = ConfigDict(frozen=True)

    name: str
    # Key the target model accepts for this field in model_validate input.
    input_key: str
    source_name: str
    type: TypePlan
    has_default: bool


class MappingPlan(BaseModel):
    """Ordered field plans for one target model type."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    target: Any
    fields: Tuple[FieldPlan, ...]


def db_field(name: str, default: Any = ..., **kwargs: Any) -> Any:
    """
    Declare a model field whose value is read from source field ``name``.

    Wraps ``pydantic.Field`` and records the source name under the ``db`` key
    of ``json_schema_extra``.

    Args:
        name: Source field name to resolve against
        default: Field default; omitted means the field is required
        **kwargs: Forwarded to ``pydantic.Field``

    Returns:
        A pydantic ``FieldInfo``
    """
    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    extra[DB_TAG] = name
    return Field(default, json_schema_extra=extra, **kwargs)


def source_name_for(name: str, info: FieldInfo) -> str:
    """Return the ``db`` annotation of a field, or its own name."""
    extra = info.json_schema_extra
    if isinstance(extra, dict):
        tag = extra.get(DB_TAG)
        if isinstance(tag, str) and tag:
            return tag
    return name


def _input_key(name: str, info: FieldInfo) -> str:
    if isinstance(info.validation_alias, str):
        return info.validation_alias
    return info.alias or name


def _strip_optional(annotation: Any) -> Tuple[Any, bool]:
    if get_origin(annotation) in _UNION_ORIGINS:
        args = get_args(annotation)
        non_none = [arg for arg in args if arg is not type(None)]
        if len(non_none) == 1 and len(args) == 2:
            return non_none[0], True
        if len(non_none) < len(args):
            # Union of several types plus None stays a scalar union.
            return annotation, True
    return annotation, False


def _is_model_type(value: Any) -> bool:
    return isclass(value) and issubclass(value, BaseModel)


def classify_annotation(annotation: Any) -> TypePlan:
    """
    Classify a declared type into a ``TypePlan``.

    Args:
        annotation: The declared type of a field or sequence element

    Returns:
        TypePlan describing the shape the mapper should populate
    """
    base, optional = _strip_optional(annotation)

    if _is_model_type(base):
        return TypePlan(
            shape=FieldShape.NESTED,
            annotation=annotation,
            base=base,
            optional=optional,
            model=base,
        )

    origin = get_origin(base)
    if base in (list, tuple) or origin in _SEQUENCE_ORIGINS:
        args = [arg for arg in get_args(base) if arg is not Ellipsis]
        element = classify_annotation(args[0] if args else Any)
        return TypePlan(
            shape=FieldShape.SEQUENCE,
            annotation=annotation,
            base=base,
            optional=optional,
            element=element,
        )

    if optional and base in _OPTIONAL_SHAPES:
        return TypePlan(
            shape=_OPTIONAL_SHAPES[base],
            annotation=annotation,
            base=base,
            optional=True,
        )

    if base is str and not optional:
        return TypePlan(shape=FieldShape.TEXT, annotation=annotation, base=base)

    return TypePlan(
        shape=FieldShape.SCALAR,
        annotation=annotation,
        base=base,
        optional=optional or annotation is Any,
    )


def build_plan(target: Any) -> MappingPlan:
    """
    Return the mapping plan for a pydantic model type, building it on first use.

    Args:
        target: A ``pydantic.BaseModel`` subclass

    Returns:
        MappingPlan with one FieldPlan per declared field, in declaration order

    Raises:
        MappingError: If ``target`` is not a pydantic model class
    """
    if not _is_model_type(target):
        raise create_invalid_target_error(target, "expected a pydantic BaseModel subclass")
    return _cached_plan(target)


@lru_cache(maxsize=None)
def _cached_plan(target: type) -> MappingPlan:
    fields = []
    for name, info in target.model_fields.items():
        fields.append(
            FieldPlan(
                name=name,
                input_key=_input_key(name, info),
                source_name=source_name_for(name, info),
                type=classify_annotation(info.annotation),
                has_default=not info.is_required(),
            )
        )
    return MappingPlan(target=target, fields=tuple(fields))
