"""
Structural auto-mapper from database records to pydantic models.

Walks the fields of a target model (via its cached ``MappingPlan``), resolves
each one against the source record by ``db`` annotation or name-casing
convention, converts nullable wrappers, and recurses into nested records and
sequences.

Soft mismatches never fail a lenient mapping: a field with no matching
source, a wrapper whose converter does not fit the target, or a value that is
not assignable to the declared type leaves the field at its zero value (its
declared default, or the zero of its type such as ``""``, ``0``, ``None``,
``[]``, ``{}``, ``0001-01-01T00:00:00Z`` or an empty nested model).
Strict mapping raises ``MappingError`` for mismatches instead; missing source
fields are tolerated either way.
"""

from __future__ import annotations

import logging
import types
from functools import lru_cache, partial
from inspect import isclass
from typing import (
    Annotated,
    Any,
    Callable,
    Dict,
    Generic,
    Iterable,
    List,
    Literal,
    Optional,
    Type,
    TypeVar,
    Union,
    get_origin,
)

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from sqlcmapper.config import get_config
from sqlcmapper.models.errors import create_invalid_source_error, create_shape_mismatch_error
from sqlcmapper.models.nullable import NullableValue
from sqlcmapper.schemas.plan import FieldShape, MappingPlan, TypePlan, build_plan
from sqlcmapper.utils.converters import WRAPPER_CONVERTERS
from sqlcmapper.utils.naming import resolve_source_field
from sqlcmapper.utils.pydantic_error_mapper import map_pydantic_validation_error
from sqlcmapper.utils.sources import is_record, is_sequence, source_fields

logger = logging.getLogger(__name__)

S = TypeVar("S")
T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

# Marks a field left at its zero value.
_SKIP = object()

_ADAPTER_ORIGINS = (Literal, Union, types.UnionType, Annotated)


def map_one(source: Any, target_type: Type[M], *, strict: Optional[bool] = None) -> M:
    """
    Map a single source record onto a new instance of ``target_type``.

    Args:
        source: Record produced by the database access layer
        target_type: Pydantic model class to populate
        strict: Raise on shape mismatches; defaults to ``SQLCMAPPER_STRICT``

    Returns:
        A freshly constructed ``target_type`` instance

    Raises:
        MappingError: If the target is not a pydantic model, the source is not
            a record, the model cannot be constructed from the mapped values,
            or (strict only) a source value does not fit its target field
    """
    if strict is None:
        strict = get_config().strict

    plan = build_plan(target_type)
    if not is_record(source):
        raise create_invalid_source_error(source, target_type)

    return _map_record(source, plan, strict, target_type.__name__)


def map_many(
    sources: Iterable[Any], target_type: Type[M], *, strict: Optional[bool] = None
) -> List[M]:
    """
    Map every source record onto ``target_type``, preserving order and length.

    Fails fast: the first element that cannot be mapped raises and no partial
    result is returned.

    Args:
        sources: Records produced by the database access layer
        target_type: Pydantic model class to populate
        strict: Raise on shape mismatches; defaults to ``SQLCMAPPER_STRICT``

    Returns:
        One ``target_type`` instance per source record, in input order

    Raises:
        MappingError: Propagated unchanged from the first failing record
    """
    if strict is None:
        strict = get_config().strict

    build_plan(target_type)

    mapped = [map_one(source, target_type, strict=strict) for source in sources]
    logger.debug(f"Mapped {len(mapped)} records onto {target_type.__name__}")
    return mapped


class GenericMapper(Generic[S, T]):
    """
    Applies a mapping function to single values and to sequences.

    Wraps hand-written ``source -> model`` functions; ``GenericMapper.auto``
    builds one backed by ``map_one``.
    """

    def __init__(self, map_func: Callable[[S], T]):
        self._map_func = map_func

    @classmethod
    def auto(cls, target_type: Type[M], *, strict: Optional[bool] = None) -> GenericMapper[Any, M]:
        """Build a mapper that auto-maps records onto ``target_type``."""
        build_plan(target_type)
        return cls(partial(map_one, target_type=target_type, strict=strict))

    def map(self, source: S) -> T:
        return self._map_func(source)

    def map_slice(self, sources: Iterable[S]) -> List[T]:
        return [self._map_func(source) for source in sources]


def _map_record(record: Any, plan: MappingPlan, strict: bool, path: str) -> Any:
    fields = source_fields(record)
    values: Dict[str, Any] = {}

    for field in plan.fields:
        field_path = f"{path}.{field.name}"
        found, raw = resolve_source_field(fields, field.source_name)

        if found:
            value = _convert(raw, field.type, strict, field_path)
        else:
            logger.debug(f"No source field '{field.source_name}' for {field_path}")
            value = _SKIP

        if value is _SKIP:
            if field.has_default:
                continue
            value = _zero_value(field.type, strict, field_path)

        values[field.input_key] = value

    try:
        return plan.target.model_validate(values)
    except ValidationError as e:
        raise map_pydantic_validation_error(e, path) from e


def _convert(value: Any, type_plan: TypePlan, strict: bool, path: str) -> Any:
    if isinstance(value, NullableValue):
        converter = WRAPPER_CONVERTERS[value.kind]
        if converter.target_shape is type_plan.shape:
            return converter.convert(value)
        return _mismatch(value, type_plan, strict, path)

    if type_plan.shape is FieldShape.NESTED and is_record(value):
        return _map_record(value, build_plan(type_plan.model), strict, path)

    if type_plan.shape is FieldShape.SEQUENCE and is_sequence(value):
        return _map_sequence(value, type_plan.element, strict, path)

    if _is_assignable(value, type_plan):
        return value

    return _mismatch(value, type_plan, strict, path)


def _map_sequence(items: Any, element: TypePlan, strict: bool, path: str) -> List[Any]:
    mapped = []
    for index, item in enumerate(items):
        item_path = f"{path}[{index}]"
        value = _convert(item, element, strict, item_path)
        if value is _SKIP:
            value = _zero_value(element, strict, item_path)
        mapped.append(value)
    return mapped


def _zero_value(type_plan: TypePlan, strict: bool, path: str) -> Any:
    if type_plan.shape is FieldShape.NESTED and not type_plan.optional:
        return _map_record({}, build_plan(type_plan.model), strict, path)
    return type_plan.scalar_zero()


def _mismatch(value: Any, type_plan: TypePlan, strict: bool, path: str) -> Any:
    if strict:
        raise create_shape_mismatch_error(path, value, type_plan.describe())
    logger.debug(
        f"Skipping {path}: {type(value).__name__} does not fit {type_plan.describe()}"
    )
    return _SKIP


def _is_assignable(value: Any, type_plan: TypePlan) -> bool:
    base = type_plan.base
    if base is Any:
        return True
    if value is None:
        return type_plan.optional

    if base is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if base is int:
        return isinstance(value, int) and not isinstance(value, bool)

    origin = get_origin(base)
    if origin in _ADAPTER_ORIGINS:
        return _strictly_accepts(base, value)

    target_cls = origin or base
    if isclass(target_cls):
        return isinstance(value, target_cls)
    return _strictly_accepts(base, value)


@lru_cache(maxsize=None)
def _adapter(annotation: Any) -> TypeAdapter:
    return TypeAdapter(annotation, config=ConfigDict(arbitrary_types_allowed=True))


def _strictly_accepts(annotation: Any, value: Any) -> bool:
    try:
        _adapter(annotation).validate_python(value, strict=True)
    except ValidationError:
        return False
    return True
