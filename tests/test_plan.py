"""
Unit tests for mapping plan construction.

Tests declared-type classification, source-name annotations and plan caching.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple, Union

import pytest
from pydantic import BaseModel, Field

from sqlcmapper.models.errors import ErrorCode, MappingError
from sqlcmapper.schemas.plan import FieldShape, build_plan, classify_annotation, db_field


class Address(BaseModel):
    city: str


class Person(BaseModel):
    ID: str = db_field("id")
    Name: Optional[str] = None
    Age: Optional[int] = None
    Score: Optional[float] = None
    Active: Optional[bool] = None
    address: Address
    tags: List[str] = []
    nickname: str = Field("anon", alias="nick")


class TestClassifyAnnotation:
    """Tests for classify_annotation."""

    @pytest.mark.parametrize(
        "annotation, shape",
        [
            (str, FieldShape.TEXT),
            (Optional[str], FieldShape.OPTIONAL_TEXT),
            (str | None, FieldShape.OPTIONAL_TEXT),
            (Optional[float], FieldShape.OPTIONAL_FLOAT),
            (Optional[int], FieldShape.OPTIONAL_INT),
            (Optional[bool], FieldShape.OPTIONAL_BOOL),
            (Address, FieldShape.NESTED),
            (Optional[Address], FieldShape.NESTED),
            (List[Address], FieldShape.SEQUENCE),
            (list[int], FieldShape.SEQUENCE),
            (Tuple[str, ...], FieldShape.SEQUENCE),
            (Sequence[str], FieldShape.SEQUENCE),
            (list, FieldShape.SEQUENCE),
            (int, FieldShape.SCALAR),
            (float, FieldShape.SCALAR),
            (Dict[str, int], FieldShape.SCALAR),
            (Literal["a", "b"], FieldShape.SCALAR),
            (Union[int, str, None], FieldShape.SCALAR),
            (Any, FieldShape.SCALAR),
        ],
    )
    def test_shapes(self, annotation, shape):
        assert classify_annotation(annotation).shape is shape

    def test_optional_flag(self):
        assert classify_annotation(Optional[Address]).optional is True
        assert classify_annotation(Address).optional is False
        assert classify_annotation(Union[int, str, None]).optional is True
        assert classify_annotation(Any).optional is True

    def test_sequence_element(self):
        plan = classify_annotation(List[Address])
        assert plan.element.shape is FieldShape.NESTED
        assert plan.element.model is Address

    def test_bare_list_element_is_any(self):
        assert classify_annotation(list).element.base is Any

    def test_zero_values(self):
        assert classify_annotation(str).scalar_zero() == ""
        assert classify_annotation(int).scalar_zero() == 0
        assert classify_annotation(float).scalar_zero() == 0.0
        assert classify_annotation(bool).scalar_zero() is False
        assert classify_annotation(Optional[str]).scalar_zero() is None
        assert classify_annotation(List[str]).scalar_zero() == []

    def test_generic_zero_values_resolve_through_origin(self):
        assert classify_annotation(Dict[str, int]).scalar_zero() == {}
        assert classify_annotation(dict).scalar_zero() == {}

    def test_types_without_zero_value(self):
        class Color(str, Enum):
            RED = "red"

        assert classify_annotation(Literal["a"]).scalar_zero() is None
        assert classify_annotation(Color).scalar_zero() is None


class TestBuildPlan:
    """Tests for build_plan."""

    def test_fields_in_declaration_order(self):
        plan = build_plan(Person)
        assert [f.name for f in plan.fields] == [
            "ID", "Name", "Age", "Score", "Active", "address", "tags", "nickname",
        ]

    def test_db_annotation_sets_source_name(self):
        fields = {f.name: f for f in build_plan(Person).fields}
        assert fields["ID"].source_name == "id"
        assert fields["Name"].source_name == "Name"

    def test_db_field_keeps_other_schema_extra(self):
        info = db_field("x", None, json_schema_extra={"example": 1})
        assert info.json_schema_extra == {"example": 1, "db": "x"}

    def test_alias_is_used_as_input_key(self):
        fields = {f.name: f for f in build_plan(Person).fields}
        assert fields["nickname"].input_key == "nick"
        assert fields["Name"].input_key == "Name"

    def test_defaults_recorded(self):
        fields = {f.name: f for f in build_plan(Person).fields}
        assert fields["address"].has_default is False
        assert fields["Name"].has_default is True

    def test_db_field_without_default_is_required(self):
        fields = {f.name: f for f in build_plan(Person).fields}
        assert fields["ID"].has_default is False

    def test_plan_is_cached(self):
        assert build_plan(Person) is build_plan(Person)

    @pytest.mark.parametrize("target", [dict, 42, "Person", [], Person(ID="x", address=Address(city="c"))])
    def test_non_model_target_rejected(self, target):
        with pytest.raises(MappingError) as exc_info:
            build_plan(target)
        assert exc_info.value.code is ErrorCode.INVALID_TARGET
