"""Unit tests for runtime type inspection."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, Literal, NotRequired, Optional, TypedDict, TypeVar

import pytest
from pydantic import BaseModel, Field

from openapi_docrouter.inspector import (
    DuplicateFieldNameError,
    SchemaGenerationError,
    component_name,
    describe_fields,
    describe_type,
    inspect_value,
    parse_json_tag,
    type_name,
)
from openapi_docrouter.model_types import TypeKind


class Color(Enum):
    RED = "red"
    GREEN = "green"


@dataclass
class Tagged:
    plain: str
    named: int = field(default=0, metadata={"json": "renamed"})
    optional: str = field(default="", metadata={"json": "opt,omitempty"})
    own_name: bool = field(default=False, metadata={"json": ",omitempty"})
    skipped: str = field(default="", metadata={"json": "-"})
    _private: str = ""
    documented: str = field(
        default="",
        metadata={"doc": "A field", "example": "value", "enum": "a, b,c"},
    )


@dataclass
class Clash:
    first: str = field(metadata={"json": "same"})
    second: str = field(metadata={"json": "same"})


class Account(BaseModel):
    account_id: str = Field(alias="accountId", description="Account identifier")
    nickname: Optional[str] = Field(default=None, examples=["bob"])
    tier: str = Field(default="free", json_schema_extra={"enum": ["free", "pro"]})
    secret: str = Field(default="", exclude=True)


class Movie(TypedDict):
    title: str
    year: NotRequired[int]


ItemT = TypeVar("ItemT")


class Page(BaseModel, Generic[ItemT]):
    items: list[ItemT]
    total: int


def test_parse_json_tag_without_tag_is_required() -> None:
    """A missing tag keeps the attribute name and makes the field required."""
    assert parse_json_tag(None, "Name") == ("Name", True)
    assert parse_json_tag("", "Name") == ("Name", True)


def test_parse_json_tag_omitempty_marks_optional() -> None:
    """``omitempty`` among the options flips the field to optional."""
    assert parse_json_tag("title,omitempty", "Title") == ("title", False)
    assert parse_json_tag(",omitempty", "Title") == ("Title", False)
    assert parse_json_tag("title,string", "Title") == ("title", True)


@pytest.mark.parametrize(
    ("annotation", "kind"),
    [
        (bool, TypeKind.BOOLEAN),
        (int, TypeKind.INTEGER),
        (float, TypeKind.FLOAT),
        (str, TypeKind.STRING),
        (datetime, TypeKind.TIMESTAMP),
        (bytes, TypeKind.RAW_PAYLOAD),
        (list[int], TypeKind.SEQUENCE),
        (tuple[str, ...], TypeKind.SEQUENCE),
        (dict[str, int], TypeKind.MAP),
        (Tagged, TypeKind.STRUCT),
        (Account, TypeKind.STRUCT),
        (Movie, TypeKind.STRUCT),
        (Any, TypeKind.OTHER),
        (complex, TypeKind.OTHER),
    ],
)
def test_describe_type_kinds(annotation: Any, kind: TypeKind) -> None:
    """Annotations map to their structural kinds."""
    assert describe_type(annotation).kind is kind


def test_optional_and_annotated_wrappers_are_unwrapped() -> None:
    """Single-level optional wrappers describe the wrapped type."""
    assert describe_type(Optional[Tagged]).python_type is Tagged
    assert describe_type(Tagged | None).python_type is Tagged


def test_multi_member_union_falls_back_to_other() -> None:
    """Unions of several concrete types are not introspected."""
    assert describe_type(int | str).kind is TypeKind.OTHER


def test_enum_and_literal_types_carry_values() -> None:
    """Enums and literals become primitives with enumerated values."""
    color = describe_type(Color)
    assert color.kind is TypeKind.STRING
    assert color.enum_values == ("red", "green")

    literal = describe_type(Literal[1, 2, 3])
    assert literal.kind is TypeKind.INTEGER
    assert literal.enum_values == (1, 2, 3)


def test_inspect_value_handles_instances_and_none() -> None:
    """Instances are described through their class; ``None`` has no descriptor."""
    assert inspect_value(None) is None
    descriptor = inspect_value(Tagged(plain="x"))
    assert descriptor is not None
    assert descriptor.kind is TypeKind.STRUCT
    assert descriptor.name == "Tagged"

    sequence = inspect_value([Tagged(plain="x")])
    assert sequence is not None
    assert sequence.kind is TypeKind.SEQUENCE
    assert sequence.element is not None
    assert sequence.element.python_type is Tagged


def test_type_name_is_empty_for_anonymous_shapes() -> None:
    """Generic containers have no declared name."""
    assert type_name(Tagged) == "Tagged"
    assert type_name(list[Tagged]) == ""
    assert type_name(dict[str, int]) == ""
    assert type_name(None) == ""


def test_dataclass_fields_follow_tags() -> None:
    """Tags rename fields, mark them optional and attach documentation."""
    fields = describe_fields(describe_type(Tagged))
    by_name = {item.name: item for item in fields}

    assert [item.name for item in fields] == [
        "plain",
        "renamed",
        "opt",
        "own_name",
        "documented",
    ]
    assert by_name["plain"].required is True
    assert by_name["renamed"].required is True
    assert by_name["opt"].required is False
    assert by_name["own_name"].required is False
    assert by_name["documented"].description == "A field"
    assert by_name["documented"].example == "value"
    assert by_name["documented"].enum == ("a", "b", "c")


def test_duplicate_serialized_names_are_rejected() -> None:
    """Two fields serializing to the same name are a configuration error."""
    with pytest.raises(DuplicateFieldNameError, match="same"):
        describe_fields(describe_type(Clash))


def test_pydantic_model_fields() -> None:
    """Pydantic aliases, defaults and field metadata are honoured."""
    fields = describe_fields(describe_type(Account))
    by_name = {item.name: item for item in fields}

    assert list(by_name) == ["accountId", "nickname", "tier"]
    assert by_name["accountId"].required is True
    assert by_name["accountId"].description == "Account identifier"
    assert by_name["nickname"].required is False
    assert by_name["nickname"].example == "bob"
    assert by_name["nickname"].type.kind is TypeKind.STRING
    assert by_name["tier"].enum == ("free", "pro")


def test_typeddict_required_keys() -> None:
    """TypedDict keys are optional when declared ``NotRequired``."""
    fields = describe_fields(describe_type(Movie))
    assert [(item.name, item.required) for item in fields] == [
        ("title", True),
        ("year", False),
    ]
    assert fields[1].type.kind is TypeKind.INTEGER


def test_parametrized_generic_names_are_component_safe() -> None:
    """Generic model names drop brackets so they can key components."""
    assert component_name("Page[Account]") == "Page_Account_"
    assert type_name(Page[Account]) == "Page_Account_"
    assert describe_type(Page[Account]).kind is TypeKind.STRUCT


def test_function_local_forward_references_raise_generation_error() -> None:
    """Stringified annotations that cannot be resolved raise a generation error."""

    @dataclass
    class LocalInner:
        value: int

    @dataclass
    class LocalOuter:
        inner: LocalInner

    with pytest.raises(SchemaGenerationError, match="LocalInner"):
        describe_fields(describe_type(LocalOuter))
