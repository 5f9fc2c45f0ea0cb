"""Runtime inspection of typed values into structural descriptors."""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime
import re
import types
from decimal import Decimal
from enum import Enum
from typing import (
    Annotated,
    Any,
    Literal,
    NotRequired,
    Optional,
    Required,
    Union,
    get_args,
    get_origin,
    get_type_hints,
    is_typeddict,
)

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from .json_types import JSONValue
from .model_types import FieldDescriptor, TypeDescriptor, TypeKind

OMIT_EMPTY = "omitempty"
JSON_TAG = "json"
DOC_TAG = "doc"
EXAMPLE_TAG = "example"
ENUM_TAG = "enum"

_SKIP_TAG = "-"
_RAW_PAYLOAD_TYPES: tuple[type, ...] = (bytes, bytearray, memoryview)
_SEQUENCE_ORIGINS: tuple[Any, ...] = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)
_MAP_ORIGINS: tuple[Any, ...] = (
    dict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
    collections.OrderedDict,
    collections.defaultdict,
)
_WRAPPER_ORIGINS: tuple[Any, ...] = (Annotated, Required, NotRequired)
_COMPONENT_NAME_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._-]")


class SchemaGenerationError(ValueError):
    """Raised when a type declares a shape that cannot be documented."""


class DuplicateFieldNameError(SchemaGenerationError):
    """Raised when two fields of one struct serialize to the same name."""


def parse_json_tag(tag: Optional[str], attribute: str) -> tuple[str, bool]:
    """Split a serialization tag into its serialized name and required flag.

    Args:
        tag (Optional[str]): Comma separated tag such as ``"title,omitempty"``.
        attribute (str): Declared attribute name used when the tag has no name.

    Returns:
        tuple[str, bool]: Serialized name and whether the field is required.
    """
    if not tag:
        return attribute, True
    name, *options = tag.split(",")
    return name or attribute, OMIT_EMPTY not in options


def split_enum_tag(tag: Any) -> tuple[JSONValue, ...]:
    """Normalize an enum tag given as ``"a,b"`` or as a sequence of values."""
    if tag is None or tag == "":
        return ()
    if isinstance(tag, str):
        return tuple(part.strip() for part in tag.split(","))
    if isinstance(tag, collections.abc.Iterable):
        return tuple(tag)
    return (tag,)


def inspect_value(value: Any) -> Optional[TypeDescriptor]:
    """Describe a value or type annotation; ``None`` means there is no schema."""
    if value is None:
        return None
    if _is_annotation(value):
        return describe_type(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        first = next(iter(value), None)
        element = inspect_value(first) if first is not None else _other(Any)
        return TypeDescriptor(kind=TypeKind.SEQUENCE, python_type=type(value), element=element)
    if isinstance(value, dict):
        first = next(iter(value.values()), None)
        mapped = inspect_value(first) if first is not None else _other(Any)
        return TypeDescriptor(kind=TypeKind.MAP, python_type=type(value), value=mapped)
    return describe_type(type(value))


def type_name(value: Any) -> str:
    """Return the declared type name of a value, or ``""`` for anonymous shapes."""
    descriptor = inspect_value(value)
    return descriptor.name if descriptor is not None else ""


def describe_type(annotation: Any) -> TypeDescriptor:
    """Describe a type annotation."""
    annotation = _unwrap(annotation)
    origin = get_origin(annotation)

    if origin is Literal:
        return _enum_descriptor(annotation, get_args(annotation), name="")
    if origin is not None:
        return _describe_generic(annotation, origin)
    if annotation is Any or not isinstance(annotation, type):
        return _other(annotation)

    if issubclass(annotation, Enum):
        values = tuple(member.value for member in annotation)
        return _enum_descriptor(annotation, values, name=component_name(annotation.__name__))
    if issubclass(annotation, datetime.datetime):
        return _named(TypeKind.TIMESTAMP, annotation)
    if issubclass(annotation, _RAW_PAYLOAD_TYPES):
        return _named(TypeKind.RAW_PAYLOAD, annotation)
    primitive = _primitive_kind(annotation)
    if primitive is not None:
        return _named(primitive, annotation)
    if is_struct_type(annotation):
        return _named(TypeKind.STRUCT, annotation)
    if issubclass(annotation, (list, tuple, set, frozenset)):
        return TypeDescriptor(
            kind=TypeKind.SEQUENCE, python_type=annotation, element=_other(Any)
        )
    if issubclass(annotation, dict):
        return TypeDescriptor(kind=TypeKind.MAP, python_type=annotation, value=_other(Any))
    return _named(TypeKind.OTHER, annotation)


def is_struct_type(annotation: Any) -> bool:
    """Return whether an annotation is a record type with enumerable fields."""
    if not isinstance(annotation, type):
        return False
    if dataclasses.is_dataclass(annotation) or is_typeddict(annotation):
        return True
    return issubclass(annotation, BaseModel)


def describe_fields(descriptor: TypeDescriptor) -> tuple[FieldDescriptor, ...]:
    """Enumerate the serialized fields of a struct descriptor in declaration order.

    Fields whose attribute starts with an underscore are not externally visible
    and are skipped, as are fields excluded from serialization.

    Raises:
        DuplicateFieldNameError: If two fields serialize to the same name.
    """
    struct_type = descriptor.python_type
    if dataclasses.is_dataclass(struct_type):
        fields = _dataclass_fields(struct_type)
    elif is_typeddict(struct_type):
        fields = _typeddict_fields(struct_type)
    elif isinstance(struct_type, type) and issubclass(struct_type, BaseModel):
        fields = _model_fields(struct_type)
    else:
        return ()

    seen: dict[str, str] = {}
    for field_descriptor in fields:
        previous = seen.get(field_descriptor.name)
        if previous is not None:
            raise DuplicateFieldNameError(
                f"{descriptor.name}: fields {previous!r} and {field_descriptor.attribute!r} "
                f"both serialize to {field_descriptor.name!r}"
            )
        seen[field_descriptor.name] = field_descriptor.attribute
    return tuple(fields)


def _dataclass_fields(struct_type: type) -> list[FieldDescriptor]:
    hints = _resolved_hints(struct_type)
    fields: list[FieldDescriptor] = []
    for dc_field in dataclasses.fields(struct_type):
        if dc_field.name.startswith("_"):
            continue
        metadata = dc_field.metadata
        tag = metadata.get(JSON_TAG)
        if tag == _SKIP_TAG:
            continue
        name, required = parse_json_tag(tag, dc_field.name)
        fields.append(
            FieldDescriptor(
                name=name,
                attribute=dc_field.name,
                required=required,
                type=describe_type(hints.get(dc_field.name, dc_field.type)),
                description=metadata.get(DOC_TAG) or None,
                example=metadata.get(EXAMPLE_TAG),
                enum=split_enum_tag(metadata.get(ENUM_TAG)),
            )
        )
    return fields


def _typeddict_fields(struct_type: type) -> list[FieldDescriptor]:
    hints = _resolved_hints(struct_type)
    required_keys: frozenset[str] = getattr(struct_type, "__required_keys__", frozenset())
    fields: list[FieldDescriptor] = []
    for key, hint in hints.items():
        if key.startswith("_"):
            continue
        # Stringified annotations hide Required/NotRequired from __required_keys__.
        qualifier = get_origin(hint)
        if qualifier is NotRequired:
            required = False
        elif qualifier is Required:
            required = True
        else:
            required = key in required_keys
        fields.append(
            FieldDescriptor(name=key, attribute=key, required=required, type=describe_type(hint))
        )
    return fields


def _resolved_hints(struct_type: type) -> dict[str, Any]:
    try:
        return get_type_hints(struct_type, include_extras=True)
    except NameError as exc:
        raise SchemaGenerationError(
            f"{struct_type.__qualname__}: cannot resolve field annotations ({exc}); "
            "declare referenced types at module level"
        ) from exc


def _model_fields(struct_type: type[BaseModel]) -> list[FieldDescriptor]:
    fields: list[FieldDescriptor] = []
    for attribute, info in struct_type.model_fields.items():
        if attribute.startswith("_") or info.exclude:
            continue
        fields.append(
            FieldDescriptor(
                name=info.serialization_alias or info.alias or attribute,
                attribute=attribute,
                required=info.is_required(),
                type=describe_type(info.annotation),
                description=info.description,
                example=info.examples[0] if info.examples else None,
                enum=_model_enum(info),
            )
        )
    return fields


def _model_enum(info: FieldInfo) -> tuple[JSONValue, ...]:
    extra = info.json_schema_extra
    if isinstance(extra, dict):
        return split_enum_tag(extra.get(ENUM_TAG))
    return ()


def _unwrap(annotation: Any) -> Any:
    while True:
        origin = get_origin(annotation)
        if origin in _WRAPPER_ORIGINS:
            annotation = get_args(annotation)[0]
            continue
        if origin is Union or origin is types.UnionType:
            members = [arg for arg in get_args(annotation) if arg is not type(None)]
            if len(members) == 1:
                annotation = members[0]
                continue
        return annotation


def _describe_generic(annotation: Any, origin: Any) -> TypeDescriptor:
    args = get_args(annotation)
    if origin in _MAP_ORIGINS:
        value_type = args[1] if len(args) == 2 else Any
        return TypeDescriptor(
            kind=TypeKind.MAP, python_type=annotation, value=describe_type(value_type)
        )
    if origin in _SEQUENCE_ORIGINS:
        return TypeDescriptor(
            kind=TypeKind.SEQUENCE,
            python_type=annotation,
            element=describe_type(_element_type(origin, args)),
        )
    return _other(annotation)


def _element_type(origin: Any, args: tuple[Any, ...]) -> Any:
    if not args:
        return Any
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        if all(arg == args[0] for arg in args):
            return args[0]
        return Any
    return args[0]


def _primitive_kind(annotation: type) -> Optional[TypeKind]:
    if issubclass(annotation, bool):
        return TypeKind.BOOLEAN
    if issubclass(annotation, int):
        return TypeKind.INTEGER
    if issubclass(annotation, (float, Decimal)):
        return TypeKind.FLOAT
    if issubclass(annotation, str):
        return TypeKind.STRING
    return None


def _enum_descriptor(
    annotation: Any,
    values: tuple[Any, ...],
    *,
    name: str,
) -> TypeDescriptor:
    kinds = {_primitive_kind(type(value)) for value in values}
    kind = kinds.pop() if len(kinds) == 1 else None
    if kind is None:
        return TypeDescriptor(kind=TypeKind.OTHER, python_type=annotation, name=name)
    return TypeDescriptor(kind=kind, python_type=annotation, name=name, enum_values=values)


def component_name(name: str) -> str:
    """Replace characters not allowed in component keys, e.g. ``Page[Todo]`` -> ``Page_Todo_``."""
    return _COMPONENT_NAME_UNSAFE_RE.sub("_", name)


def _named(kind: TypeKind, annotation: type) -> TypeDescriptor:
    return TypeDescriptor(
        kind=kind, python_type=annotation, name=component_name(annotation.__name__)
    )


def _other(annotation: Any) -> TypeDescriptor:
    if not isinstance(annotation, type) or annotation is Any:
        return TypeDescriptor(kind=TypeKind.OTHER, python_type=annotation)
    return _named(TypeKind.OTHER, annotation)


def _is_annotation(value: Any) -> bool:
    if isinstance(value, type) or value is Any:
        return True
    return get_origin(value) is not None
