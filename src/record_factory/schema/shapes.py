"""Reflect Python classes into ``RecordShape`` values.

Dataclasses and pydantic models are flat named-field records. Field
annotations live under a namespace key (default ``"record_factory"``):

    @dataclass
    class Anvil:
        id: int = field(default=0, metadata={"record_factory": "primary_key"})
        hammer_id: int = field(
            default=0,
            metadata={"record_factory": {"relation": "Hammer", "referenced_key": "id"}},
        )

    class Hammer(BaseModel):
        id: int = Field(0, json_schema_extra={"record_factory": "primary_key"})

Record-level annotations come from a ``__record_factory__`` class attribute,
e.g. ``__record_factory__ = {"table": "custom_anvils"}``.

Every other kind of type is reflected with the matching rejected
``ShapeKind`` so the analyzer can report it.
"""

import dataclasses
import types
import typing
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel

from record_factory.schema.models import AnnotationGroup, FieldShape, RecordShape, ShapeKind

RECORD_ATTRIBUTES_NAME = "__record_factory__"


def _annotation_groups(raw: Any) -> list[AnnotationGroup]:
    if raw is None:
        return []
    if isinstance(raw, (str, Mapping)):
        return [raw]
    return list(raw)


def _type_hints(record_type: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(record_type)
    except (NameError, TypeError):
        # Unresolvable forward references: keep the raw annotations
        return dict(getattr(record_type, "__annotations__", {}))


def _constant(value: Any):
    return lambda: value


def _dataclass_fields(record_type: type, namespace: str) -> list[FieldShape]:
    hints = _type_hints(record_type)
    fields: list[FieldShape] = []
    for f in dataclasses.fields(record_type):
        if not f.init:
            continue

        default_factory = None
        if f.default is not dataclasses.MISSING:
            default_factory = _constant(f.default)
        elif f.default_factory is not dataclasses.MISSING:
            default_factory = f.default_factory

        fields.append(
            FieldShape(
                name=f.name,
                type_hint=hints.get(f.name, f.type),
                annotations=_annotation_groups(f.metadata.get(namespace)),
                default_factory=default_factory,
            )
        )
    return fields


def _pydantic_fields(record_type: type[BaseModel], namespace: str) -> list[FieldShape]:
    fields: list[FieldShape] = []
    for name, info in record_type.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}

        default_factory = None
        if not info.is_required():
            default_factory = _pydantic_default(info)

        fields.append(
            FieldShape(
                name=name,
                type_hint=info.annotation,
                annotations=_annotation_groups(extra.get(namespace)),
                default_factory=default_factory,
            )
        )
    return fields


def _pydantic_default(info: Any):
    return lambda: info.get_default(call_default_factory=True)


def _kind_of(record_type: Any) -> ShapeKind:
    if typing.get_origin(record_type) in (typing.Union, types.UnionType):
        return ShapeKind.UNION
    if not isinstance(record_type, type):
        return ShapeKind.UNIT
    if issubclass(record_type, Enum):
        return ShapeKind.ENUM
    if issubclass(record_type, tuple):
        return ShapeKind.TUPLE
    if dataclasses.is_dataclass(record_type) or issubclass(record_type, BaseModel):
        return ShapeKind.STRUCT
    return ShapeKind.UNIT


def shape_from_class(record_type: Any, namespace: str = "record_factory") -> RecordShape:
    """Reflect *record_type* into a ``RecordShape``.

    Args:
        record_type: A dataclass, a pydantic model, or any other type (which
            is reflected with its rejected ``ShapeKind``).
        namespace: Metadata key holding the field annotation groups.

    Returns:
        The record shape. Fields are only reflected for ``ShapeKind.STRUCT``.

    Examples:
        >>> from dataclasses import dataclass
        >>> @dataclass
        ... class Anvil:
        ...     weight: int = 0
        >>> shape_from_class(Anvil).fields[0].name
        'weight'
        >>> shape_from_class(int | str).kind
        <ShapeKind.UNION: 'union'>
    """
    name = getattr(record_type, "__name__", None) or str(record_type)
    kind = _kind_of(record_type)
    annotations = dict(getattr(record_type, RECORD_ATTRIBUTES_NAME, None) or {})

    fields: list[FieldShape] = []
    if kind is ShapeKind.STRUCT:
        if dataclasses.is_dataclass(record_type):
            fields = _dataclass_fields(record_type, namespace)
        else:
            fields = _pydantic_fields(record_type, namespace)

    return RecordShape(name=name, kind=kind, fields=fields, annotations=annotations)
