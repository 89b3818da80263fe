"""Per-field annotation parsing.

Turns the raw annotation groups attached to one field into a
``FieldAttributes`` value. Pure logic -- no I/O, no state.

Usage:
    from record_factory.schema.attributes import parse_field_attributes

    attributes = parse_field_attributes([
        "primary_key",
        {"relation": "Hammer", "referenced_key": "id"},
    ])
    attributes.relation.name  # "Hammer"
"""

import keyword
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from record_factory.errors import (
    UnknownAttributeError,
    UnparsableAttributeError,
    UnparsableLiteralError,
    UnparsableTypeError,
)
from record_factory.schema.models import AnnotationGroup, FieldAttributes, TypeRef

# Value recorded for a bare flag such as "primary_key"
_FLAG = object()


def is_identifier(value: str) -> bool:
    """Return True if *value* is usable as a Python type or field name."""
    return value.isidentifier() and not keyword.iskeyword(value)


def _parse_bool(value: Any) -> bool:
    if value is _FLAG:
        return True
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise UnparsableLiteralError(value)


def _parse_type_ref(value: Any) -> TypeRef:
    if isinstance(value, type):
        return TypeRef(name=value.__name__, target=value)
    if not isinstance(value, str):
        raise UnparsableLiteralError(None if value is _FLAG else value)
    if not is_identifier(value):
        raise UnparsableTypeError(value)
    return TypeRef(name=value)


def _parse_field_name(value: Any) -> str:
    if not isinstance(value, str):
        raise UnparsableLiteralError(None if value is _FLAG else value)
    if not is_identifier(value):
        raise UnparsableTypeError(value)
    return value


_PARSERS: dict[str, Callable[[Any], Any]] = {
    "primary_key": _parse_bool,
    "relation": _parse_type_ref,
    "referenced_key": _parse_field_name,
    "extract": _parse_field_name,
}

RECOGNIZED_KEYS: frozenset[str] = frozenset(_PARSERS)


def _iter_group(group: AnnotationGroup) -> Iterator[tuple[str, Any]]:
    if isinstance(group, str):
        yield group, _FLAG
    elif isinstance(group, Mapping):
        for key, value in group.items():
            yield str(key), value
    else:
        raise UnparsableAttributeError(f"annotation group {group!r}")


def parse_field_attributes(groups: Iterable[AnnotationGroup]) -> FieldAttributes:
    """Parse the annotation groups of one field into ``FieldAttributes``.

    Groups are merged in order. When a key repeats, the last value wins.

    Args:
        groups: Bare flag strings and/or mappings of attribute key to value.

    Returns:
        ``FieldAttributes`` with every recognized key applied.

    Raises:
        UnknownAttributeError: A key outside ``RECOGNIZED_KEYS``.
        UnparsableLiteralError: A value is not a literal of the expected kind
            (e.g. a number where a name is required).
        UnparsableTypeError: A string does not parse into a valid identifier.
        UnparsableAttributeError: A group is neither a string nor a mapping.

    Examples:
        >>> parse_field_attributes(["primary_key"]).primary_key
        True
        >>> parse_field_attributes([{"extract": "id"}]).key
        'id'
    """
    values: dict[str, Any] = {}
    for group in groups:
        for key, raw in _iter_group(group):
            parser = _PARSERS.get(key)
            if parser is None:
                raise UnknownAttributeError(key)
            values[key] = parser(raw)
    return FieldAttributes(**values)
