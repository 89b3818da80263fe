"""Runtime builders: the construction protocol behind ``Record.builder()``.

``build_builder_class()`` turns an analyzed record into a ``RecordBuilder``
subclass with one setter per field and one ``for_<relation>`` hook per
relation. Builders are immutable values: every setter and hook returns a new
builder and leaves the receiver untouched, so a partially configured builder
can be shared and extended freely.

Usage:
    anvil = await (
        Anvil.builder()
        .weight(12)
        .for_hammer(lambda hammer: hammer.id(100))
        .create(connection)
    )
"""

import logging
import types
import typing
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar

from record_factory.builder.synthesizer import BuilderContract, synthesize
from record_factory.errors import MissingDefaultError
from record_factory.persistence.base import Persistable
from record_factory.schema.models import AnalysisOutput, FieldAnalysis

if TYPE_CHECKING:
    from record_factory.builder.registry import FactoryRegistry

logger = logging.getLogger(__name__)

RelationCallback = Callable[["RecordBuilder"], "RecordBuilder"]

_NO_DEFAULT = object()


# ============================================================================
# Default Values
# ============================================================================


def zero_value(type_hint: Any) -> Any:
    """Return the zero value of *type_hint*, or ``_NO_DEFAULT``.

    ``None`` for optional and untyped fields, an empty instance for
    containers, and ``type_hint()`` for anything that can be called without
    arguments (``int`` -> ``0``, ``str`` -> ``""``).
    """
    if type_hint is None or type_hint is type(None) or type_hint is Any:
        return None

    origin = typing.get_origin(type_hint)
    if origin is typing.Annotated:
        return zero_value(typing.get_args(type_hint)[0])
    if origin in (typing.Union, types.UnionType):
        if type(None) in typing.get_args(type_hint):
            return None
        return _NO_DEFAULT
    if origin is not None:
        type_hint = origin

    if not isinstance(type_hint, type):
        return _NO_DEFAULT
    try:
        return type_hint()
    except (TypeError, ValueError):
        return _NO_DEFAULT


def default_for(field: FieldAnalysis) -> Any:
    """Declared default of *field*, else the zero value of its type.

    Raises:
        MissingDefaultError: The field has neither.
    """
    if field.shape.default_factory is not None:
        return field.shape.default_factory()

    value = zero_value(field.shape.type_hint)
    if value is _NO_DEFAULT:
        raise MissingDefaultError(field.name, field.shape.type_hint)
    return value


# ============================================================================
# RecordBuilder
# ============================================================================


class RecordBuilder:
    """Base class of every synthesized builder.

    Subclasses are produced by ``build_builder_class()`` and carry the record
    type, its analysis and the builder contract as class attributes.
    """

    _record_type: ClassVar[type]
    _analysis: ClassVar[AnalysisOutput]
    _contract: ClassVar[BuilderContract]
    _registry: ClassVar["FactoryRegistry"]

    __slots__ = ("_field_values", "_pending_relations")

    def __init__(self) -> None:
        self._field_values: dict[str, Any] = {}
        self._pending_relations: dict[str, RelationCallback] = {}

    @classmethod
    def new(cls) -> "RecordBuilder":
        """Builder with every field and relation slot empty."""
        return cls()

    def __repr__(self) -> str:
        pending = ", ".join(sorted(self._pending_relations))
        return f"{type(self).__name__}(values={self._field_values!r}, pending=[{pending}])"

    @property
    def field_values(self) -> dict[str, Any]:
        """Copy of the explicitly set field values."""
        return dict(self._field_values)

    @property
    def pending_relations(self) -> list[str]:
        """Slot names of the relations with a pending callback, in field order."""
        return [
            hook.slot_name
            for hook in self._contract.hooks
            if hook.slot_name in self._pending_relations
        ]

    def _evolve(
        self,
        values: dict[str, Any] | None = None,
        pending: dict[str, RelationCallback] | None = None,
    ) -> "RecordBuilder":
        clone = type(self)()
        clone._field_values = {**self._field_values, **(values or {})}
        clone._pending_relations = {**self._pending_relations, **(pending or {})}
        return clone

    def _assemble(self, values: dict[str, Any]) -> Any:
        kwargs = {
            field.name: values[field.name] if field.name in values else default_for(field)
            for field in self._analysis.fields
        }
        return self._record_type(**kwargs)

    async def create(self, connection: Any) -> Any:
        """Create related records, build the record, then persist it.

        1. For each relation with a pending callback, in field order: apply
           the callback to the related type's default builder, ``create`` it
           against *connection*, and copy its referenced key into the owner
           field (overwriting any value set directly).
        2. Build the record from the set values, falling back to defaults.
        3. Return ``await record.create(connection)``.

        Relations are resolved one at a time. The first failure propagates
        unchanged: later relations are skipped and the record is never built.

        Args:
            connection: Opaque handle passed to every ``create`` call.

        Returns:
            The persisted record, as returned by its ``create``.

        Raises:
            UnknownRecordTypeError: A relation targets an unregistered type.
            MissingDefaultError: An unset field has no default.
            TypeError: The record type does not implement ``Persistable``.
        """
        values = dict(self._field_values)

        for hook in self._contract.hooks:
            callback = self._pending_relations.get(hook.slot_name)
            if callback is None:
                continue

            related_builder = self._registry.builder_for(hook.related_type)
            logger.debug(
                "Creating %s for %s.%s",
                hook.related_type.name,
                self._contract.record_name,
                hook.owner_field,
            )
            related = await callback(related_builder.new()).create(connection)
            values[hook.owner_field] = getattr(related, hook.referenced_key)

        instance = self._assemble(values)
        if not isinstance(instance, Persistable):
            raise TypeError(
                f"{self._contract.record_name} does not implement Persistable "
                "(async create() and all())"
            )
        return await instance.create(connection)


# ============================================================================
# Class Synthesis
# ============================================================================


def _make_setter(builder_name: str, field_name: str) -> Callable[..., RecordBuilder]:
    def setter(self: RecordBuilder, value: Any) -> RecordBuilder:
        return self._evolve(values={field_name: value})

    setter.__name__ = field_name
    setter.__qualname__ = f"{builder_name}.{field_name}"
    setter.__doc__ = f"Return a builder with ``{field_name}`` set to *value*."
    return setter


def _make_hook(builder_name: str, method_name: str, slot_name: str, related: str):
    def hook(self: RecordBuilder, callback: RelationCallback) -> RecordBuilder:
        if not callable(callback):
            raise TypeError(f"{method_name}() expects a callable, got {callback!r}")
        return self._evolve(pending={slot_name: callback})

    hook.__name__ = method_name
    hook.__qualname__ = f"{builder_name}.{method_name}"
    hook.__doc__ = (
        f"Return a builder that creates a {related} first, customized by "
        "*callback*, replacing any earlier callback."
    )
    return hook


def build_builder_class(
    analysis: AnalysisOutput,
    record_type: type,
    registry: "FactoryRegistry",
) -> type[RecordBuilder]:
    """Create the ``RecordBuilder`` subclass for an analyzed record.

    Args:
        analysis: Output of the schema analyzer for *record_type*.
        record_type: Class instantiated with keyword arguments per field.
        registry: Registry used to resolve relation targets at create time.

    Returns:
        A new builder class named ``<Record>Builder``.
    """
    contract = synthesize(analysis)

    namespace: dict[str, Any] = {
        "__slots__": (),
        "__module__": getattr(record_type, "__module__", __name__),
        "__doc__": f"Builder for {contract.record_name} records.",
        "_record_type": record_type,
        "_analysis": analysis,
        "_contract": contract,
        "_registry": registry,
    }
    for setter in contract.setters:
        namespace[setter.method_name] = _make_setter(contract.builder_name, setter.field_name)
    for hook in contract.hooks:
        namespace[hook.method_name] = _make_hook(
            contract.builder_name, hook.method_name, hook.slot_name, hook.related_type.name
        )

    return type(contract.builder_name, (RecordBuilder,), namespace)
