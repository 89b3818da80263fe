"""Builder registry and the ``@factory`` decorator.

``@factory`` analyzes a record class once, when the class is defined, and
attaches a synthesized builder to it. Analysis errors are raised right there,
so a record with a broken schema never gets a usable builder.

Relation targets given by name (``{"relation": "Hammer"}``) are looked up in
the registry when the owning record is created, so related records may be
declared in any order.

Usage:
    from record_factory import factory

    @factory
    @dataclass
    class Hammer(DatabasePersistable):
        id: int = 0

    @factory
    @dataclass
    class Anvil(DatabasePersistable):
        hammer_id: int = field(default=0, metadata={"record_factory": {"relation": "Hammer"}})

    anvil = await Anvil.builder().for_hammer(lambda h: h.id(100)).create(conn)
"""

import logging
from typing import Any

from record_factory.builder.runtime import RecordBuilder, build_builder_class
from record_factory.config.models import AnalysisSettings
from record_factory.errors import UnknownRecordTypeError
from record_factory.schema.analyzer import analyze_class
from record_factory.schema.models import TypeRef

logger = logging.getLogger(__name__)


class FactoryRegistry:
    """Maps record types, by class and by name, to their builder classes."""

    def __init__(self) -> None:
        self._by_name: dict[str, type[RecordBuilder]] = {}
        self._by_type: dict[type, type[RecordBuilder]] = {}

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._by_name
        return item in self._by_type

    def __len__(self) -> int:
        return len(self._by_name)

    @property
    def names(self) -> list[str]:
        return sorted(self._by_name)

    def register(
        self,
        record_type: type,
        settings: AnalysisSettings | None = None,
    ) -> type[RecordBuilder]:
        """Analyze *record_type* and register its builder.

        Re-registering a name replaces the previous builder.

        Raises:
            AnalysisError: The record schema is invalid.
        """
        analysis = analyze_class(record_type, settings)
        builder_cls = build_builder_class(analysis, record_type, self)

        if analysis.record_name in self._by_name:
            logger.warning("Replacing registered builder for %s", analysis.record_name)
        self._by_name[analysis.record_name] = builder_cls
        self._by_type[record_type] = builder_cls
        return builder_cls

    def builder_for(self, ref: TypeRef | type | str) -> type[RecordBuilder]:
        """Return the builder class of a record type.

        Raises:
            UnknownRecordTypeError: No builder is known for *ref*.
        """
        if isinstance(ref, str):
            ref = TypeRef(name=ref)
        elif isinstance(ref, type):
            ref = TypeRef(name=ref.__name__, target=ref)

        if ref.target is not None:
            builder_cls = self._by_type.get(ref.target) or vars(ref.target).get(
                "__record_builder__"
            )
            if builder_cls is not None:
                return builder_cls

        builder_cls = self._by_name.get(ref.name)
        if builder_cls is None:
            raise UnknownRecordTypeError(ref.name)
        return builder_cls

    def clear(self) -> None:
        """Forget every registered builder (useful for testing)."""
        self._by_name.clear()
        self._by_type.clear()


default_registry = FactoryRegistry()


def factory(
    record_type: type | None = None,
    *,
    settings: AnalysisSettings | None = None,
    registry: FactoryRegistry | None = None,
) -> Any:
    """Class decorator attaching a synthesized builder to a record type.

    Adds ``Record.builder()`` (a fresh, empty builder),
    ``Record.__record_builder__`` and ``Record.__record_analysis__``.

    Args:
        record_type: The decorated class (when used without arguments).
        settings: Analysis settings (default: ``AnalysisSettings()``).
        registry: Registry to register in (default: ``default_registry``).

    Raises:
        AnalysisError: The record schema is invalid.

    Example:
        >>> from dataclasses import dataclass
        >>> from record_factory.persistence.database import DatabasePersistable
        >>> @factory(registry=FactoryRegistry())
        ... @dataclass
        ... class Anvil(DatabasePersistable):
        ...     weight: int = 0
        >>> Anvil.builder().weight(10)
        AnvilBuilder(values={'weight': 10}, pending=[])
    """

    def decorate(cls: type) -> type:
        target = registry if registry is not None else default_registry
        builder_cls = target.register(cls, settings)

        def builder(owner: type) -> RecordBuilder:
            return builder_cls.new()

        builder.__doc__ = f"Return an empty {builder_cls.__name__}."
        cls.builder = classmethod(builder)
        cls.__record_builder__ = builder_cls
        cls.__record_analysis__ = builder_cls._analysis
        return cls

    if record_type is None:
        return decorate
    return decorate(record_type)
