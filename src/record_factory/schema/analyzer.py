"""Schema analysis: from a raw ``RecordShape`` to an ``AnalysisOutput``.

The analyzer is a small forward-only state machine::

    UNVALIDATED -> SHAPE_VALIDATED -> FIELDS_ANALYZED -> ANALYZED

Each transition either advances or raises; the first error aborts the whole
analysis and no partial output is ever returned. Intermediate states are
internal to ``SchemaAnalyzer`` -- callers only see ``analyze()``.

Usage:
    from record_factory.schema.analyzer import analyze
    from record_factory.schema.models import FieldShape, RecordShape

    output = analyze(RecordShape(
        name="Anvil",
        fields=[
            FieldShape(name="id", type_hint=int, annotations=["primary_key"]),
            FieldShape(name="hammer_id", type_hint=int,
                       annotations=[{"relation": "Hammer", "referenced_key": "id"}]),
        ],
    ))
    output.table_name                 # "anvils"
    output.relations[0].base_name     # "hammer"
"""

import logging
from enum import Enum
from typing import Any

from record_factory.config.models import AnalysisSettings
from record_factory.errors import (
    DuplicateRelationError,
    MissingReferencedKeyError,
    ReservedFieldNameError,
    UnparsableAttributeError,
    UnparsableLiteralError,
    UnsupportedShapeError,
)
from record_factory.schema.attributes import parse_field_attributes
from record_factory.schema.models import (
    AnalysisOutput,
    FieldAnalysis,
    FieldAttributes,
    FieldShape,
    Relation,
    RecordShape,
    ShapeKind,
)
from record_factory.schema.shapes import shape_from_class

logger = logging.getLogger(__name__)

# Public builder members that a field setter would shadow. Names starting
# with an underscore are reserved for builder internals as well.
RESERVED_FIELD_NAMES: frozenset[str] = frozenset(
    {"create", "new", "field_values", "pending_relations"}
)

RECORD_ATTRIBUTE_KEYS: frozenset[str] = frozenset({"table"})


class AnalyzerState(Enum):
    """Stages of a single analysis run."""

    UNVALIDATED = "unvalidated"
    SHAPE_VALIDATED = "shape_validated"
    FIELDS_ANALYZED = "fields_analyzed"
    ANALYZED = "analyzed"


# ============================================================================
# Relation Derivation
# ============================================================================


def _implicit_key(field_name: str) -> str | None:
    prefix, _, suffix = field_name.rpartition("_")
    if prefix and suffix:
        return suffix
    return None


def derive_relation(
    field: FieldShape,
    attributes: FieldAttributes,
    implicit_referenced_key: bool = True,
) -> Relation | None:
    """Derive the ``Relation`` of a field, if it declares one.

    The referenced key is the explicit ``referenced_key``/``extract``
    attribute. Without one, and when *implicit_referenced_key* is set, the
    last ``_``-separated segment of the field name is used (``hammer_id`` ->
    ``id``). The base name is the field name with ``_<referenced_key>``
    stripped, if present.

    Args:
        field: The field declaration.
        attributes: Its parsed attributes.
        implicit_referenced_key: Allow the field-name suffix fallback.

    Returns:
        The derived relation, or ``None`` when the field has no relation.

    Raises:
        UnsupportedShapeError: The field is unnamed.
        MissingReferencedKeyError: No referenced key could be resolved.

    Examples:
        >>> from record_factory.schema.models import TypeRef
        >>> relation = derive_relation(
        ...     FieldShape(name="hammer_id"),
        ...     FieldAttributes(relation=TypeRef(name="Hammer"), referenced_key="id"),
        ... )
        >>> relation.base_name, relation.builder_field
        ('hammer', 'hammer_factory')
    """
    if attributes.relation is None:
        return None

    if field.name is None:
        raise UnsupportedShapeError(ShapeKind.TUPLE.value)

    referenced_key = attributes.key
    if referenced_key is None and implicit_referenced_key:
        referenced_key = _implicit_key(field.name)
    if referenced_key is None:
        raise MissingReferencedKeyError(field.name)

    base_name = field.name.removesuffix(f"_{referenced_key}") or field.name

    return Relation(
        owner_field=field.name,
        builder_field=f"{base_name}_factory",
        related_type=attributes.relation,
        referenced_key=referenced_key,
        base_name=base_name,
    )


def is_reserved_name(field_name: str) -> bool:
    """Return True if a setter named *field_name* would shadow a builder member."""
    return field_name in RESERVED_FIELD_NAMES or field_name.startswith("_")


def _check_hook_names(fields: list[FieldAnalysis]) -> None:
    """Each relation needs its own hook, and no setter may share its name.

    Raises:
        DuplicateRelationError: Two relations derive the same hook.
        ReservedFieldNameError: A field is named like a relation hook.
    """
    owners: dict[str, list[str]] = {}
    for field in fields:
        if field.relation is not None:
            owners.setdefault(field.relation.hook_name, []).append(field.name)

    for hook_name, field_names in owners.items():
        if len(field_names) > 1:
            raise DuplicateRelationError(hook_name, field_names)

    for field in fields:
        if field.name in owners:
            raise ReservedFieldNameError(field.name)


def default_table_name(record_name: str) -> str:
    """Default storage identity: lower-cased record name plus ``s``."""
    return f"{record_name.lower()}s"


# ============================================================================
# Analyzer
# ============================================================================


class SchemaAnalyzer:
    """Single-use analyzer for one ``RecordShape``.

    Args:
        shape: The raw record description.
        settings: Analysis settings (default: ``AnalysisSettings()``).
    """

    def __init__(self, shape: RecordShape, settings: AnalysisSettings | None = None) -> None:
        self._shape = shape
        self._settings = settings or AnalysisSettings()
        self._state = AnalyzerState.UNVALIDATED
        self._fields: list[FieldShape] = []
        self._analyzed: list[FieldAnalysis] = []
        self._output: AnalysisOutput | None = None

    @property
    def state(self) -> AnalyzerState:
        return self._state

    def analyze(self) -> AnalysisOutput:
        """Run every remaining transition and return the analysis output.

        Raises:
            AnalysisError: The first problem found, in field order.
        """
        while self._state is not AnalyzerState.ANALYZED:
            self._advance()
        assert self._output is not None
        return self._output

    def _advance(self) -> None:
        transitions = {
            AnalyzerState.UNVALIDATED: self._validate_shape,
            AnalyzerState.SHAPE_VALIDATED: self._parse_fields,
            AnalyzerState.FIELDS_ANALYZED: self._finalize,
        }
        self._state = transitions[self._state]()

    def _validate_shape(self) -> AnalyzerState:
        if self._shape.kind is not ShapeKind.STRUCT:
            raise UnsupportedShapeError(self._shape.kind.value)
        self._fields = list(self._shape.fields)
        return AnalyzerState.SHAPE_VALIDATED

    def _parse_fields(self) -> AnalyzerState:
        analyzed: list[FieldAnalysis] = []
        for field in self._fields:
            if field.name is None:
                raise UnsupportedShapeError(ShapeKind.TUPLE.value)
            if is_reserved_name(field.name):
                raise ReservedFieldNameError(field.name)

            attributes = parse_field_attributes(field.annotations)
            relation = derive_relation(
                field,
                attributes,
                implicit_referenced_key=self._settings.implicit_referenced_key,
            )
            analyzed.append(
                FieldAnalysis(shape=field, attributes=attributes, relation=relation)
            )

        _check_hook_names(analyzed)
        self._analyzed = analyzed
        return AnalyzerState.FIELDS_ANALYZED

    def _finalize(self) -> AnalyzerState:
        unknown = set(self._shape.annotations) - RECORD_ATTRIBUTE_KEYS
        if unknown:
            raise UnparsableAttributeError(
                f"Unknown field: `{sorted(unknown)[0]}` on {self._shape.name}"
            )

        table_name = self._shape.annotations.get("table")
        if table_name is None:
            table_name = default_table_name(self._shape.name)
        elif not isinstance(table_name, str):
            raise UnparsableLiteralError(table_name)

        self._output = AnalysisOutput(
            record_name=self._shape.name,
            table_name=table_name,
            fields=tuple(self._analyzed),
        )
        logger.debug(
            "Analyzed %s: %d fields, %d relations, table=%s",
            self._shape.name,
            len(self._output.fields),
            len(self._output.relations),
            table_name,
        )
        return AnalyzerState.ANALYZED


def analyze(shape: RecordShape, settings: AnalysisSettings | None = None) -> AnalysisOutput:
    """Analyze *shape* and return its ``AnalysisOutput``."""
    return SchemaAnalyzer(shape, settings).analyze()


def analyze_class(record_type: Any, settings: AnalysisSettings | None = None) -> AnalysisOutput:
    """Reflect *record_type* into a ``RecordShape`` and analyze it."""
    settings = settings or AnalysisSettings()
    return analyze(shape_from_class(record_type, settings.attribute_namespace), settings)


def analysis_of(record_type: Any, settings: AnalysisSettings | None = None) -> AnalysisOutput:
    """Analysis attached by ``@factory``, or a fresh analysis of *record_type*."""
    analysis = None
    if isinstance(record_type, type):
        analysis = vars(record_type).get("__record_analysis__")
    if analysis is not None:
        return analysis
    return analyze_class(record_type, settings)
