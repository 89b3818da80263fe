"""Builder synthesis: from an ``AnalysisOutput`` to a ``BuilderContract``.

Synthesis is deterministic and cannot fail -- every error was already
raised by analysis. The contract lists, in declaration order, one setter per
field and one customization hook per relation. ``runtime`` turns it into a
builder class, ``render`` into a typed stub.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

from record_factory.schema.models import AnalysisOutput, TypeRef


class FieldSetter(BaseModel):
    """``RBuilder.<field>(value)``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method_name: str
    field_name: str
    type_hint: Any = None


class RelationHook(BaseModel):
    """``RBuilder.for_<base_name>(callback)``."""

    model_config = ConfigDict(frozen=True)

    method_name: str      # for_hammer
    slot_name: str        # hammer_factory
    owner_field: str      # hammer_id
    related_type: TypeRef
    referenced_key: str


class BuilderContract(BaseModel):
    """Everything a builder for one record type exposes."""

    model_config = ConfigDict(frozen=True)

    record_name: str
    builder_name: str
    table_name: str
    setters: tuple[FieldSetter, ...] = ()
    hooks: tuple[RelationHook, ...] = ()


def synthesize(analysis: AnalysisOutput) -> BuilderContract:
    """Derive the builder contract of an analyzed record.

    Examples:
        >>> from record_factory.schema.analyzer import analyze
        >>> from record_factory.schema.models import FieldShape, RecordShape
        >>> analysis = analyze(RecordShape(
        ...     name="Anvil",
        ...     fields=[FieldShape(name="hammer_id", annotations=[{"relation": "Hammer"}])],
        ... ))
        >>> contract = synthesize(analysis)
        >>> contract.builder_name
        'AnvilBuilder'
        >>> [hook.method_name for hook in contract.hooks]
        ['for_hammer']
    """
    setters = tuple(
        FieldSetter(
            method_name=field.name,
            field_name=field.name,
            type_hint=field.shape.type_hint,
        )
        for field in analysis.fields
    )
    hooks = tuple(
        RelationHook(
            method_name=relation.hook_name,
            slot_name=relation.builder_field,
            owner_field=relation.owner_field,
            related_type=relation.related_type,
            referenced_key=relation.referenced_key,
        )
        for relation in analysis.relations
    )
    return BuilderContract(
        record_name=analysis.record_name,
        builder_name=f"{analysis.record_name}Builder",
        table_name=analysis.table_name,
        setters=setters,
        hooks=hooks,
    )
