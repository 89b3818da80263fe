"""Tests for schema analysis.

Covers shape validation, table naming, relation derivation under both
referenced-key policies, reserved names, and determinism.
"""

from dataclasses import dataclass, field
from enum import Enum

import pytest

from record_factory.config.models import AnalysisSettings
from record_factory.errors import (
    DuplicateRelationError,
    MissingReferencedKeyError,
    ReservedFieldNameError,
    UnknownAttributeError,
    UnparsableAttributeError,
    UnparsableLiteralError,
    UnsupportedShapeError,
)
from record_factory.schema.analyzer import (
    AnalyzerState,
    SchemaAnalyzer,
    analysis_of,
    analyze,
    analyze_class,
    default_table_name,
    derive_relation,
)
from record_factory.schema.models import (
    FieldAttributes,
    FieldShape,
    RecordShape,
    ShapeKind,
    TypeRef,
)


def anvil_shape(**overrides) -> RecordShape:
    data = {
        "name": "Anvil",
        "fields": [
            FieldShape(name="id", type_hint=int, annotations=["primary_key"]),
            FieldShape(
                name="hammer_id",
                type_hint=int,
                annotations=[{"relation": "Hammer", "referenced_key": "id"}],
            ),
            FieldShape(name="weight", type_hint=int),
        ],
    }
    data.update(overrides)
    return RecordShape(**data)


# ============================================================================
# Test: Shape Validation
# ============================================================================


class TestShapeValidation:
    """Only flat named-field records are accepted."""

    @pytest.mark.parametrize(
        "kind",
        [ShapeKind.ENUM, ShapeKind.UNION, ShapeKind.UNIT, ShapeKind.TUPLE],
    )
    def test_rejects_non_struct(self, kind: ShapeKind) -> None:
        with pytest.raises(UnsupportedShapeError) as exc_info:
            analyze(RecordShape(name="Anvil", kind=kind))
        assert exc_info.value.kind == kind.value

    def test_non_struct_rejected_before_fields_are_parsed(self) -> None:
        shape = RecordShape(
            name="Anvil",
            kind=ShapeKind.ENUM,
            fields=[FieldShape(name="a", annotations=["bogus"])],
        )
        with pytest.raises(UnsupportedShapeError):
            analyze(shape)

    def test_rejects_unnamed_field(self) -> None:
        shape = RecordShape(name="Anvil", fields=[FieldShape(name=None, type_hint=int)])
        with pytest.raises(UnsupportedShapeError):
            analyze(shape)

    def test_rejects_enum_class(self) -> None:
        class Color(Enum):
            RED = 1

        with pytest.raises(UnsupportedShapeError, match="enum given"):
            analyze_class(Color)

    def test_rejects_tuple_class(self) -> None:
        class Point(tuple):
            pass

        with pytest.raises(UnsupportedShapeError, match="tuple given"):
            analyze_class(Point)

    def test_empty_struct_is_valid(self) -> None:
        output = analyze(RecordShape(name="Marker"))
        assert output.fields == ()
        assert output.table_name == "markers"


# ============================================================================
# Test: Table Name
# ============================================================================


class TestTableName:
    """Default and overridden storage identity."""

    def test_default_table_name(self) -> None:
        assert analyze(anvil_shape()).table_name == "anvils"
        assert default_table_name("HammerHead") == "hammerheads"

    def test_custom_table_name(self) -> None:
        output = analyze(anvil_shape(annotations={"table": "custom_anvils"}))
        assert output.table_name == "custom_anvils"

    def test_non_string_table_name(self) -> None:
        with pytest.raises(UnparsableLiteralError):
            analyze(anvil_shape(annotations={"table": 3}))

    def test_unknown_record_attribute(self) -> None:
        with pytest.raises(UnparsableAttributeError, match="schema"):
            analyze(anvil_shape(annotations={"schema": "public"}))


# ============================================================================
# Test: Relations
# ============================================================================


class TestRelations:
    """Relation derivation from field attributes."""

    def test_relation_names(self) -> None:
        output = analyze(anvil_shape())
        [relation] = output.relations
        assert relation.owner_field == "hammer_id"
        assert relation.base_name == "hammer"
        assert relation.builder_field == "hammer_factory"
        assert relation.related_type.name == "Hammer"
        assert relation.referenced_key == "id"
        assert relation.hook_name == "for_hammer"

    def test_explicit_key_without_suffix(self) -> None:
        relation = derive_relation(
            FieldShape(name="hammer"),
            FieldAttributes(relation=TypeRef(name="Hammer"), referenced_key="id"),
        )
        assert relation.base_name == "hammer"
        assert relation.builder_field == "hammer_factory"

    def test_extract_alias(self) -> None:
        relation = derive_relation(
            FieldShape(name="hammer_uuid"),
            FieldAttributes(relation=TypeRef(name="Hammer"), extract="uuid"),
        )
        assert relation.referenced_key == "uuid"
        assert relation.base_name == "hammer"

    def test_implicit_key_from_suffix(self) -> None:
        relation = derive_relation(
            FieldShape(name="hammer_id"),
            FieldAttributes(relation=TypeRef(name="Hammer")),
        )
        assert relation.referenced_key == "id"
        assert relation.base_name == "hammer"

    def test_implicit_key_uses_last_segment(self) -> None:
        relation = derive_relation(
            FieldShape(name="main_hammer_id"),
            FieldAttributes(relation=TypeRef(name="Hammer")),
        )
        assert relation.referenced_key == "id"
        assert relation.base_name == "main_hammer"

    def test_missing_key_without_suffix(self) -> None:
        shape = RecordShape(
            name="Anvil",
            fields=[FieldShape(name="hammer", annotations=[{"relation": "Hammer"}])],
        )
        with pytest.raises(MissingReferencedKeyError) as exc_info:
            analyze(shape)
        assert exc_info.value.field_name == "hammer"

    def test_strict_policy_requires_explicit_key(self) -> None:
        shape = RecordShape(
            name="Anvil",
            fields=[FieldShape(name="hammer_id", annotations=[{"relation": "Hammer"}])],
        )
        strict = AnalysisSettings(implicit_referenced_key=False)
        with pytest.raises(MissingReferencedKeyError):
            analyze(shape, strict)

    def test_strict_policy_accepts_explicit_key(self) -> None:
        strict = AnalysisSettings(implicit_referenced_key=False)
        assert len(analyze(anvil_shape(), strict).relations) == 1

    def test_no_relation_without_attribute(self) -> None:
        output = analyze(anvil_shape())
        assert [f.relation is None for f in output.fields] == [True, False, True]

    def test_key_without_relation_is_not_a_relation(self) -> None:
        shape = RecordShape(
            name="Anvil",
            fields=[FieldShape(name="hammer_id", annotations=[{"referenced_key": "id"}])],
        )
        assert analyze(shape).relations == []

    def test_relations_in_field_order(self) -> None:
        shape = RecordShape(
            name="Anvil",
            fields=[
                FieldShape(name="tongs_id", annotations=[{"relation": "Tongs"}]),
                FieldShape(name="hammer_id", annotations=[{"relation": "Hammer"}]),
            ],
        )
        assert [r.base_name for r in analyze(shape).relations] == ["tongs", "hammer"]

    def test_relations_sharing_a_hook_are_rejected(self) -> None:
        shape = RecordShape(
            name="Anvil",
            fields=[
                FieldShape(name="hammer_id", annotations=[{"relation": "Hammer"}]),
                FieldShape(name="hammer_uuid", annotations=[{"relation": "Hammer"}]),
            ],
        )
        with pytest.raises(DuplicateRelationError) as exc_info:
            analyze(shape)
        assert exc_info.value.hook_name == "for_hammer"
        assert exc_info.value.field_names == ["hammer_id", "hammer_uuid"]

    def test_distinct_base_names_to_same_target(self) -> None:
        shape = RecordShape(
            name="Anvil",
            fields=[
                FieldShape(name="hammer_id", annotations=[{"relation": "Hammer"}]),
                FieldShape(name="spare_hammer_id", annotations=[{"relation": "Hammer"}]),
            ],
        )
        hooks = [r.hook_name for r in analyze(shape).relations]
        assert hooks == ["for_hammer", "for_spare_hammer"]

    def test_field_named_like_a_hook_is_rejected(self) -> None:
        shape = RecordShape(
            name="Anvil",
            fields=[
                FieldShape(name="hammer_id", annotations=[{"relation": "Hammer"}]),
                FieldShape(name="for_hammer", type_hint=int),
            ],
        )
        with pytest.raises(ReservedFieldNameError) as exc_info:
            analyze(shape)
        assert exc_info.value.field_name == "for_hammer"


# ============================================================================
# Test: Analyzer Behaviour
# ============================================================================


class TestSchemaAnalyzer:
    """State machine, errors, and determinism."""

    def test_states_advance_to_analyzed(self) -> None:
        analyzer = SchemaAnalyzer(anvil_shape())
        assert analyzer.state is AnalyzerState.UNVALIDATED
        analyzer.analyze()
        assert analyzer.state is AnalyzerState.ANALYZED

    def test_failure_stops_before_analyzed(self) -> None:
        analyzer = SchemaAnalyzer(RecordShape(name="Anvil", kind=ShapeKind.ENUM))
        with pytest.raises(UnsupportedShapeError):
            analyzer.analyze()
        assert analyzer.state is AnalyzerState.UNVALIDATED

    def test_first_field_error_wins(self) -> None:
        shape = RecordShape(
            name="Anvil",
            fields=[
                FieldShape(name="a", annotations=["bogus"]),
                FieldShape(name="hammer", annotations=[{"relation": "Hammer"}]),
            ],
        )
        with pytest.raises(UnknownAttributeError):
            analyze(shape)

    @pytest.mark.parametrize("name", ["create", "new", "field_values", "pending_relations"])
    def test_reserved_field_names(self, name: str) -> None:
        shape = RecordShape(name="Anvil", fields=[FieldShape(name=name, type_hint=int)])
        with pytest.raises(ReservedFieldNameError) as exc_info:
            analyze(shape)
        assert exc_info.value.field_name == name

    @pytest.mark.parametrize("name", ["_analysis", "_evolve", "_registry", "_private"])
    def test_underscore_field_names(self, name: str) -> None:
        shape = RecordShape(name="Anvil", fields=[FieldShape(name=name, type_hint=int)])
        with pytest.raises(ReservedFieldNameError) as exc_info:
            analyze(shape)
        assert exc_info.value.field_name == name

    def test_primary_keys(self) -> None:
        assert analyze(anvil_shape()).primary_keys == ["id"]

    def test_field_order_preserved(self) -> None:
        assert analyze(anvil_shape()).field_names == ["id", "hammer_id", "weight"]

    def test_analysis_is_deterministic(self) -> None:
        assert analyze(anvil_shape()) == analyze(anvil_shape())


# ============================================================================
# Test: Class Analysis
# ============================================================================


class TestAnalyzeClass:
    """analyze_class() and analysis_of() on real classes."""

    def test_dataclass_with_custom_table(self) -> None:
        @dataclass
        class Anvil:
            __record_factory__ = {"table": "custom_anvils"}

            id: int = field(default=0, metadata={"record_factory": "primary_key"})
            hammer_id: int = field(
                default=0, metadata={"record_factory": {"relation": "Hammer"}}
            )

        output = analyze_class(Anvil)
        assert output.record_name == "Anvil"
        assert output.table_name == "custom_anvils"
        assert output.relations[0].hook_name == "for_hammer"

    def test_custom_attribute_namespace(self) -> None:
        @dataclass
        class Anvil:
            id: int = field(default=0, metadata={"forge": "primary_key"})

        settings = AnalysisSettings(attribute_namespace="forge")
        assert analyze_class(Anvil, settings).primary_keys == ["id"]
        assert analyze_class(Anvil).primary_keys == []

    def test_analysis_of_prefers_attached_analysis(self) -> None:
        @dataclass
        class Anvil:
            weight: int = 0

        attached = analyze(RecordShape(name="Anvil", annotations={"table": "forged"}))
        Anvil.__record_analysis__ = attached
        assert analysis_of(Anvil) is attached

    def test_analysis_of_ignores_inherited_analysis(self) -> None:
        @dataclass
        class Base:
            weight: int = 0

        Base.__record_analysis__ = analyze_class(Base)

        @dataclass
        class Anvil(Base):
            hammer_id: int = 0

        assert analysis_of(Anvil).record_name == "Anvil"
        assert analysis_of(Anvil).field_names == ["weight", "hammer_id"]
