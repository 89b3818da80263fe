"""Pydantic models describing record schemas and their analysis.

This module contains the schema-domain models:
- Input models: ShapeKind, FieldShape, RecordShape
- Parsed annotation models: TypeRef, FieldAttributes
- Analysis models: Relation, FieldAnalysis, AnalysisOutput

Everything produced by the analyzer is frozen: downstream components
(builder synthesis, persistence) only read it.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# An annotation group is either a bare flag ("primary_key") or a mapping of
# attribute key to value ({"relation": "Hammer", "referenced_key": "id"}).
AnnotationGroup = str | dict[str, Any]


# ============================================================================
# Input Models
# ============================================================================


class ShapeKind(str, Enum):
    """Structural kind of a record declaration."""

    STRUCT = "struct"
    ENUM = "enum"
    UNION = "union"
    UNIT = "unit"
    TUPLE = "tuple"


class FieldShape(BaseModel):
    """One declared field of a record.

    Example:
        >>> field = FieldShape(name="weight", type_hint=int)
        >>> field.annotations
        []
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str | None  # None for positional (unnamed) fields
    type_hint: Any = None
    annotations: list[AnnotationGroup] = Field(default_factory=list)
    default_factory: Callable[[], Any] | None = None


class RecordShape(BaseModel):
    """Raw description of a record type, as authored or reflected.

    Example:
        >>> shape = RecordShape(
        ...     name="Anvil",
        ...     fields=[FieldShape(name="id", type_hint=int, annotations=["primary_key"])],
        ... )
        >>> shape.kind
        <ShapeKind.STRUCT: 'struct'>
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    kind: ShapeKind = ShapeKind.STRUCT
    fields: list[FieldShape] = Field(default_factory=list)
    annotations: dict[str, Any] = Field(default_factory=dict)  # record-level


# ============================================================================
# Parsed Annotation Models
# ============================================================================


class TypeRef(BaseModel):
    """Reference to another record type, by name and optionally by class."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    target: Any = None  # the related class when given directly

    def __str__(self) -> str:
        return self.name


class FieldAttributes(BaseModel):
    """Parsed per-field annotations.

    ``extract`` is an alias of ``referenced_key``: both name the field of the
    related record whose value is copied into this one.
    """

    model_config = ConfigDict(frozen=True)

    primary_key: bool = False
    relation: TypeRef | None = None
    referenced_key: str | None = None
    extract: str | None = None

    @property
    def key(self) -> str | None:
        """Referenced key, whichever spelling was used."""
        return self.referenced_key or self.extract


# ============================================================================
# Analysis Models
# ============================================================================


class Relation(BaseModel):
    """A field populated by creating a related record first.

    Example:
        >>> relation = Relation(
        ...     owner_field="hammer_id",
        ...     builder_field="hammer_factory",
        ...     related_type=TypeRef(name="Hammer"),
        ...     referenced_key="id",
        ...     base_name="hammer",
        ... )
        >>> relation.hook_name
        'for_hammer'
    """

    model_config = ConfigDict(frozen=True)

    owner_field: str            # field on the owning record, e.g. hammer_id
    builder_field: str          # pending-callback slot, e.g. hammer_factory
    related_type: TypeRef       # e.g. Hammer
    referenced_key: str         # field of the related record, e.g. id
    base_name: str              # e.g. hammer

    @property
    def hook_name(self) -> str:
        """Name of the builder method that customizes this relation."""
        return f"for_{self.base_name}"


class FieldAnalysis(BaseModel):
    """A field together with its parsed attributes and derived relation."""

    model_config = ConfigDict(frozen=True)

    shape: FieldShape
    attributes: FieldAttributes
    relation: Relation | None = None

    @property
    def name(self) -> str:
        # Named-ness is guaranteed once the analyzer accepted the field
        return self.shape.name or ""


class AnalysisOutput(BaseModel):
    """Complete, immutable description of an analyzed record."""

    model_config = ConfigDict(frozen=True)

    record_name: str
    table_name: str
    fields: tuple[FieldAnalysis, ...] = ()

    @property
    def field_names(self) -> list[str]:
        return [field.name for field in self.fields]

    @property
    def relations(self) -> list[Relation]:
        """Relations in field declaration order."""
        return [field.relation for field in self.fields if field.relation is not None]

    @property
    def primary_keys(self) -> list[str]:
        return [field.name for field in self.fields if field.attributes.primary_key]
