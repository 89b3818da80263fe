"""Record schema models, annotation parsing, reflection, and analysis.

Provides the schema models (``RecordShape``, ``FieldAttributes``,
``Relation``, ``AnalysisOutput``), the annotation parser
(``parse_field_attributes``), class reflection (``shape_from_class``) and the
analyzer (``analyze``, ``SchemaAnalyzer``).

Usage:
    from record_factory.schema import analyze, shape_from_class
    from record_factory.schema import RecordShape, FieldShape
"""

from record_factory.schema.analyzer import (
    AnalyzerState,
    SchemaAnalyzer,
    analysis_of,
    analyze,
    analyze_class,
    derive_relation,
)
from record_factory.schema.attributes import parse_field_attributes
from record_factory.schema.models import (
    AnalysisOutput,
    FieldAnalysis,
    FieldAttributes,
    FieldShape,
    RecordShape,
    Relation,
    ShapeKind,
    TypeRef,
)
from record_factory.schema.shapes import shape_from_class

__all__ = [
    "analyze",
    "analyze_class",
    "analysis_of",
    "derive_relation",
    "SchemaAnalyzer",
    "AnalyzerState",
    "parse_field_attributes",
    "shape_from_class",
    "AnalysisOutput",
    "FieldAnalysis",
    "FieldAttributes",
    "FieldShape",
    "RecordShape",
    "Relation",
    "ShapeKind",
    "TypeRef",
]
