"""Builder synthesis, runtime builders, registry, and stub rendering.

Usage:
    from record_factory.builder import factory, synthesize, render_stub
    from record_factory.builder import FactoryRegistry, RecordBuilder
"""

from record_factory.builder.registry import FactoryRegistry, default_registry, factory
from record_factory.builder.render import render_builder, render_stub
from record_factory.builder.runtime import RecordBuilder, build_builder_class
from record_factory.builder.synthesizer import (
    BuilderContract,
    FieldSetter,
    RelationHook,
    synthesize,
)

__all__ = [
    "factory",
    "FactoryRegistry",
    "default_registry",
    "RecordBuilder",
    "build_builder_class",
    "synthesize",
    "BuilderContract",
    "FieldSetter",
    "RelationHook",
    "render_builder",
    "render_stub",
]
