"""record-factory: Schema-derived record builders with related-record creation.

Analyzes annotated record classes, synthesizes an immutable builder per
record (one setter per field, one ``for_<relation>`` hook per relation), and
persists records through the async ``Persistable`` protocol.

Usage:
    from record_factory import factory, DatabasePersistable, get_adapter
    from record_factory import analyze, shape_from_class, render_stub
    from record_factory import AnalysisSettings, load_config
"""

__version__ = "0.1.0"

# Adapters
from record_factory.adapters.base import DatabaseClient
from record_factory.adapters.memory import InMemoryAdapter
from record_factory.adapters.postgres import AsyncPostgresAdapter

# Builders
from record_factory.builder.registry import FactoryRegistry, default_registry, factory
from record_factory.builder.render import render_stub
from record_factory.builder.runtime import RecordBuilder
from record_factory.builder.synthesizer import BuilderContract, synthesize

# Config
from record_factory.config.loader import load_config
from record_factory.config.models import AnalysisSettings, DatabaseProfile, FactoryConfig

# Connections
from record_factory.connect import get_adapter, resolve_url

# Errors
from record_factory.errors import (
    AnalysisError,
    BuildError,
    ProfileNotFoundError,
    RecordFactoryError,
)

# Persistence
from record_factory.persistence.base import Persistable
from record_factory.persistence.database import DatabasePersistable

# Schema
from record_factory.schema.analyzer import analyze, analyze_class
from record_factory.schema.models import AnalysisOutput, FieldShape, RecordShape
from record_factory.schema.shapes import shape_from_class

__all__ = [
    # Adapters
    "DatabaseClient",
    "AsyncPostgresAdapter",
    "InMemoryAdapter",
    # Builders
    "factory",
    "FactoryRegistry",
    "default_registry",
    "RecordBuilder",
    "BuilderContract",
    "synthesize",
    "render_stub",
    # Config
    "load_config",
    "AnalysisSettings",
    "DatabaseProfile",
    "FactoryConfig",
    # Connections
    "get_adapter",
    "resolve_url",
    # Errors
    "RecordFactoryError",
    "AnalysisError",
    "BuildError",
    "ProfileNotFoundError",
    # Persistence
    "Persistable",
    "DatabasePersistable",
    # Schema
    "analyze",
    "analyze_class",
    "shape_from_class",
    "AnalysisOutput",
    "RecordShape",
    "FieldShape",
]
