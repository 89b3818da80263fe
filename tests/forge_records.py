"""Sample records used by the CLI tests (imported as ``forge_records:<Record>``)."""

from dataclasses import dataclass, field

from record_factory.builder.registry import FactoryRegistry, factory
from record_factory.persistence.database import DatabasePersistable

registry = FactoryRegistry()


@factory(registry=registry)
@dataclass
class Hammer(DatabasePersistable):
    id: int | None = field(default=None, metadata={"record_factory": "primary_key"})
    strength: int = 0


@factory(registry=registry)
@dataclass
class Anvil(DatabasePersistable):
    __record_factory__ = {"table": "custom_anvils"}

    id: int | None = field(default=None, metadata={"record_factory": "primary_key"})
    hammer_id: int = field(
        default=0,
        metadata={"record_factory": {"relation": "Hammer", "referenced_key": "id"}},
    )
    weight: int = 0


@dataclass
class Broken:
    hammer: int = field(default=0, metadata={"record_factory": {"relation": "Hammer"}})


NOT_A_RECORD = 42


@dataclass
class Loose(DatabasePersistable):
    hammer_id: int = field(default=0, metadata={"record_factory": {"relation": "Hammer"}})
