"""Database-backed persistence for records.

``DatabasePersistable`` implements the ``Persistable`` protocol over any
``DatabaseClient``: the connection handed to ``create()`` / ``all()`` is the
client itself. Table and column names come from the record's analysis
(``__record_factory__ = {"table": ...}`` or the default plural name).

Usage:
    @factory
    @dataclass
    class Anvil(DatabasePersistable):
        id: int | None = field(default=None, metadata={"record_factory": "primary_key"})
        weight: int = 0

    adapter = AsyncPostgresAdapter(database_url)
    anvil = await Anvil(weight=12).create(adapter)   # INSERT INTO anvils ...
    anvils = await Anvil.all(adapter)                # SELECT id, weight FROM anvils
"""

import logging
from typing import Any, Self

from record_factory.adapters.base import DatabaseClient
from record_factory.schema.analyzer import analysis_of
from record_factory.schema.models import AnalysisOutput

logger = logging.getLogger(__name__)


def record_to_row(record: Any, analysis: AnalysisOutput) -> dict[str, Any]:
    """Column values of *record*.

    Primary-key columns holding ``None`` are left out so the database can
    generate them.
    """
    primary_keys = set(analysis.primary_keys)
    row: dict[str, Any] = {}
    for name in analysis.field_names:
        value = getattr(record, name)
        if value is None and name in primary_keys:
            continue
        row[name] = value
    return row


def row_to_kwargs(row: dict[str, Any], analysis: AnalysisOutput) -> dict[str, Any]:
    """Constructor arguments for the analyzed fields present in *row*."""
    return {name: row[name] for name in analysis.field_names if name in row}


class DatabasePersistable:
    """Mixin implementing ``Persistable`` through a ``DatabaseClient``."""

    async def create(self, connection: DatabaseClient) -> Self:
        """Insert this record and return it as stored.

        Errors raised by *connection* propagate unchanged.
        """
        analysis = analysis_of(type(self))
        row = await connection.insert(analysis.table_name, record_to_row(self, analysis))
        logger.debug("Inserted %s into %s", analysis.record_name, analysis.table_name)
        return type(self)(**row_to_kwargs(row, analysis))

    @classmethod
    async def all(cls, connection: DatabaseClient) -> list[Self]:
        """Return every stored record of this type."""
        analysis = analysis_of(cls)
        columns = ", ".join(analysis.field_names) or "*"
        rows = await connection.select(analysis.table_name, columns)
        return [cls(**row_to_kwargs(row, analysis)) for row in rows]
