"""In-memory database adapter.

Provides ``InMemoryAdapter``, a ``DatabaseClient`` that keeps rows in plain
dicts. Serial columns (``id`` by default) are generated on insert when
missing, like a ``SERIAL`` primary key. Handy for tests, fixtures and
examples where no database is available.

Usage:
    from record_factory.adapters.memory import InMemoryAdapter

    store = InMemoryAdapter()
    anvil = await Anvil.builder().weight(12).create(store)
    anvil.id                              # 1
    await store.select("anvils", "*")     # [{"id": 1, "hammer_id": 0, "weight": 12}]
"""

import copy
from collections import defaultdict
from typing import Any


class InMemoryAdapter:
    """In-memory implementation of the ``DatabaseClient`` protocol.

    Args:
        serial_columns: Columns filled from a per-table counter when an
            inserted row does not provide them (or provides ``None``).
            Explicit integer values advance the counter past them.
    """

    def __init__(self, serial_columns: tuple[str, ...] = ("id",)) -> None:
        self._serial_columns = serial_columns
        self._tables: dict[str, list[dict]] = defaultdict(list)
        self._sequences: dict[tuple[str, str], int] = {}

    @property
    def tables(self) -> dict[str, list[dict]]:
        """Deep copy of every stored row, by table."""
        return copy.deepcopy(dict(self._tables))

    def _next_value(self, table: str, column: str) -> int:
        key = (table, column)
        self._sequences[key] = self._sequences.get(key, 0) + 1
        return self._sequences[key]

    def _advance_past(self, table: str, column: str, value: Any) -> None:
        if isinstance(value, int) and not isinstance(value, bool):
            key = (table, column)
            self._sequences[key] = max(self._sequences.get(key, 0), value)

    async def select(
        self,
        table: str,
        columns: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
    ) -> list[dict]:
        """Select rows from table."""
        rows = [
            row
            for row in self._tables.get(table, [])
            if all(row.get(k) == v for k, v in (filters or {}).items())
        ]
        if order_by:
            rows = sorted(rows, key=lambda row: row.get(order_by))

        wanted = [col.strip() for col in columns.split(",") if col.strip()]
        if wanted == ["*"]:
            return [copy.deepcopy(row) for row in rows]
        return [{col: copy.deepcopy(row.get(col)) for col in wanted} for row in rows]

    async def insert(self, table: str, data: dict) -> dict:
        """Insert row and return it with serial columns filled in."""
        row = copy.deepcopy(data)
        for column in self._serial_columns:
            if row.get(column) is None:
                row[column] = self._next_value(table, column)
            else:
                self._advance_past(table, column, row[column])
        self._tables[table].append(row)
        return copy.deepcopy(row)

    async def close(self) -> None:
        """Drop every stored row."""
        self._tables.clear()
        self._sequences.clear()
