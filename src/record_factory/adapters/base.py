"""Database client protocol definition.

Defines the ``DatabaseClient`` Protocol that ``DatabasePersistable`` records
persist through. All methods are ``async def``.

Usage:
    from record_factory.adapters.base import DatabaseClient

    async def do_work(client: DatabaseClient) -> None:
        rows = await client.select("anvils", "id, weight")
        await client.insert("anvils", {"weight": 12})
        await client.close()
"""

from typing import Any, Protocol


class DatabaseClient(Protocol):
    """Database client interface that all adapters must implement.

    All methods are async -- callers must ``await`` every operation.
    """

    async def select(
        self,
        table: str,
        columns: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
    ) -> list[dict]:
        """Select rows from table.

        Args:
            table: Table name.
            columns: Comma-separated column names (e.g., ``"id, weight"``)
                or ``"*"``.
            filters: Optional dict of field=value filters (all must match via AND).
            order_by: Optional column name to sort by.

        Returns:
            List of dicts, one per row.  Empty list if no matches.

        Example:
            rows = await client.select(
                "anvils",
                "id, hammer_id, weight",
                filters={"hammer_id": 100},
                order_by="id",
            )
        """
        ...

    async def insert(self, table: str, data: dict) -> dict:
        """Insert row into table and return the created row.

        Args:
            table: Table name.
            data: Dict of field=value pairs to insert.

        Returns:
            Dict representing the created row (includes generated ids, etc.).

        Raises:
            Exception: If duplicate key or constraint violation.

        Example:
            row = await client.insert("anvils", {"hammer_id": 100, "weight": 12})
        """
        ...

    async def close(self) -> None:
        """Close database connection and clean up resources."""
        ...
