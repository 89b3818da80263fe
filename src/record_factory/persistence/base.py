"""Persistence protocol definition.

Defines the ``Persistable`` Protocol that every record created through a
builder must implement. Both operations are ``async def``; the connection
type and the errors raised are entirely up to the implementation and are
propagated unchanged by builders.

Usage:
    from record_factory.persistence.base import Persistable

    @dataclass
    class Anvil:
        id: int = 0

        async def create(self, connection) -> "Anvil":
            return self

        @classmethod
        async def all(cls, connection) -> list["Anvil"]:
            return []
"""

from typing import Any, Protocol, Self, runtime_checkable


@runtime_checkable
class Persistable(Protocol):
    """Record persistence interface.

    Builders only ever call ``create``. ``all`` belongs to the same contract
    for callers that need to read records back.
    """

    async def create(self, connection: Any) -> Self:
        """Persist this record and return the stored form.

        Args:
            connection: Opaque, caller-supplied handle to the storage medium.

        Returns:
            The persisted record, e.g. with generated identifiers populated.

        Raises:
            Exception: Any persistence failure, defined by the implementation.
        """
        ...

    @classmethod
    async def all(cls, connection: Any) -> list[Self]:
        """Return every persisted record of this type.

        Args:
            connection: Opaque, caller-supplied handle to the storage medium.
        """
        ...
