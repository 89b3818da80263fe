"""Record persistence: the ``Persistable`` protocol and a database-backed mixin.

Usage:
    from record_factory.persistence import Persistable, DatabasePersistable
"""

from record_factory.persistence.base import Persistable
from record_factory.persistence.database import DatabasePersistable

__all__ = ["Persistable", "DatabasePersistable"]
