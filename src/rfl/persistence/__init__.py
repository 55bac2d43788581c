from .migrations import MigrationRunner
from .sqlite_store import SqliteStorage
from .storage import KeyValueStorage, MemoryStorage

__all__ = [
    "KeyValueStorage",
    "MemoryStorage",
    "MigrationRunner",
    "SqliteStorage",
]
