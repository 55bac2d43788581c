from .config import RuntimePaths, RuntimeSettings
from .errors import ConfigError, RflError, RosterUnavailableError, StorageError
from .events import EventBus
from .ids import make_id, now_ms, now_utc
from .logs import JsonLineFormatter, configure_logging
from .randomness import PythonRandomSource, seeded_random, session_random

__all__ = [
    "ConfigError",
    "EventBus",
    "JsonLineFormatter",
    "PythonRandomSource",
    "RflError",
    "RosterUnavailableError",
    "RuntimePaths",
    "RuntimeSettings",
    "StorageError",
    "configure_logging",
    "make_id",
    "now_ms",
    "now_utc",
    "seeded_random",
    "session_random",
]
