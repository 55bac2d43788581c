from __future__ import annotations


class RflError(Exception):
    """Base class for lineup builder failures that cross a module boundary."""


class ConfigError(RflError, ValueError):
    """Raised when runtime settings cannot be parsed or validated."""


class RosterUnavailableError(RflError, RuntimeError):
    """Raised by the roster HTTP client when players or teams cannot be fetched."""

    def __init__(self, resource: str, message: str) -> None:
        super().__init__(f"{resource}: {message}")
        self.resource = resource


class StorageError(RflError, RuntimeError):
    """Raised when the local key-value store cannot be read or written."""
