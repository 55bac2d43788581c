from .duckdb_store import LineupAnalyticsStore
from .export import ExportService

__all__ = ["ExportService", "LineupAnalyticsStore"]
