"""Persistence adapters (DuckDB)."""

from drishti.shared.infrastructure.persistence.duckdb_service import DuckDBPersistenceService

__all__ = ["DuckDBPersistenceService"]
