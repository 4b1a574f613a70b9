"""
Shared Infrastructure Module
=============================

Technical adapters for external systems (discovery provider, DuckDB, seed data).
"""

# Discovery provider
from drishti.shared.infrastructure.llm.base import (
    DiscoveryProvider,
    ProviderError,
    AuthenticationError,
    RateLimitError,
    ModelNotFoundError,
    MalformedResponseError,
)
from drishti.shared.infrastructure.llm.gemini_provider import GeminiProvider
from drishti.shared.infrastructure.llm.provider_factory import ProviderFactory, ProviderType

# Persistence
from drishti.shared.infrastructure.persistence.duckdb_service import DuckDBPersistenceService

# Seed data
from drishti.shared.infrastructure.seed.asset_loader import SeedDataError, load_seed_assets

__all__ = [
    # Discovery provider
    "DiscoveryProvider",
    "ProviderError",
    "AuthenticationError",
    "RateLimitError",
    "ModelNotFoundError",
    "MalformedResponseError",
    "GeminiProvider",
    "ProviderFactory",
    "ProviderType",
    # Persistence
    "DuckDBPersistenceService",
    # Seed data
    "SeedDataError",
    "load_seed_assets",
]
