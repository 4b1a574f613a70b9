"""Bootstrap data loading."""

from drishti.shared.infrastructure.seed.asset_loader import DEFAULT_SEED_PATH, SeedDataError, load_seed_assets

__all__ = ["DEFAULT_SEED_PATH", "SeedDataError", "load_seed_assets"]
