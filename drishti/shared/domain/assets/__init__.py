"""Asset models and the asset store."""

from .models import Asset, AssetType, Telemetry
from .store import AssetStore, AssetStoreError, DuplicateAssetError, InvalidSelectionError

__all__ = [
    "Asset",
    "AssetType",
    "Telemetry",
    "AssetStore",
    "AssetStoreError",
    "DuplicateAssetError",
    "InvalidSelectionError",
]
