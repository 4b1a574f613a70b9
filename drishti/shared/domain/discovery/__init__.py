"""Discovery-and-merge pipeline."""

from .aggregator import AssetIdFactory, DiscoveryAggregator, location_key, synthesize_asset
from .models import (
    DiscoveryOutcome,
    DiscoveryStatus,
    GenerateContentResponse,
    GroundingChunk,
    MapsLocation,
    extract_grounding_chunks,
)

__all__ = [
    "AssetIdFactory",
    "DiscoveryAggregator",
    "location_key",
    "synthesize_asset",
    "DiscoveryOutcome",
    "DiscoveryStatus",
    "GenerateContentResponse",
    "GroundingChunk",
    "MapsLocation",
    "extract_grounding_chunks",
]
