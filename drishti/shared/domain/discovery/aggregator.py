"""Discovery Aggregator - turns a free-text query into merged Asset records.

Pipeline:
1. Reject blank queries and queries issued while another discovery is in flight
2. Render the discovery prompt and call the provider with map grounding
3. Validate the response into grounding chunks
4. Synthesize one placeholder Asset per chunk carrying a ``maps`` payload
5. Merge the batch into the app state (append, select first, go to the map)

The in-flight flag is cleared on every exit path.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable, Collection, List, Optional, Sequence, Tuple

from drishti.shared.config.prompts import render_prompt
from drishti.shared.core import events
from drishti.shared.core.configuration import AssetDefaults, DiscoveryConfig
from drishti.shared.core.event_bus import EventBus, EventPayload
from drishti.shared.domain.assets.models import Asset, AssetType, Telemetry
from drishti.shared.domain.discovery.models import (
    DiscoveryOutcome,
    DiscoveryStatus,
    GroundingChunk,
    extract_grounding_chunks,
)
from drishti.shared.infrastructure.llm.base import DiscoveryProvider, ProviderError

if TYPE_CHECKING:
    from drishti.dashboard.state.app_state import AppState

logger = logging.getLogger(__name__)

LocationKey = Tuple[str, float, float]


class AssetIdFactory:
    """Generates ``<prefix>-<stamp>-<ordinal>`` ids.

    ``stamp`` is a millisecond clock reading forced to increase strictly from
    one batch to the next, then bumped further if any candidate id is taken.
    """

    def __init__(self, prefix: str = "ai", clock: Optional[Callable[[], int]] = None):
        self.prefix = prefix
        self._clock = clock or (lambda: time.time_ns() // 1_000_000)
        self._last_stamp = 0

    def batch(self, ordinals: Sequence[int], taken: Collection[str]) -> List[str]:
        stamp = max(self._clock(), self._last_stamp + 1)
        while any(self._format(stamp, ordinal) in taken for ordinal in ordinals):
            stamp += 1
        self._last_stamp = stamp
        return [self._format(stamp, ordinal) for ordinal in ordinals]

    def _format(self, stamp: int, ordinal: int) -> str:
        return f"{self.prefix}-{stamp}-{ordinal}"


def synthesize_asset(chunk: GroundingChunk, asset_id: str, defaults: AssetDefaults) -> Asset:
    """Build a placeholder Asset from a chunk that carries a ``maps`` payload.

    Coordinates fall back to the configured country centroid unless the chunk
    supplies a precise point.
    """
    assert chunk.maps is not None
    maps = chunk.maps
    telemetry = defaults.telemetry
    return Asset(
        id=asset_id,
        name=maps.title or defaults.name,
        type=AssetType(defaults.type),
        coordinates=maps.point or defaults.coordinates,
        risk_score=defaults.risk_score,
        age=defaults.age,
        last_maintenance=defaults.last_maintenance,
        load_factor=defaults.load_factor,
        climate_impact=defaults.climate_impact,
        description=defaults.description,
        zone=defaults.zone,
        timeline=[],
        telemetry=Telemetry(
            stress=telemetry.stress,
            strain=telemetry.strain,
            load_capacity=telemetry.load_capacity,
            vibration_frequency=telemetry.vibration_frequency,
        ),
    )


def location_key(asset: Asset, precision: int) -> LocationKey:
    """Merge key used when deduplication is switched on."""
    lat, lng = asset.coordinates
    return (asset.name.casefold(), round(lat, precision), round(lng, precision))


class DiscoveryAggregator:
    """Runs discovery queries against the provider and merges the results."""

    def __init__(
        self,
        app_state: AppState,
        provider: DiscoveryProvider,
        config: Optional[DiscoveryConfig] = None,
        id_factory: Optional[AssetIdFactory] = None,
    ):
        self.app_state = app_state
        self.event_bus: EventBus = app_state.bus
        self.provider = provider
        self.config = config or DiscoveryConfig()
        self.id_factory = id_factory or AssetIdFactory()
        self.service_name = "DiscoveryAggregator"

    async def start(self) -> None:
        """Subscribe to discovery requests published by UI components."""
        await self.event_bus.subscribe(events.TOPIC_DISCOVERY_REQUEST, self.handle_discovery_request)

    async def handle_discovery_request(self, payload: EventPayload) -> None:
        await self.discover(str(payload.get("query") or ""))

    async def discover(self, query: str) -> DiscoveryOutcome:
        """Discover assets matching ``query`` and merge them into the store.

        Never raises for provider failures or empty results; the returned
        outcome says what happened.
        """
        query = (query or "").strip()
        if not query:
            logger.warning(f"{self.service_name}: Ignoring blank query")
            return DiscoveryOutcome(query=query, status=DiscoveryStatus.INVALID_QUERY)

        if not self.app_state.begin_search():
            logger.warning(f"{self.service_name}: Discovery already in flight, rejecting '{query}'")
            return DiscoveryOutcome(query=query, status=DiscoveryStatus.BUSY)

        self.event_bus.publish_nowait(
            events.TOPIC_DISCOVERY_STARTED,
            events.create_discovery_started_event(query),
        )

        outcome: Optional[DiscoveryOutcome] = None
        try:
            outcome = await self._run(query)
            return outcome
        finally:
            self.app_state.end_search()
            if outcome is None:
                # Unexpected exception on its way out
                finished = events.create_discovery_finished_event(
                    query, DiscoveryStatus.FAILED.value, error="unexpected error"
                )
            else:
                finished = events.create_discovery_finished_event(
                    query, outcome.status.value, len(outcome.assets), outcome.error
                )
            self.event_bus.publish_nowait(events.TOPIC_DISCOVERY_FINISHED, finished)

    async def _run(self, query: str) -> DiscoveryOutcome:
        prompt = render_prompt(self.config.prompt_template, query=query)
        logger.info(f"{self.service_name}: Discovering assets for '{query}'")

        try:
            body = await self.provider.generate_grounded(prompt, model=self.config.model)
            chunks = extract_grounding_chunks(body)
        except ProviderError as e:
            logger.error(f"{self.service_name}: Provider call failed for '{query}': {e}")
            self.app_state.push_log(f"Discovery failed for '{query}': {e}", "error", topic="discovery")
            return DiscoveryOutcome(query=query, status=DiscoveryStatus.FAILED, error=str(e))

        # No awaits from here on: synthesis and merge see one consistent store
        assets = self._synthesize(chunks)
        if not assets:
            logger.info(f"{self.service_name}: No usable grounding chunks for '{query}' ({len(chunks)} chunk(s))")
            self.app_state.push_log(f"No infrastructure found for '{query}'", "info", topic="discovery")
            return DiscoveryOutcome(query=query, status=DiscoveryStatus.EMPTY)

        merged = self.app_state.merge_discovered(assets, query=query)
        logger.info(f"{self.service_name}: Merged {len(merged)} asset(s) for '{query}'")
        self.app_state.push_log(f"Discovered {len(merged)} asset(s) for '{query}'", "success", topic="discovery")
        return DiscoveryOutcome(query=query, status=DiscoveryStatus.MERGED, assets=merged)

    def _synthesize(self, chunks: Sequence[GroundingChunk]) -> List[Asset]:
        grounded = [(position, chunk) for position, chunk in enumerate(chunks) if chunk.maps is not None]
        if not grounded:
            return []

        existing = self.app_state.assets
        ids = self.id_factory.batch([position for position, _ in grounded], existing.ids())
        assets = [
            synthesize_asset(chunk, asset_id, self.config.defaults)
            for asset_id, (_, chunk) in zip(ids, grounded)
        ]

        if self.config.dedupe_by_location:
            assets = self._drop_known_locations(assets, existing.current())
        return assets

    def _drop_known_locations(self, assets: List[Asset], known: Sequence[Asset]) -> List[Asset]:
        precision = self.config.dedupe_precision
        seen = {location_key(asset, precision) for asset in known}
        kept: List[Asset] = []
        for asset in assets:
            key = location_key(asset, precision)
            if key in seen:
                logger.debug(f"{self.service_name}: Dropping duplicate discovery '{asset.name}'")
                continue
            seen.add(key)
            kept.append(asset)
        return kept
