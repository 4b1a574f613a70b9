"""Pytest configuration for INFRA-DRISHTI."""

from __future__ import annotations

import asyncio
import os
from datetime import date
from typing import Any, Dict, List, Optional

import pytest

from drishti.dashboard.state import AppState, Store
from drishti.shared.core.configuration import DiscoveryConfig
from drishti.shared.core.event_bus import EventBus
from drishti.shared.domain.assets.models import Asset, AssetType, Telemetry
from drishti.shared.domain.assets.store import AssetStore
from drishti.shared.domain.context.session.session_manager import SessionManager
from drishti.shared.domain.discovery.aggregator import AssetIdFactory, DiscoveryAggregator
from drishti.shared.domain.navigation.router import ViewRouter
from drishti.shared.domain.theme.theme_state import ThemeState
from drishti.shared.infrastructure.llm.base import DiscoveryProvider
from drishti.shared.infrastructure.persistence.duckdb_service import DuckDBPersistenceService


def pytest_configure():
    # Keep the OS probe deterministic regardless of the desktop running the tests
    os.environ.pop("GTK_THEME", None)


def make_asset(asset_id: str = "A1", name: str = "Test Bridge", **overrides: Any) -> Asset:
    fields: Dict[str, Any] = dict(
        id=asset_id,
        name=name,
        type=AssetType.BRIDGE,
        coordinates=(19.0, 72.8),
        risk_score=40,
        age=12,
        last_maintenance=date(2024, 1, 15),
        load_factor=6.5,
        climate_impact=5.0,
        description="Fixture asset",
        zone="Test Zone",
        timeline=[],
        telemetry=Telemetry(stress=20, strain=100, load_capacity=50000, vibration_frequency=2.0),
    )
    fields.update(overrides)
    return Asset(**fields)


def maps_chunk(title: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    maps: Dict[str, Any] = {"uri": "https://maps.google.com/?cid=1", "placeId": "places/1"}
    if title is not None:
        maps["title"] = title
    maps.update(extra)
    return {"maps": maps}


def web_chunk(title: str = "Some article") -> Dict[str, Any]:
    return {"web": {"uri": "https://example.org", "title": title}}


def grounded_body(*chunks: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": "Here is what I found."}]},
                "groundingMetadata": {"groundingChunks": list(chunks)},
            }
        ]
    }


class FakeProvider(DiscoveryProvider):
    """Scripted provider: returns queued bodies or raises queued exceptions."""

    def __init__(self, *results: Any, gate: Optional[asyncio.Event] = None):
        self.results: List[Any] = list(results)
        self.gate = gate
        self.calls: List[Dict[str, Any]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def generate_grounded(self, prompt: str, model: Optional[str] = None) -> Dict[str, Any]:
        self.calls.append({"prompt": prompt, "model": model})
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            result = self.results.pop(0) if self.results else {}
            if isinstance(result, BaseException):
                raise result
            return result
        finally:
            self.in_flight -= 1

    async def close(self) -> None:
        self.closed = True


class FakeSession:
    def __init__(self, user=None):
        self.user = user
        self.lookups = 0

    def get_current_user(self):
        self.lookups += 1
        return self.user


class MemoryPreferences:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})

    def get_preference(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set_preference(self, key: str, value: str) -> None:
        self.values[key] = value


@pytest.fixture(autouse=True)
def _reset_store():
    Store.reset()
    yield
    Store.reset()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def persistence():
    service = DuckDBPersistenceService(":memory:")
    service.start()
    yield service
    service.close()


@pytest.fixture
def session_manager(persistence) -> SessionManager:
    return SessionManager(persistence)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def seed_asset() -> Asset:
    return make_asset("A1", "Existing Bridge")


@pytest.fixture
def app_state(event_bus, seed_asset, fake_session) -> AppState:
    return AppState(
        event_bus,
        AssetStore([seed_asset]),
        ViewRouter(fake_session),
        ThemeState(MemoryPreferences(), os_preference=lambda: False),
    )


def make_aggregator(app_state: AppState, provider: DiscoveryProvider, **config: Any) -> DiscoveryAggregator:
    return DiscoveryAggregator(
        app_state,
        provider,
        DiscoveryConfig(**config),
        id_factory=AssetIdFactory(clock=lambda: 1700000000000),
    )


class EventRecorder:
    """Collects payloads published on a set of topics."""

    def __init__(self) -> None:
        self.events: List[tuple] = []

    def handler(self, topic: str):
        async def _record(payload):
            self.events.append((topic, payload))
        return _record

    def topics(self) -> List[str]:
        return [topic for topic, _ in self.events]

    def payloads(self, topic: str) -> List[Dict[str, Any]]:
        return [payload for t, payload in self.events if t == topic]


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()
