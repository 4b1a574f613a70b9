"""Global State Store - Service Locator Pattern.

Provides centralized access to the dashboard state from any UI component.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .app_state import AppState

if TYPE_CHECKING:
    from drishti.shared.domain.discovery.aggregator import DiscoveryAggregator


class Store:
    """Global state store for the dashboard.

    Usage:
        # During app initialization
        Store.initialize(app_state, discovery)

        # In any UI component
        store = Store.get()
        store.app.navigate("map")
        await store.discovery.discover("bridges near Mumbai")
    """

    _instance: Optional['Store'] = None

    def __init__(self, app_state: AppState, discovery: Optional['DiscoveryAggregator'] = None) -> None:
        """Do not call directly. Use Store.initialize() instead."""
        self.app = app_state
        self.discovery = discovery

    @classmethod
    def initialize(cls, app_state: AppState, discovery: Optional['DiscoveryAggregator'] = None) -> 'Store':
        """Initialize the global store instance.

        Should be called once during application startup before any UI
        components are created.

        Raises:
            RuntimeError: If store is already initialized
        """
        if cls._instance is not None:
            raise RuntimeError("Store already initialized!")

        cls._instance = cls(app_state, discovery)
        return cls._instance

    @classmethod
    def get(cls) -> 'Store':
        """Get the global store instance.

        Raises:
            RuntimeError: If store has not been initialized
        """
        if cls._instance is None:
            raise RuntimeError("Store not initialized! Call Store.initialize() first.")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the store instance. Primarily used for testing."""
        cls._instance = None
