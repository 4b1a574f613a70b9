"""Dashboard State Management.

Single owner of every piece of mutable dashboard state: the asset registry and
its selection, the active view, the theme flag and the discovery in-flight
flag. All mutations go through the synchronous reducers below; each runs to
completion and then announces itself on the EventBus.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from drishti.shared.core import events
from drishti.shared.core.event_bus import EventBus, EventPayload
from drishti.shared.domain.assets.models import Asset
from drishti.shared.domain.assets.store import AssetStore, InvalidSelectionError
from drishti.shared.domain.context.session.models import User
from drishti.shared.domain.navigation.router import View, ViewRouter
from drishti.shared.domain.theme.theme_state import ThemeState

logger = logging.getLogger(__name__)

MAX_LOG_ENTRIES = 500


class AppState:
    """State for the dashboard shell.

    UI components read the properties and either call the reducers directly or
    publish intent on ``nav.select`` / ``asset.select``.
    """

    def __init__(
        self,
        event_bus: EventBus,
        assets: AssetStore,
        router: ViewRouter,
        theme: ThemeState,
    ) -> None:
        """Initialize application state.

        Args:
            event_bus: The shared event bus
            assets: Registry holding the bootstrap assets
            router: View state machine
            theme: Theme preference
        """
        self.bus = event_bus
        self.assets = assets
        self.router = router
        self.theme = theme

        self._search_in_flight = False

        # Log entries (each is a dict: {message, level, topic, ts})
        self.logs: List[Dict[str, Any]] = []

        self._started = False

    async def initialize(self) -> None:
        """Bind to UI intent events. Safe to call more than once."""
        if self._started:
            return

        await self.bus.subscribe(events.TOPIC_NAV_SELECT, self._handle_nav_select)
        await self.bus.subscribe(events.TOPIC_ASSET_SELECT, self._handle_asset_select)

        self._started = True

    # --- Read access ---

    @property
    def view(self) -> View:
        return self.router.current

    @property
    def selected_asset(self) -> Optional[Asset]:
        return self.assets.selected()

    @property
    def dark_mode(self) -> bool:
        return self.theme.dark

    @property
    def search_in_flight(self) -> bool:
        return self._search_in_flight

    # --- Reducers ---

    def navigate(self, requested: "str | View") -> View:
        """Request a view change; returns the view that became active."""
        view = self.router.navigate(requested)
        requested_name = requested.value if isinstance(requested, View) else str(requested)
        self.bus.publish_nowait(
            events.TOPIC_VIEW_CHANGED,
            events.create_view_changed_event(requested_name, view.value),
        )
        return view

    def select_asset(self, asset: Optional[Asset]) -> bool:
        """Select an asset (None clears). Invalid selections are rejected."""
        try:
            self.assets.select(asset)
        except InvalidSelectionError as e:
            logger.warning(f"AppState: rejected selection: {e}")
            return False
        self._announce_selection()
        return True

    def select_asset_by_id(self, asset_id: Optional[str]) -> bool:
        if asset_id is None:
            return self.select_asset(None)
        asset = self.assets.get(asset_id)
        if asset is None:
            logger.warning(f"AppState: rejected selection of unknown asset id '{asset_id}'")
            return False
        return self.select_asset(asset)

    def clear_selection(self) -> None:
        self.select_asset(None)

    def focus_asset(self, asset: Asset) -> bool:
        """Select ``asset`` and jump to the map (portal shortcuts)."""
        if not self.select_asset(asset):
            return False
        self.navigate(View.MAP)
        return True

    def toggle_theme(self) -> bool:
        dark = self.theme.toggle()
        self.bus.publish_nowait(events.TOPIC_THEME_CHANGED, events.create_theme_changed_event(dark))
        return dark

    def begin_search(self) -> bool:
        """Claim the discovery slot. False means a search is already running."""
        if self._search_in_flight:
            return False
        self._search_in_flight = True
        return True

    def end_search(self) -> None:
        self._search_in_flight = False

    def merge_discovered(self, assets: Sequence[Asset], query: str = "") -> Tuple[Asset, ...]:
        """Append discovered assets, select the first one and show the map."""
        merged = self.assets.append(assets)
        if not merged:
            return merged

        self.assets.select(merged[0])
        self.bus.publish_nowait(
            events.TOPIC_ASSETS_MERGED,
            events.create_assets_merged_event(query, [a.id for a in merged], len(self.assets)),
        )
        self._announce_selection()
        self.navigate(View.MAP)
        return merged

    def complete_login(self, user: User) -> View:
        """Route after a successful sign-in: admins to the admin view, others home."""
        return self.navigate(View.ADMIN if user.is_admin else View.HOME)

    def push_log(self, message: str, level: events.LogLevel = "info", topic: Optional[str] = None) -> None:
        """Add an operator-visible log entry."""
        entry = events.create_logs_event(message, level, topic)
        self.logs.append(entry)
        if len(self.logs) > MAX_LOG_ENTRIES:
            del self.logs[: len(self.logs) - MAX_LOG_ENTRIES]
        self.bus.publish_nowait(events.TOPIC_LOGS_EVENT, entry)

    def _announce_selection(self) -> None:
        selected = self.assets.selected()
        self.bus.publish_nowait(
            events.TOPIC_SELECTION_CHANGED,
            events.create_selection_changed_event(selected.id if selected else None),
        )

    # --- Event Handlers ---

    async def _handle_nav_select(self, payload: EventPayload) -> None:
        """Handle navigation selection events."""
        selection = payload.get("id")
        if selection:
            self.navigate(str(selection))

    async def _handle_asset_select(self, payload: EventPayload) -> None:
        """Handle asset selection events (a missing id clears)."""
        asset_id = payload.get("asset_id")
        self.select_asset_by_id(str(asset_id) if asset_id else None)
