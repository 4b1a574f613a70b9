"""Canonical event definitions for INFRA-DRISHTI."""

from __future__ import annotations

import time
from typing import List, Literal

from .event_bus import EventPayload

# UI intent (published by components, consumed by AppState)
TOPIC_NAV_SELECT = "nav.select"
TOPIC_ASSET_SELECT = "asset.select"

# State changes (published by AppState)
TOPIC_VIEW_CHANGED = "view.changed"
TOPIC_SELECTION_CHANGED = "selection.changed"
TOPIC_THEME_CHANGED = "theme.changed"
TOPIC_ASSETS_MERGED = "assets.merged"

# Discovery lifecycle
TOPIC_DISCOVERY_REQUEST = "discovery.request"
TOPIC_DISCOVERY_STARTED = "discovery.started"
TOPIC_DISCOVERY_FINISHED = "discovery.finished"

TOPIC_LOGS_EVENT = "logs.event"

LogLevel = Literal["info", "warning", "error", "success"]


def create_nav_select_event(view: str) -> EventPayload:
    """Create a navigation request event."""
    return {
        "id": view,
    }


def create_asset_select_event(asset_id: str | None) -> EventPayload:
    """Create an asset selection request event (None clears)."""
    return {
        "asset_id": asset_id,
    }


def create_view_changed_event(requested: str, view: str) -> EventPayload:
    """Create a view changed event.

    Args:
        requested: The view name that was asked for
        view: The view that actually became active (may differ for the admin gate)
    """
    return {
        "requested": requested,
        "view": view,
        "redirected": requested != view,
    }


def create_selection_changed_event(asset_id: str | None) -> EventPayload:
    return {
        "asset_id": asset_id,
    }


def create_theme_changed_event(dark: bool) -> EventPayload:
    return {
        "dark": dark,
        "theme": "dark" if dark else "light",
    }


def create_assets_merged_event(query: str, asset_ids: List[str], total: int) -> EventPayload:
    """Create an assets merged event.

    Args:
        query: The discovery query that produced the assets
        asset_ids: IDs of the newly appended assets, in store order
        total: Store size after the merge
    """
    return {
        "query": query,
        "asset_ids": asset_ids,
        "count": len(asset_ids),
        "total": total,
    }


def create_discovery_request_event(query: str) -> EventPayload:
    """Create a discovery request event (a user query from the map search box)."""
    return {
        "query": query,
    }


def create_discovery_started_event(query: str) -> EventPayload:
    return {
        "query": query,
    }


def create_discovery_finished_event(query: str, status: str, count: int = 0, error: str | None = None) -> EventPayload:
    """Create a discovery finished event (sent on every exit path)."""
    event: EventPayload = {
        "query": query,
        "status": status,
        "count": count,
    }
    if error is not None:
        event["error"] = error
    return event


def create_logs_event(
    message: str,
    level: LogLevel = "info",
    topic: str | None = None,
) -> EventPayload:
    """Create an operator log entry."""
    return {
        "message": message,
        "level": level,
        "topic": topic,
        "ts": time.time(),
    }
