"""Dashboard state management.

Architecture:
- AppState: single owner of assets, selection, view, theme and search flag
- Store: Service locator for accessing state from any component
"""

from .app_state import AppState
from .store import Store

__all__ = ["AppState", "Store"]
