"""Theme preference."""

from .theme_state import DARK, LIGHT, PreferenceBackend, ThemeState, detect_os_dark_mode

__all__ = ["DARK", "LIGHT", "PreferenceBackend", "ThemeState", "detect_os_dark_mode"]
