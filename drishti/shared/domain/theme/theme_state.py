"""Theme State - process-wide dark-mode preference."""

from __future__ import annotations

import logging
import os
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

DARK = "dark"
LIGHT = "light"


class PreferenceBackend(Protocol):
    def get_preference(self, key: str) -> Optional[str]: ...

    def set_preference(self, key: str, value: str) -> None: ...


def detect_os_dark_mode(override: Optional[bool] = None) -> bool:
    """Best-effort OS dark-mode probe.

    An explicit override wins; otherwise a GTK theme variant of ``:dark``
    counts as dark.
    """
    if override is not None:
        return override
    return os.getenv("GTK_THEME", "").lower().endswith(":dark")


class ThemeState:
    """Boolean dark-mode flag, initialized once and persisted on every change.

    Initial value: persisted preference if any, else the OS preference, else
    False. Changing the value never raises: a failed write is logged and the
    in-memory value still flips.
    """

    def __init__(
        self,
        backend: PreferenceBackend,
        key: str = "theme",
        os_preference: Optional[Callable[[], bool]] = None,
        on_apply: Optional[Callable[[bool], None]] = None,
    ):
        self.backend = backend
        self.key = key
        self.on_apply = on_apply
        self._dark = self._initial_value(os_preference or detect_os_dark_mode)

    def _initial_value(self, os_preference: Callable[[], bool]) -> bool:
        try:
            stored = self.backend.get_preference(self.key)
        except Exception as e:
            logger.warning(f"ThemeState: could not read '{self.key}' preference: {e}")
            stored = None

        if stored is not None:
            return stored == DARK

        try:
            return bool(os_preference())
        except Exception as e:
            logger.warning(f"ThemeState: OS preference probe failed: {e}")
            return False

    @property
    def dark(self) -> bool:
        return self._dark

    def toggle(self) -> bool:
        return self.set(not self._dark)

    def set(self, dark: bool) -> bool:
        self._dark = bool(dark)
        try:
            self.backend.set_preference(self.key, DARK if self._dark else LIGHT)
        except Exception as e:
            logger.warning(f"ThemeState: could not persist theme: {e}")
        if self.on_apply is not None:
            try:
                self.on_apply(self._dark)
            except Exception as e:
                logger.warning(f"ThemeState: theme apply callback failed: {e}")
        return self._dark
