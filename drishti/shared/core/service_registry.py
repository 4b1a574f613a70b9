"""Service registry for cross-module access to initialized services."""

from __future__ import annotations

import atexit
import logging
from typing import TYPE_CHECKING, Callable, List, Optional

if TYPE_CHECKING:
    from drishti.shared.domain.context.session.session_manager import SessionManager

logger = logging.getLogger(__name__)

# Global reference to session manager
_session_manager: Optional["SessionManager"] = None

# Global cleanup management
_cleanup_registered = False
_cleanup_handlers: List[Callable[[], None]] = []


def set_session_manager(session_manager: Optional["SessionManager"]) -> None:
    """Set the global session manager instance."""
    global _session_manager
    _session_manager = session_manager


def get_session_manager() -> Optional["SessionManager"]:
    """Get the global session manager instance."""
    return _session_manager


def register_cleanup_handler(handler: Callable[[], None]) -> None:
    """Register a cleanup handler to be called on application exit."""
    global _cleanup_registered
    _cleanup_handlers.append(handler)
    if not _cleanup_registered:
        atexit.register(run_cleanup)
        _cleanup_registered = True
        logger.debug("Registered atexit cleanup handler")


def run_cleanup() -> None:
    """Run and forget all registered cleanup handlers."""
    if not _cleanup_handlers:
        return
    logger.info("Running application cleanup...")
    while _cleanup_handlers:
        handler = _cleanup_handlers.pop()
        try:
            handler()
        except Exception as e:
            logger.warning(f"Error in cleanup handler: {e}")
    logger.info("Application cleanup completed")
