"""Navigation state machine."""

from .router import ADMIN_ROLE, PRIVILEGED_VIEWS, SessionProvider, View, ViewRouter, can_enter, resolve

__all__ = ["ADMIN_ROLE", "PRIVILEGED_VIEWS", "SessionProvider", "View", "ViewRouter", "can_enter", "resolve"]
