"""View Router - finite-state machine over the dashboard's top-level views."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Protocol

from drishti.shared.domain.context.session.models import User

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


class View(str, Enum):
    HOME = "home"
    MAP = "map"
    ANALYSIS = "analysis"
    NEWS = "news"
    GOV = "gov"
    LOGIN = "login"
    ADMIN = "admin"
    INITIATIVES = "initiatives"
    SIMULATOR = "simulator"
    REPORT = "report"

    @classmethod
    def parse(cls, name: "str | View") -> "View":
        """Map a requested name onto a view; anything unrecognised is ``home``."""
        if isinstance(name, View):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            return cls.HOME


PRIVILEGED_VIEWS = frozenset({View.ADMIN})


class SessionProvider(Protocol):
    def get_current_user(self) -> Optional[User]: ...


def can_enter(view: View, user: Optional[User]) -> bool:
    """Whether ``user`` may enter ``view``. Only the admin view is gated."""
    if view in PRIVILEGED_VIEWS:
        return user is not None and user.role == ADMIN_ROLE
    return True


def resolve(requested: "str | View", user: Optional[User]) -> View:
    """Effective view for a request: a refused admin request lands on login."""
    view = View.parse(requested)
    if can_enter(view, user):
        return view
    return View.LOGIN


class ViewRouter:
    """Holds exactly one current view; every navigation overwrites it.

    The session provider is consulted only on requests for a privileged view.
    """

    def __init__(self, session_provider: SessionProvider, initial: "str | View" = View.HOME):
        self.session_provider = session_provider
        self._current = View.parse(initial)
        if self._current in PRIVILEGED_VIEWS:
            self._current = View.HOME

    @property
    def current(self) -> View:
        return self._current

    def navigate(self, requested: "str | View") -> View:
        view = View.parse(requested)
        if view in PRIVILEGED_VIEWS:
            user = self.session_provider.get_current_user()
            view = resolve(view, user)
            if view == View.LOGIN:
                logger.info(f"ViewRouter: '{requested}' requires an admin session, redirecting to login")

        self._current = view
        return view
