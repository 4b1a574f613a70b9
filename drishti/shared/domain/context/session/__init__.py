"""Session management: who is signed in and with which role."""

from .models import User
from .session_manager import SessionManager

__all__ = ["User", "SessionManager"]
