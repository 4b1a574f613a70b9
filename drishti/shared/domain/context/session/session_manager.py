"""Session Manager for signing dashboard users in and out."""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from typing import Optional

import duckdb

from drishti.shared.domain.context.session.models import User
from drishti.shared.infrastructure.persistence.duckdb_service import DuckDBPersistenceService

logger = logging.getLogger(__name__)

_HASH_ITERATIONS = 120_000


def _hash_password(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), _HASH_ITERATIONS)
    return digest.hex()


class SessionManager:
    """Session provider backed by the persistence service.

    ``get_current_user`` is synchronous and re-reads the session row on every
    call, so the view router always sees the latest sign-in state.
    """

    def __init__(self, persistence_service: DuckDBPersistenceService):
        self.persistence = persistence_service

    def register_user(
        self,
        username: str,
        password: str,
        role: str = "citizen",
        display_name: Optional[str] = None,
    ) -> User:
        """Create a user account.

        Raises:
            ValueError: If the username is taken
        """
        user = User(username=username, role=role, display_name=display_name)
        salt = secrets.token_hex(16)
        try:
            self.persistence.insert_user(
                username=user.username,
                role=user.role,
                password_hash=_hash_password(password, salt),
                salt=salt,
                display_name=display_name,
            )
        except duckdb.ConstraintException:
            raise ValueError(f"User already exists: {username}") from None
        logger.info(f"Registered user '{username}' with role '{role}'")
        return user

    def sign_in(self, username: str, password: str) -> Optional[User]:
        """Start a session for ``username`` if the password matches."""
        record = self.persistence.get_user(username)
        if record is None:
            logger.info(f"Sign-in failed: unknown user '{username}'")
            return None

        expected = record["password_hash"]
        if not hmac.compare_digest(expected, _hash_password(password, record["salt"])):
            logger.info(f"Sign-in failed: bad password for '{username}'")
            return None

        self.persistence.set_session_user(username)
        logger.info(f"User '{username}' signed in")
        return self._to_user(record)

    def sign_out(self) -> None:
        self.persistence.clear_session()
        logger.info("Session cleared")

    def get_current_user(self) -> Optional[User]:
        username = self.persistence.get_session_username()
        if username is None:
            return None
        record = self.persistence.get_user(username)
        if record is None:
            logger.warning(f"Session refers to missing user '{username}'")
            return None
        return self._to_user(record)

    @staticmethod
    def _to_user(record: dict) -> User:
        return User(
            username=record["username"],
            role=record["role"],
            display_name=record.get("display_name"),
        )
