"""Session user model."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A signed-in dashboard user. Read-only to the state core."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(min_length=1)
    role: str = "citizen"
    display_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
