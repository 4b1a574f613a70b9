"""Asset domain models.

Records accept both snake_case field names and the camelCase keys used by the
dashboard front end (``riskScore``, ``lastMaintenance`` ...), and serialize back
to camelCase with :meth:`Asset.to_record`.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class AssetType(str, Enum):
    """Infrastructure categories."""
    ROAD = "Road"
    BRIDGE = "Bridge"
    TUNNEL = "Tunnel"
    FLYOVER = "Flyover"
    RAILWAY = "Railway"
    METRO = "Metro"
    DAM = "Dam"
    PORT = "Port"
    PIPELINE = "Pipeline"
    POWER_GRID = "Power Grid"


class _Record(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Telemetry(_Record):
    """Structural sensor readings for an asset."""

    stress: float
    strain: float
    load_capacity: float
    vibration_frequency: float


class Asset(_Record):
    """A monitored infrastructure element.

    Assets are immutable once created. Two assets may share a name and
    coordinates and still be distinct entities; ``id`` is the only identity.
    """

    id: str = Field(min_length=1)
    name: str
    type: AssetType
    coordinates: Tuple[float, float]
    risk_score: float
    age: float
    last_maintenance: date
    load_factor: float
    climate_impact: float
    description: str
    zone: str
    timeline: List[Dict[str, Any]] = Field(default_factory=list)
    telemetry: Telemetry

    @field_validator("coordinates")
    @classmethod
    def _check_coordinates(cls, value: Tuple[float, float]) -> Tuple[float, float]:
        lat, lng = value
        if not -90.0 <= lat <= 90.0:
            raise ValueError(f"latitude out of range: {lat}")
        if not -180.0 <= lng <= 180.0:
            raise ValueError(f"longitude out of range: {lng}")
        return value

    @property
    def latitude(self) -> float:
        return self.coordinates[0]

    @property
    def longitude(self) -> float:
        return self.coordinates[1]

    def to_record(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
