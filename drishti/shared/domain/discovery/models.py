"""Typed view of the provider response.

The raw JSON body never travels past the discovery aggregator: it is validated
here into ``GroundingChunk`` records, each of which either carries a ``maps``
payload or does not.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidatorFunctionWrapHandler, field_validator
from pydantic.alias_generators import to_camel

from drishti.shared.domain.assets.models import Asset
from drishti.shared.infrastructure.llm.base import MalformedResponseError

logger = logging.getLogger(__name__)


class _Wire(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class LatLng(_Wire):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class MapsLocation(_Wire):
    """A Google Maps grounding payload."""

    title: Optional[str] = None
    uri: Optional[str] = None
    place_id: Optional[str] = None
    text: Optional[str] = None
    location: Optional[LatLng] = None

    @field_validator("location", mode="wrap")
    @classmethod
    def _lenient_location(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Optional[LatLng]:
        # An incomplete or out-of-range point falls back to the default coordinates
        try:
            return handler(value)
        except ValidationError as e:
            logger.debug(f"Ignoring unusable maps location: {e.error_count()} error(s)")
            return None

    @property
    def point(self) -> Optional[Tuple[float, float]]:
        if self.location is None:
            return None
        return (self.location.latitude, self.location.longitude)


class WebSource(_Wire):
    title: Optional[str] = None
    uri: Optional[str] = None


class GroundingChunk(_Wire):
    maps: Optional[MapsLocation] = None
    web: Optional[WebSource] = None


class GroundingMetadata(_Wire):
    grounding_chunks: Optional[List[Any]] = None


class Candidate(_Wire):
    grounding_metadata: Optional[GroundingMetadata] = None


class GenerateContentResponse(_Wire):
    candidates: Optional[List[Candidate]] = None


def extract_grounding_chunks(body: Dict[str, Any]) -> List[GroundingChunk]:
    """Validate a raw provider body and return the first candidate's chunks.

    Missing candidates or chunk lists mean an empty result. Chunks that are not
    objects or fail validation become empty chunks at the same position; an
    envelope that fails validation is a malformed response.

    Raises:
        MalformedResponseError: If the response envelope is not recognisable
    """
    try:
        response = GenerateContentResponse.model_validate(body)
    except ValidationError as e:
        raise MalformedResponseError(f"Unrecognised response envelope: {e.error_count()} error(s)") from e

    if not response.candidates or response.candidates[0].grounding_metadata is None:
        return []

    chunks: List[GroundingChunk] = []
    for position, raw in enumerate(response.candidates[0].grounding_metadata.grounding_chunks or []):
        if not isinstance(raw, dict):
            logger.warning(f"Skipping grounding chunk #{position}: expected an object, got {type(raw).__name__}")
            chunks.append(GroundingChunk())
            continue
        try:
            chunks.append(GroundingChunk.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Skipping malformed grounding chunk #{position}: {e.error_count()} error(s)")
            # Keep ordinal positions aligned with the provider response
            chunks.append(GroundingChunk())
    return chunks


class DiscoveryStatus(str, Enum):
    MERGED = "merged"
    EMPTY = "empty"
    FAILED = "failed"
    BUSY = "busy"
    INVALID_QUERY = "invalid_query"


class DiscoveryOutcome(BaseModel):
    """Result of one ``discover`` call."""

    model_config = ConfigDict(frozen=True)

    query: str
    status: DiscoveryStatus
    assets: Tuple[Asset, ...] = ()
    error: Optional[str] = None

    @property
    def merged(self) -> bool:
        return self.status == DiscoveryStatus.MERGED
