"""Discovery provider abstraction and error taxonomy."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ProviderError(Exception):
    """The discovery call failed at the transport or provider level."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(ProviderError):
    """Missing or rejected credentials."""


class RateLimitError(ProviderError):
    """The provider throttled the request."""


class ModelNotFoundError(ProviderError):
    """The requested model does not exist for this provider."""


class MalformedResponseError(ProviderError):
    """The provider answered with something that is not a usable response."""


class DiscoveryProvider(ABC):
    """A generative provider able to answer with location-grounded results.

    Providers are async context managers; ``close()`` releases the underlying
    HTTP client.
    """

    default_model: Optional[str] = None

    @abstractmethod
    async def generate_grounded(self, prompt: str, model: Optional[str] = None) -> Dict[str, Any]:
        """Send ``prompt`` with map grounding enabled and return the raw JSON body.

        Raises:
            ProviderError: On transport failure, error status or non-JSON body
        """

    @abstractmethod
    async def close(self) -> None:
        """Release resources held by the provider."""

    async def __aenter__(self) -> "DiscoveryProvider":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
