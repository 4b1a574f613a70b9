"""
Discovery provider layer.

Supports Gemini (direct) and Gemini-compatible proxies.
"""

from drishti.shared.infrastructure.llm.base import (
    DiscoveryProvider,
    ProviderError,
    AuthenticationError,
    RateLimitError,
    ModelNotFoundError,
    MalformedResponseError,
)
from drishti.shared.infrastructure.llm.gemini_provider import GeminiProvider
from drishti.shared.infrastructure.llm.provider_factory import ProviderFactory, ProviderType

__all__ = [
    # Base
    "DiscoveryProvider",
    "ProviderError",
    "AuthenticationError",
    "RateLimitError",
    "ModelNotFoundError",
    "MalformedResponseError",
    # Providers
    "GeminiProvider",
    # Factory
    "ProviderFactory",
    "ProviderType",
]
