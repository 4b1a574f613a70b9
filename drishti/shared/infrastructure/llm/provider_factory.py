"""
Provider factory for discovery providers.

Centralizes provider creation and configuration-driven setup.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import TYPE_CHECKING, Optional

import httpx

from drishti.shared.infrastructure.llm.base import DiscoveryProvider
from drishti.shared.infrastructure.llm.gemini_provider import GeminiProvider

if TYPE_CHECKING:
    from drishti.shared.core.configuration import DiscoveryConfig

logger = logging.getLogger(__name__)


# ============================================================================
# Provider Types
# ============================================================================


class ProviderType(str, Enum):
    """Supported discovery provider types."""
    GEMINI = "gemini"
    GEMINI_PROXY = "gemini_proxy"


# Environment variable mapping per provider
PROVIDER_ENV_MAP: dict[str, dict[str, str]] = {
    ProviderType.GEMINI.value: {
        "api_key": "GEMINI_API_KEY",
        "base_url": "GEMINI_BASE_URL",
        "model": "GEMINI_MODEL",
    },
    ProviderType.GEMINI_PROXY.value: {
        "api_key": "GEMINI_PROXY_API_KEY",
        "base_url": "GEMINI_PROXY_BASE_URL",
        "model": "GEMINI_PROXY_MODEL",
    },
}

DEFAULT_PROXY_URL = "http://localhost:4000/gemini/v1beta"


# ============================================================================
# Provider Factory
# ============================================================================


class ProviderFactory:
    """Factory for creating discovery provider instances."""

    @staticmethod
    def normalize_name(name: str) -> str:
        return name.strip().lower().replace("-", "_")

    @staticmethod
    def create(
        provider_type: ProviderType | str,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float = 60.0,
        max_retries: int = 2,
        retry_delay: float = 2.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> DiscoveryProvider:
        """Create a discovery provider instance.

        Args:
            provider_type: Type of provider to create
            api_key: API key (loaded from env if not provided)
            base_url: Base URL (uses provider default if not provided)
            model: Default model for requests
            timeout: Request timeout in seconds
            max_retries: Retries for rate limits and server errors
            retry_delay: Initial delay between retries
            transport: Optional httpx transport (tests, proxies)

        Returns:
            DiscoveryProvider instance

        Raises:
            ValueError: If provider_type is not supported
        """
        if isinstance(provider_type, str):
            try:
                provider_type = ProviderType(ProviderFactory.normalize_name(provider_type))
            except ValueError:
                raise ValueError(
                    f"Unsupported provider type: {provider_type}. "
                    f"Supported: {[p.value for p in ProviderType]}"
                ) from None

        env_map = PROVIDER_ENV_MAP[provider_type.value]
        api_key = api_key or os.getenv(env_map["api_key"])
        base_url = base_url or os.getenv(env_map["base_url"])

        if provider_type == ProviderType.GEMINI:
            if not api_key:
                logger.warning("ProviderFactory: No Gemini API key configured; requests will be rejected")
            base_url = base_url or GeminiProvider.DEFAULT_BASE_URL
        else:
            # Local proxies handle credentials themselves
            base_url = base_url or DEFAULT_PROXY_URL

        provider = GeminiProvider(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            retry_delay=retry_delay,
            default_model=model or os.getenv(env_map["model"]),
            transport=transport,
        )
        logger.info(
            f"ProviderFactory: Using provider '{provider_type.value}' at {base_url} "
            f"with default_model '{provider.default_model}'"
        )
        return provider

    @staticmethod
    def create_from_config(
        config: "DiscoveryConfig",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> DiscoveryProvider:
        """Create the provider described by the discovery section of the config."""
        return ProviderFactory.create(
            config.provider,
            api_key=config.api_key,
            base_url=config.base_url,
            model=config.model,
            timeout=config.timeout,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            transport=transport,
        )
