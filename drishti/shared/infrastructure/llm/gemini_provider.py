"""Gemini REST provider with Google Maps grounding."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from drishti.shared.infrastructure.llm.base import (
    AuthenticationError,
    DiscoveryProvider,
    MalformedResponseError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
)

logger = logging.getLogger(__name__)


class GeminiProvider(DiscoveryProvider):
    """Calls ``models/{model}:generateContent`` with the ``googleMaps`` tool."""

    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
    DEFAULT_MODEL = "gemini-3-flash-preview"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        max_retries: int = 2,
        retry_delay: float = 2.0,
        default_model: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.default_model = default_model or self.DEFAULT_MODEL

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["x-goog-api-key"] = api_key
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def _build_payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "tools": [{"googleMaps": {}}],
        }

    async def generate_grounded(self, prompt: str, model: Optional[str] = None) -> Dict[str, Any]:
        model = model or self.default_model
        url = f"/models/{model}:generateContent"
        payload = self._build_payload(prompt)

        attempt = 0
        while True:
            try:
                return await self._post(url, payload, model)
            except ProviderError as e:
                retryable = isinstance(e, RateLimitError) or (e.status_code is not None and e.status_code >= 500)
                if not retryable or attempt >= self.max_retries:
                    raise
                delay = self.retry_delay * (2 ** attempt)
                attempt += 1
                logger.warning(f"GeminiProvider: {e}; retry {attempt}/{self.max_retries} in {delay:.1f}s")
                await asyncio.sleep(delay)

    async def _post(self, url: str, payload: Dict[str, Any], model: str) -> Dict[str, Any]:
        logger.debug(f"GeminiProvider: POST {url}")
        try:
            response = await self._client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise ProviderError(f"Transport error calling Gemini: {e}") from e

        status = response.status_code
        if status in (401, 403):
            raise AuthenticationError(f"Gemini rejected credentials ({status})", status)
        if status == 404:
            raise ModelNotFoundError(f"Model not found: {model}", status)
        if status == 429:
            raise RateLimitError("Gemini rate limit exceeded", status)
        if status >= 400:
            raise ProviderError(f"Gemini returned HTTP {status}: {response.text[:200]}", status)

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponseError("Gemini returned a non-JSON body", status) from e
        if not isinstance(body, dict):
            raise MalformedResponseError(f"Expected a JSON object, got {type(body).__name__}", status)
        return body

    async def close(self) -> None:
        await self._client.aclose()
