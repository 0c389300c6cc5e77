"""
HTTP client for the Gemini ``generateContent`` endpoint.
"""

import time
from typing import Any, Protocol

import aiohttp

from cardguard.config.settings import (
    DEFAULT_GEMINI_BASE_URL,
    DEFAULT_GEMINI_MODEL,
    CardGuardSettings,
)
from cardguard.llm.exceptions import (
    ConfigurationError,
    InvalidResponseError,
    TransportError,
)
from cardguard.observability.logging import get_audit_logger, get_logger

logger = get_logger(__name__)

PROVIDER = "google"


class TextGenerationClient(Protocol):
    """Protocol for clients that turn a prompt into raw model text."""

    async def generate(self, prompt: str) -> str:
        """Generate a text reply for the prompt."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


def extract_text(payload: Any) -> str:
    """
    Pull ``candidates[0].content.parts[0].text`` out of a reply.

    Raises:
        InvalidResponseError: If any step of the path is missing or the text is empty
    """
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise InvalidResponseError("Invalid response from Gemini API") from e

    if not isinstance(text, str) or not text:
        raise InvalidResponseError("Invalid response from Gemini API")

    return text


class GeminiClient:
    """
    Client for one-shot calls to the Gemini text-generation API.

    The API key travels as the ``key`` query parameter and the prompt is the
    only content part of the request body. No retries are attempted.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_GEMINI_MODEL,
        base_url: str = DEFAULT_GEMINI_BASE_URL,
        timeout: float | None = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Gemini API key
            model: Model name, e.g. "gemini-pro"
            base_url: API root up to and including the version segment
            timeout: Total request timeout in seconds, None for no limit
        """
        if not api_key or not api_key.strip():
            raise ConfigurationError("Gemini API key must not be empty")

        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    @classmethod
    def from_settings(cls, settings: CardGuardSettings) -> "GeminiClient":
        return cls(
            api_key=settings.gemini_api_key or "",
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.request_timeout_seconds,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"Content-Type": "application/json"},
            )

        return self._session

    async def generate(self, prompt: str) -> str:
        """
        Send the prompt and return the model's raw text reply.

        Args:
            prompt: Natural-language prompt

        Returns:
            Generated text

        Raises:
            TransportError: On a non-success status or a connection failure
            InvalidResponseError: If the reply lacks the generated text
        """
        session = await self._get_session()
        body = {"contents": [{"parts": [{"text": prompt}]}]}
        audit = get_audit_logger()
        start_time = time.perf_counter()

        try:
            async with session.post(
                self.endpoint, params={"key": self.api_key}, json=body
            ) as response:
                duration_ms = (time.perf_counter() - start_time) * 1000

                if response.status >= 300:
                    audit.log_llm_request(
                        provider=PROVIDER,
                        model=self.model,
                        duration_ms=duration_ms,
                        success=False,
                        status_code=response.status,
                    )
                    raise TransportError(
                        f"API request failed: {response.status} {response.reason or ''}".rstrip(),
                        status_code=response.status,
                    )

                try:
                    payload = await response.json(content_type=None)
                except ValueError as e:
                    raise InvalidResponseError("Invalid response from Gemini API") from e

                audit.log_llm_request(
                    provider=PROVIDER,
                    model=self.model,
                    duration_ms=duration_ms,
                    success=True,
                    status_code=response.status,
                )

        except aiohttp.ClientError as e:
            logger.warning("gemini_request_failed", error=str(e))
            raise TransportError(f"API request failed: {e}") from e

        return extract_text(payload)

    async def close(self) -> None:
        """Close the underlying session."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "GeminiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
