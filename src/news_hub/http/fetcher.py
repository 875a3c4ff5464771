"""HTTP client for provider JSON APIs with retries and timeout."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; NewsHub/0.3)"


@dataclass(slots=True)
class FetchResult:
    """Result of one provider request."""

    url: str
    status_code: int
    payload: object | None
    is_success: bool
    error: str | None = None


class HttpFetcher:
    """HTTP client wrapper with retry, timeout, and user-agent configuration."""

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = httpx.Timeout(timeout_seconds, connect=10.0)
        self._client = httpx.Client(
            timeout=self._timeout,
            headers={"User-Agent": user_agent, "Accept": "application/json"},
            transport=transport or httpx.HTTPTransport(retries=max_retries),
            follow_redirects=True,
        )

    def get_json(self, url: str, *, params: dict[str, str] | None = None) -> FetchResult:
        """Fetch ``url`` and decode its JSON body.

        Non-2xx responses still carry the decoded body when there is one, since
        some providers describe their errors in it.
        """

        try:
            response = self._client.get(url, params=params)
        except httpx.TimeoutException:
            logger.warning("Timeout fetching %s", url)
            return FetchResult(
                url=url,
                status_code=0,
                payload=None,
                is_success=False,
                error="timeout",
            )
        except httpx.HTTPError as exc:
            logger.warning("HTTP error fetching %s: %s", url, exc)
            return FetchResult(
                url=url,
                status_code=0,
                payload=None,
                is_success=False,
                error=str(exc),
            )

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return FetchResult(
                url=url,
                status_code=response.status_code,
                payload=None,
                is_success=False,
                error="malformed JSON",
            )
        return FetchResult(
            url=url,
            status_code=response.status_code,
            payload=payload,
            is_success=response.is_success,
            error=None if response.is_success else f"HTTP {response.status_code}",
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpFetcher:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
