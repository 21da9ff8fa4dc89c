"""
REST client for the Snow Oracle API.

Features:
- Shared aiohttp session management
- Default + per-call header merging
- Whole-request timeout with cancellation of the in-flight call
- Non-2xx responses surfaced as ApiError

Each call is a single attempt. Retry policy belongs to the caller.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import aiohttp

from snow_oracle.common.exceptions import (
    ApiError,
    ConfigurationError,
    ConnectionError,
    InvalidResponseError,
    NetworkError,
    TimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://snow-oracle-ball.replit.app"
DEFAULT_TIMEOUT = 30.0


class HttpMethod(str, Enum):
    """HTTP methods."""

    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


@dataclass
class RestConfig:
    """REST client configuration."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT  # Request timeout in seconds
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.base_url = (self.base_url or "").rstrip("/")
        if not self.base_url:
            raise ConfigurationError("base_url must not be empty")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")


class RestClient:
    """
    Request gateway for the Snow Oracle API.

    Example:
        ```python
        async with RestClient(RestConfig(base_url="https://example.com")) as rest:
            markets = await rest.get("/api/markets", params={"limit": "10"})
        ```
    """

    def __init__(
        self,
        config: RestConfig | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.config = config or RestConfig()

        self._session = session
        self._owns_session = session is None

        # Metrics
        self._request_count = 0
        self._last_latency_ms: float | None = None

    @property
    def is_initialized(self) -> bool:
        """Check if session is initialized."""
        return self._session is not None and not self._session.closed

    @property
    def request_count(self) -> int:
        """Number of requests that received a response."""
        return self._request_count

    @property
    def last_latency_ms(self) -> float | None:
        """Get latency of last request in milliseconds."""
        return self._last_latency_ms

    @property
    def default_headers(self) -> dict[str, str]:
        """Headers sent with every request before per-call overrides."""
        return {"Content-Type": "application/json", **self.config.headers}

    # === Session Management ===

    async def init(self) -> None:
        """Initialize HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
            logger.debug(f"REST session initialized for {self.config.base_url}")

    async def close(self) -> None:
        """Close HTTP session (only if this client created it)."""
        if self._session is not None:
            if self._owns_session:
                await self._session.close()
            self._session = None
            logger.debug("REST session closed")

    async def __aenter__(self) -> "RestClient":
        await self.init()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # === Request Methods ===

    def build_url(self, endpoint: str) -> str:
        """Join the configured base URL with an endpoint path."""
        return f"{self.config.base_url}{endpoint}"

    async def request(
        self,
        method: HttpMethod,
        endpoint: str,
        params: dict[str, Any] | None = None,
        data: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Make a single HTTP request and decode the JSON response.

        Args:
            method: HTTP method
            endpoint: API path, e.g. "/api/markets"
            params: Query parameters
            data: Request body (JSON encoded)
            headers: Per-call headers, override configured ones

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            TimeoutError: No complete response within config.timeout
            ApiError: Non-2xx status
            InvalidResponseError: 2xx response with a non-JSON body
            ConnectionError: Host unreachable
            NetworkError: Any other transport failure
        """
        if not self.is_initialized:
            await self.init()

        merged_headers = {**self.default_headers, **(headers or {})}
        url = self.build_url(endpoint)

        logger.debug(f"{method.value} {url} params={params}")
        start_time = time.monotonic()

        try:
            status, body = await asyncio.wait_for(
                self._send(method, url, params, data, merged_headers),
                timeout=self.config.timeout,
            )
        except asyncio.TimeoutError as e:
            raise TimeoutError(
                f"Request timeout after {self.config.timeout}s",
                timeout_seconds=self.config.timeout,
            ) from e
        except aiohttp.ClientConnectorError as e:
            raise ConnectionError(f"Connection failed: {e}") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Request failed: {e}") from e

        self._last_latency_ms = (time.monotonic() - start_time) * 1000
        self._request_count += 1

        if not 200 <= status < 300:
            logger.debug(f"{method.value} {url} -> {status}")
            raise ApiError(status, body, endpoint=endpoint)

        return self._decode(body, endpoint)

    async def _send(
        self,
        method: HttpMethod,
        url: str,
        params: dict[str, Any] | None,
        data: Any,
        headers: dict[str, str],
    ) -> tuple[int, str]:
        """Execute the HTTP request and read the whole body."""
        assert self._session is not None

        kwargs: dict[str, Any] = {
            "method": method.value,
            "url": url,
            "headers": headers,
        }

        if params:
            kwargs["params"] = params
        if data is not None:
            kwargs["data"] = json.dumps(data)

        async with self._session.request(**kwargs) as response:
            return response.status, await response.text()

    def _decode(self, body: str, endpoint: str) -> Any:
        if not body.strip():
            return None
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise InvalidResponseError(
                f"Invalid JSON in response from {endpoint}: {e}",
                endpoint=endpoint,
                raw=body,
            ) from e

    # === Convenience Methods ===

    async def get(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make GET request."""
        return await self.request(HttpMethod.GET, endpoint, params=params, headers=headers)

    async def post(
        self,
        endpoint: str,
        data: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make POST request."""
        return await self.request(HttpMethod.POST, endpoint, data=data, headers=headers)

    async def delete(
        self,
        endpoint: str,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make DELETE request."""
        return await self.request(HttpMethod.DELETE, endpoint, headers=headers)
