"""
Shared fixtures: an in-memory WebSocket transport and a local HTTP API.
"""

import asyncio
import json
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from snow_oracle import SnowOracleWebSocket

_CLOSE = object()


# =============================================================================
# WebSocket fakes
# =============================================================================


class FakeConnection:
    """In-memory stand-in for a websockets client connection."""

    def __init__(
        self,
        send_gate: asyncio.Event | None = None,
        close_error: Exception | None = None,
    ) -> None:
        self.sent: list[dict[str, Any]] = []
        self.closed = False
        self.close_calls = 0
        self.send_gate = send_gate  # send() blocks until set
        self.close_error = close_error
        self._inbox: asyncio.Queue[Any] = asyncio.Queue()

    async def send(self, message: str) -> None:
        if self.send_gate is not None:
            await self.send_gate.wait()
        if self.closed:
            raise RuntimeError("connection is closed")
        self.sent.append(json.loads(message))

    async def close(self) -> None:
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error
        if not self.closed:
            self.closed = True
            self._inbox.put_nowait(_CLOSE)

    # --- server side ---

    def push(self, message: Any) -> None:
        """Deliver a frame; dicts/lists are JSON encoded, str/bytes sent as-is."""
        if not isinstance(message, (str, bytes)):
            message = json.dumps(message)
        self._inbox.put_nowait(message)

    def drop(self) -> None:
        """Server closes the connection."""
        self.closed = True
        self._inbox.put_nowait(_CLOSE)

    def fail(self, error: Exception) -> None:
        """Stream error surfaced while receiving."""
        self.closed = True
        self._inbox.put_nowait(error)

    def __aiter__(self) -> "FakeConnection":
        return self

    async def __anext__(self) -> Any:
        item = await self._inbox.get()
        if item is _CLOSE:
            raise StopAsyncIteration
        if isinstance(item, Exception):
            raise item
        return item


class FakeConnector:
    """Connector that hands out FakeConnections, or fails on demand."""

    def __init__(self) -> None:
        self.connections: list[FakeConnection] = []
        self.urls: list[str] = []
        self.failures_remaining = 0  # Fail this many upcoming calls
        self.always_fail = False
        self.send_gate: asyncio.Event | None = None
        self.close_error: Exception | None = None
        self.hold: asyncio.Event | None = None  # Handshake waits on this when set

    @property
    def calls(self) -> int:
        return len(self.urls)

    @property
    def latest(self) -> FakeConnection:
        return self.connections[-1]

    async def __call__(self, url: str) -> FakeConnection:
        self.urls.append(url)
        if self.hold is not None:
            await self.hold.wait()
        if self.always_fail or self.failures_remaining > 0:
            self.failures_remaining = max(0, self.failures_remaining - 1)
            raise OSError("connection refused")
        connection = FakeConnection(send_gate=self.send_gate, close_error=self.close_error)
        self.connections.append(connection)
        return connection


def trade_frame(slug: str, **fields: Any) -> dict[str, Any]:
    data = {
        "market_id": f"id-{slug}",
        "slug": slug,
        "price": "0.55",
        "size": 10,
        "side": "buy",
        "timestamp": "2024-11-05T12:00:00Z",
    }
    data.update(fields)
    return {"channel": "activity/trades", "data": data}


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest_asyncio.fixture
async def feed(connector: FakeConnector):
    client = SnowOracleWebSocket(
        url="wss://feed.test",
        reconnect_interval=0,
        max_reconnect_attempts=10,
        connector=connector,
    )
    yield client
    await client.disconnect()


@pytest.fixture
def make_trade():
    return trade_frame


@pytest.fixture
def wait_until():
    async def _wait_until(predicate, timeout: float = 2.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not met before timeout")
            await asyncio.sleep(0.001)

    return _wait_until


# =============================================================================
# HTTP API fake
# =============================================================================


class FakeApi:
    """Scriptable local API: register responses, inspect received requests."""

    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []
        self.base_url = ""
        self._routes: dict[tuple[str, str], tuple[int, str, float]] = {}

    def add(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        status: int = 200,
        text: str | None = None,
        delay: float = 0.0,
    ) -> None:
        body = text if text is not None else ("" if json_body is None else json.dumps(json_body))
        self._routes[(method, path)] = (status, body, delay)

    @property
    def last(self) -> dict[str, Any]:
        return self.requests[-1]

    async def handle(self, request: web.Request) -> web.Response:
        raw_body = await request.text()
        path = request.rel_url.raw_path
        self.requests.append(
            {
                "method": request.method,
                "path": path,
                "query": dict(request.query),
                "headers": {key.lower(): value for key, value in request.headers.items()},
                "json": json.loads(raw_body) if raw_body else None,
            }
        )

        route = self._routes.get((request.method, path))
        if route is None:
            return web.Response(status=404, text="Not found")

        status, body, delay = route
        if delay:
            await asyncio.sleep(delay)
        return web.Response(status=status, text=body, content_type="application/json")


@pytest_asyncio.fixture
async def api():
    fake = FakeApi()
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", fake.handle)

    server = TestServer(app)
    await server.start_server()
    fake.base_url = str(server.make_url("")).rstrip("/")
    yield fake
    await server.close()
