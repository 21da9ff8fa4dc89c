"""
Base WebSocket client with automatic reconnection and subscription management.

Features:
- Reference-counted topic subscriptions (many listeners per topic)
- Topic-scoped event dispatch
- Connection-state observers
- Fixed-interval reconnection with a bounded attempt counter
- Resubscription of every tracked topic after each (re)connect

All feed state is owned by one instance and mutated only from the event
loop, between await points. No locks are needed as long as callers stay on
that loop.
"""

import asyncio
import inspect
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from snow_oracle.common.exceptions import (
    ConfigurationError,
    MessageParseError,
    StreamUnavailableError,
)

try:
    from websockets.asyncio.client import connect as websockets_connect
except ImportError:
    websockets_connect = None

logger = logging.getLogger(__name__)

DEFAULT_WS_URL = "wss://ws-live-data.polymarket.com"
DEFAULT_RECONNECT_INTERVAL = 5.0
DEFAULT_MAX_RECONNECT_ATTEMPTS = 10
DEFAULT_CONNECT_TIMEOUT = 30.0

# Listener callbacks may be plain functions or coroutine functions
Listener = Callable[[Any], Any]
ConnectionListener = Callable[[bool], Any]

# async connector(url) -> connection supporting send(str), close() and `async for`
Connector = Callable[[str], Awaitable[Any]]


class ConnectionState(Enum):
    """WebSocket connection state."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"  # Retry timer pending
    CLOSED = "closed"  # Stopped by disconnect()


@dataclass
class WebSocketConfig:
    """WebSocket client configuration."""

    url: str = DEFAULT_WS_URL
    reconnect: bool = True
    reconnect_interval: float = DEFAULT_RECONNECT_INTERVAL  # Fixed delay in seconds
    max_reconnect_attempts: int = DEFAULT_MAX_RECONNECT_ATTEMPTS
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.url:
            raise ConfigurationError("url must not be empty")
        if self.reconnect_interval < 0:
            raise ConfigurationError(
                f"reconnect_interval must not be negative, got {self.reconnect_interval}"
            )
        if self.max_reconnect_attempts < 0:
            raise ConfigurationError(
                f"max_reconnect_attempts must not be negative, got {self.max_reconnect_attempts}"
            )
        if self.connect_timeout <= 0:
            raise ConfigurationError(f"connect_timeout must be positive, got {self.connect_timeout}")


async def _websockets_connector(url: str) -> Any:
    return await websockets_connect(url)


class BaseWebSocketClient(ABC):
    """
    Base WebSocket client with reconnection and subscription management.

    Subclasses must implement:
    - _build_subscribe_message(topic): Create subscription frame
    - _build_unsubscribe_message(topic): Create unsubscribe frame
    - _parse_event(message): Turn a decoded frame into (topic, event) or None
    """

    def __init__(
        self,
        config: WebSocketConfig | None = None,
        connector: Connector | None = None,
        name: str = "feed",
    ) -> None:
        self.config = config or WebSocketConfig()
        self.name = name

        if connector is None and websockets_connect is not None:
            connector = _websockets_connector
        self._connector = connector

        self._ws: Any = None
        self._state = ConnectionState.DISCONNECTED
        self._should_reconnect = self.config.reconnect
        self._reconnect_attempts = 0

        # topic -> listeners; a topic is tracked while its set is non-empty
        self._listeners: dict[str, set[Listener]] = {}
        self._connection_listeners: set[ConnectionListener] = set()

        # Tasks
        self._receive_task: asyncio.Task[None] | None = None
        self._reconnect_task: asyncio.Task[None] | None = None

        # Set once the feed stops for good (disconnect or retries exhausted)
        self._stopped = asyncio.Event()

    @property
    def is_connected(self) -> bool:
        """Check if WebSocket is connected."""
        return self._state == ConnectionState.CONNECTED and self._ws is not None

    @property
    def state(self) -> ConnectionState:
        """Get current connection state."""
        return self._state

    @property
    def reconnect_attempts(self) -> int:
        """Reconnection attempts made since the last successful open."""
        return self._reconnect_attempts

    @property
    def subscriptions(self) -> list[str]:
        """Topics currently tracked (replayed on every connect)."""
        return list(self._listeners)

    def listener_count(self, topic: str) -> int:
        """Number of listeners registered for a topic."""
        return len(self._listeners.get(topic, ()))

    # === Abstract Methods ===

    @abstractmethod
    def _build_subscribe_message(self, topic: str) -> dict[str, Any]:
        """Build subscription frame for a topic."""
        pass

    @abstractmethod
    def _build_unsubscribe_message(self, topic: str) -> dict[str, Any]:
        """Build unsubscribe frame for a topic."""
        pass

    @abstractmethod
    def _parse_event(self, message: dict[str, Any]) -> tuple[str, Any] | None:
        """Extract (topic, event) from a decoded frame, or None to ignore it."""
        pass

    # === Connection Management ===

    async def connect(self) -> None:
        """
        Open the WebSocket connection.

        Connection failures are not raised: they count as a close and go
        through the normal retry decision. Calling connect() again after
        disconnect() re-enables automatic reconnection.

        Raises:
            StreamUnavailableError: No WebSocket transport is available.
        """
        if self._connector is None:
            raise StreamUnavailableError(
                'WebSocket is not available. Install the "websockets" package.'
            )

        if self._state in (ConnectionState.CONNECTING, ConnectionState.CONNECTED):
            return

        self._should_reconnect = self.config.reconnect
        self._stopped.clear()
        self._cancel_reconnect()

        await self._open()

    async def disconnect(self) -> None:
        """
        Close the connection and stop reconnecting.

        A listener callback that is running when this is called is allowed
        to finish.
        """
        self._should_reconnect = False
        self._cancel_reconnect()

        ws = self._ws
        was_connected = self._state == ConnectionState.CONNECTED
        self._ws = None
        self._state = ConnectionState.CLOSED

        receive_task = self._receive_task
        self._receive_task = None

        if ws is not None:
            try:
                await ws.close()
            except Exception as e:
                logger.warning(f"[{self.name}] Error while closing WebSocket: {e}")
                if receive_task is not None:
                    receive_task.cancel()

        # Closing ends the receive loop; let it drain the current frame
        if receive_task is not None and receive_task is not asyncio.current_task():
            try:
                await receive_task
            except asyncio.CancelledError:
                pass

        if was_connected:
            await self._notify_connection(False)

        self._stopped.set()
        logger.info(f"[{self.name}] WebSocket disconnected")

    async def run_forever(self) -> None:
        """Run until disconnect() is called or reconnection gives up."""
        if self._state == ConnectionState.DISCONNECTED and not self._stopped.is_set():
            await self.connect()
        await self._stopped.wait()

    async def __aenter__(self) -> "BaseWebSocketClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()

    async def _open(self) -> None:
        """Single connection attempt. Failure is handled as a close."""
        self._state = ConnectionState.CONNECTING
        logger.info(f"[{self.name}] Connecting to {self.config.url}")

        try:
            ws = await asyncio.wait_for(
                self._connector(self.config.url),
                timeout=self.config.connect_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"[{self.name}] Connection timeout after {self.config.connect_timeout}s"
            )
            ws = None
        except Exception as e:
            logger.warning(f"[{self.name}] Connection failed: {e}")
            ws = None

        if self._state != ConnectionState.CONNECTING:
            # disconnect() ran while the handshake was in flight
            if ws is not None:
                try:
                    await ws.close()
                except Exception as e:
                    logger.warning(f"[{self.name}] Error while closing WebSocket: {e}")
            return

        if ws is None:
            await self._handle_close(None)
            return

        self._ws = ws
        self._state = ConnectionState.CONNECTED
        self._reconnect_attempts = 0
        logger.info(f"[{self.name}] WebSocket connected to {self.config.url}")

        await self._notify_connection(True)
        await self._resubscribe_all()

        # An observer may have disconnected us during the notification
        if self._ws is ws:
            self._receive_task = asyncio.create_task(self._receive_loop(ws))

    async def _handle_close(self, ws: Any) -> None:
        """Make the single retry decision for a closed or failed connection."""
        if ws is not self._ws:
            return  # Stale connection, already replaced or disconnected

        self._ws = None
        self._receive_task = None
        self._state = ConnectionState.DISCONNECTED

        await self._notify_connection(False)

        # An observer may have called connect() or disconnect()
        if self._state != ConnectionState.DISCONNECTED:
            return

        if not self._should_reconnect:
            self._stopped.set()
            return

        if self._reconnect_attempts >= self.config.max_reconnect_attempts:
            logger.error(
                f"[{self.name}] All reconnection attempts failed "
                f"({self.config.max_reconnect_attempts})"
            )
            self._stopped.set()
            return

        self._reconnect_attempts += 1
        self._state = ConnectionState.RECONNECTING
        logger.info(
            f"[{self.name}] Reconnecting in {self.config.reconnect_interval:.1f}s "
            f"(attempt {self._reconnect_attempts}/{self.config.max_reconnect_attempts})"
        )
        self._reconnect_task = asyncio.create_task(self._reconnect_after_delay())

    async def _reconnect_after_delay(self) -> None:
        await asyncio.sleep(self.config.reconnect_interval)
        await self._open()

    def _cancel_reconnect(self) -> None:
        task = self._reconnect_task
        self._reconnect_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    # === Message Handling ===

    async def _receive_loop(self, ws: Any) -> None:
        """Receive frames until the connection ends, then decide on retry."""
        try:
            async for raw_message in ws:
                await self._handle_raw(raw_message)
        except Exception as e:
            # Stream errors are logged; the close below drives recovery
            logger.warning(f"[{self.name}] Connection closed: {e}")
        else:
            logger.info(f"[{self.name}] Connection closed by server")

        await self._handle_close(ws)

    def _decode_message(self, raw_message: str | bytes) -> Any:
        try:
            if isinstance(raw_message, bytes):
                raw_message = raw_message.decode("utf-8")
            return json.loads(raw_message)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MessageParseError(f"Failed to parse WebSocket message: {e}", raw=raw_message) from e

    async def _handle_raw(self, raw_message: str | bytes) -> None:
        try:
            message = self._decode_message(raw_message)
        except MessageParseError as e:
            logger.warning(f"[{self.name}] {e}")
            return

        if not isinstance(message, dict):
            return

        parsed = self._parse_event(message)
        if parsed is None:
            return

        topic, event = parsed
        await self._dispatch(topic, event)

    async def _dispatch(self, topic: str, event: Any) -> None:
        """Deliver an event to the listeners of its topic only."""
        # Copy: listeners may unsubscribe while being called
        for listener in list(self._listeners.get(topic, ())):
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(f"[{self.name}] Listener error for {topic}")

    async def _notify_connection(self, connected: bool) -> None:
        for listener in list(self._connection_listeners):
            try:
                result = listener(connected)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(f"[{self.name}] Connection listener error")

    # === Subscription Management ===

    async def subscribe(self, topic: str, callback: Listener) -> Callable[[], Awaitable[None]]:
        """
        Register a listener for a topic.

        The first listener for a topic starts tracking it. Every call sends
        a subscribe frame right away if connected. Tracked topics are
        replayed once each on every connect.

        Args:
            topic: Subscription key
            callback: Called with each event for the topic

        Returns:
            Coroutine function that removes this listener. Removing the last
            listener of a topic stops tracking it and sends an unsubscribe
            frame if connected.
        """
        listeners = self._listeners.get(topic)
        if listeners is None:
            listeners = self._listeners[topic] = set()
            logger.debug(f"[{self.name}] Tracking {topic}")
        listeners.add(callback)

        await self._send(self._build_subscribe_message(topic))

        async def unsubscribe() -> None:
            await self._remove_listener(topic, callback)

        return unsubscribe

    async def _remove_listener(self, topic: str, callback: Listener) -> None:
        listeners = self._listeners.get(topic)
        if listeners is None or callback not in listeners:
            return

        listeners.discard(callback)
        if listeners:
            return

        del self._listeners[topic]
        logger.debug(f"[{self.name}] Stopped tracking {topic}")
        # Nothing is queued while offline: the next connect just omits the topic
        await self._send(self._build_unsubscribe_message(topic))

    async def _resubscribe_all(self) -> None:
        """Send one subscribe frame per tracked topic."""
        for topic in list(self._listeners):
            # Skip topics removed while an earlier send was pending
            if topic in self._listeners:
                await self._send(self._build_subscribe_message(topic))

    async def _send(self, message: dict[str, Any]) -> bool:
        """Send a frame if connected. Returns whether it was sent."""
        if not self.is_connected:
            return False

        try:
            await self._ws.send(json.dumps(message))
            return True
        except Exception as e:
            logger.warning(f"[{self.name}] Failed to send {message.get('type')}: {e}")
            return False

    # === Callback Registration ===

    def on_connection_change(self, callback: ConnectionListener) -> Callable[[], None]:
        """
        Register an observer for connected/disconnected transitions.

        Returns:
            Function that removes the observer.
        """
        self._connection_listeners.add(callback)

        def remove() -> None:
            self._connection_listeners.discard(callback)

        return remove
