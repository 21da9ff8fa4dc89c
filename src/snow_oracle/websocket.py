"""
Snow Oracle live trade feed.

Streams trades from the ``activity/trades`` channel, keyed by market slug.

Outbound frames:
    {"type": "subscribe" | "unsubscribe", "channel": "activity/trades", "market": <slug>}

Inbound frames:
    {"channel": "activity/trades", "data": {"market_id", "slug", "price", "size", "side", "timestamp"}}
"""

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from snow_oracle.base.types import TradeEvent
from snow_oracle.base.websocket_client import (
    BaseWebSocketClient,
    Connector,
    WebSocketConfig,
)
from snow_oracle.config import get_config
from snow_oracle.parser import parse_trade_event

TRADES_CHANNEL = "activity/trades"

TradeListener = Callable[[TradeEvent], Any]


class MessageType(str, Enum):
    """Control frame types."""

    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"


class SnowOracleWebSocket(BaseWebSocketClient):
    """
    Live trade feed with automatic reconnection.

    Example:
        ```python
        feed = SnowOracleWebSocket()

        async def on_trade(trade: TradeEvent) -> None:
            print(f"{trade.slug}: {trade.side.value} {trade.size} @ {trade.price}")

        feed.on_connection_change(lambda connected: print("connected:", connected))
        unsubscribe = await feed.subscribe("btc-100k-2025", on_trade)

        async with feed:
            await asyncio.sleep(60)
            await unsubscribe()
        ```
    """

    def __init__(
        self,
        url: str | None = None,
        reconnect: bool = True,
        reconnect_interval: float | None = None,
        max_reconnect_attempts: int | None = None,
        config: WebSocketConfig | None = None,
        connector: Connector | None = None,
    ) -> None:
        """
        Initialize the trade feed.

        Args:
            url: WebSocket URL (uses default if not specified)
            reconnect: Reconnect automatically after a drop
            reconnect_interval: Fixed delay between attempts (seconds)
            max_reconnect_attempts: Attempts per disconnect episode
            config: Full config; takes precedence over the arguments above
            connector: Custom transport factory (defaults to websockets)
        """
        if config is None:
            overrides: dict[str, Any] = {"reconnect": reconnect}
            if url:
                overrides["url"] = url
            if reconnect_interval is not None:
                overrides["reconnect_interval"] = reconnect_interval
            if max_reconnect_attempts is not None:
                overrides["max_reconnect_attempts"] = max_reconnect_attempts
            config = WebSocketConfig(**overrides)

        super().__init__(config, connector=connector, name="trades")

    @classmethod
    def from_env(cls, connector: Connector | None = None) -> "SnowOracleWebSocket":
        """Create a feed configured from SNOW_ORACLE_WS_* environment variables."""
        return cls(config=get_config().to_websocket_config(), connector=connector)

    async def subscribe(
        self, topic: str, callback: TradeListener
    ) -> Callable[[], Awaitable[None]]:
        """
        Receive trades for a market slug.

        Args:
            topic: Market slug
            callback: Called with each TradeEvent for that slug

        Returns:
            Coroutine function that removes the callback.
        """
        return await super().subscribe(topic, callback)

    def _build_subscribe_message(self, topic: str) -> dict[str, Any]:
        return {
            "type": MessageType.SUBSCRIBE.value,
            "channel": TRADES_CHANNEL,
            "market": topic,
        }

    def _build_unsubscribe_message(self, topic: str) -> dict[str, Any]:
        return {
            "type": MessageType.UNSUBSCRIBE.value,
            "channel": TRADES_CHANNEL,
            "market": topic,
        }

    def _parse_event(self, message: dict[str, Any]) -> tuple[str, TradeEvent] | None:
        if message.get("channel") != TRADES_CHANNEL:
            return None

        data = message.get("data")
        if not data or not isinstance(data, dict):
            return None

        trade = parse_trade_event(data)
        return trade.slug, trade
