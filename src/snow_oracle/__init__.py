"""
Snow Oracle: Python SDK for the Snow Oracle prediction market aggregator.

REST access to aggregated Polymarket/Kalshi markets plus a live trade feed.

Example:
    ```python
    from snow_oracle import SnowOracleClient, SnowOracleWebSocket

    async def main():
        async with SnowOracleClient() as client:
            markets = await client.get_markets(limit=5)

        feed = SnowOracleWebSocket()
        await feed.subscribe(markets[0].slug, lambda trade: print(trade))
        async with feed:
            await asyncio.sleep(60)

    asyncio.run(main())
    ```
"""

from snow_oracle.base.rest_client import RestClient, RestConfig
from snow_oracle.base.types import (
    Alert,
    AlertCondition,
    AlertType,
    LeaderboardEntry,
    Market,
    MarketAnalysis,
    MarketCategory,
    MarketOutcome,
    MarketSortBy,
    MarketSource,
    PortfolioInsight,
    Position,
    Prediction,
    PredictionChoice,
    RiskLevel,
    Sentiment,
    SortOrder,
    SpreadDirection,
    SpreadOpportunity,
    TradeEvent,
    TradeSide,
    WatchlistItem,
)
from snow_oracle.base.websocket_client import ConnectionState, WebSocketConfig
from snow_oracle.client import SnowOracleClient
from snow_oracle.common.exceptions import (
    ApiError,
    ConfigurationError,
    ConnectionError,
    InvalidResponseError,
    MessageParseError,
    NetworkError,
    SnowOracleError,
    StreamUnavailableError,
    TimeoutError,
    WebSocketError,
)
from snow_oracle.common.logger import get_logger, set_component_level, setup_logger
from snow_oracle.config import SnowOracleConfig, get_config, load_env
from snow_oracle.websocket import SnowOracleWebSocket

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Clients
    "SnowOracleClient",
    "SnowOracleWebSocket",
    "RestClient",
    "RestConfig",
    "WebSocketConfig",
    "ConnectionState",
    # Types
    "Market",
    "MarketOutcome",
    "MarketSource",
    "MarketCategory",
    "MarketSortBy",
    "SortOrder",
    "WatchlistItem",
    "Position",
    "Prediction",
    "PredictionChoice",
    "Alert",
    "AlertType",
    "AlertCondition",
    "SpreadOpportunity",
    "SpreadDirection",
    "LeaderboardEntry",
    "MarketAnalysis",
    "Sentiment",
    "RiskLevel",
    "PortfolioInsight",
    "TradeEvent",
    "TradeSide",
    # Exceptions
    "SnowOracleError",
    "ApiError",
    "InvalidResponseError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
    "WebSocketError",
    "StreamUnavailableError",
    "MessageParseError",
    "ConfigurationError",
    # Config
    "SnowOracleConfig",
    "get_config",
    "load_env",
    # Logging
    "setup_logger",
    "set_component_level",
    "get_logger",
]
