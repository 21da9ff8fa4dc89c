"""
Base classes for the Snow Oracle SDK.

This module contains:
- RestClient: REST request gateway with timeout handling
- BaseWebSocketClient: WebSocket client with reconnection and subscriptions
- Type definitions (dataclasses, enums)
"""

from snow_oracle.base.rest_client import HttpMethod, RestClient, RestConfig
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
from snow_oracle.base.websocket_client import (
    BaseWebSocketClient,
    ConnectionState,
    WebSocketConfig,
)

__all__ = [
    # WebSocket
    "BaseWebSocketClient",
    "WebSocketConfig",
    "ConnectionState",
    # REST
    "RestClient",
    "RestConfig",
    "HttpMethod",
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
]
