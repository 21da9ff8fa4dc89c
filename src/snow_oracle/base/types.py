"""
Type definitions for the Snow Oracle SDK.

This module contains all dataclasses and enums returned by the REST client
and the trade feed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class MarketSource(str, Enum):
    """Upstream venue a market is aggregated from."""

    POLYMARKET = "polymarket"
    KALSHI = "kalshi"


class MarketCategory(str, Enum):
    """Market category."""

    POLITICS = "politics"
    CRYPTO = "crypto"
    SPORTS = "sports"
    ENTERTAINMENT = "entertainment"
    SCIENCE = "science"
    ECONOMICS = "economics"
    OTHER = "other"


class MarketSortBy(str, Enum):
    """Sort key for the markets listing."""

    VOLUME = "volume"
    PROBABILITY = "probability"
    END_DATE = "endDate"
    LIQUIDITY = "liquidity"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class PredictionChoice(str, Enum):
    """Outcome a user predicts."""

    YES = "yes"
    NO = "no"


class AlertType(str, Enum):
    """What an alert watches."""

    PRICE = "price"
    VOLUME = "volume"
    RESOLUTION = "resolution"


class AlertCondition(str, Enum):
    """Comparison an alert applies to its value."""

    ABOVE = "above"
    BELOW = "below"
    EQUALS = "equals"


class Sentiment(str, Enum):
    """AI market sentiment."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class RiskLevel(str, Enum):
    """AI risk assessment."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SpreadDirection(str, Enum):
    """Which leg to buy on a cross-venue spread."""

    BUY_POLY_SELL_KALSHI = "buy_poly_sell_kalshi"
    BUY_KALSHI_SELL_POLY = "buy_kalshi_sell_poly"


class TradeSide(str, Enum):
    """Trade side: buy or sell."""

    BUY = "buy"
    SELL = "sell"


@dataclass
class MarketOutcome:
    """Single outcome of a market."""

    name: str
    probability: Decimal
    price: Decimal


@dataclass
class Market:
    """Aggregated market information."""

    id: str
    slug: str  # Topic key on the trade feed
    title: str
    description: str
    source: MarketSource
    category: MarketCategory
    probability: Decimal
    volume: Decimal
    liquidity: Decimal
    end_date: datetime | None
    image_url: str | None
    outcomes: list[MarketOutcome] = field(default_factory=list)
    last_updated: datetime | None = None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class WatchlistItem:
    """Market on the user's watchlist."""

    id: int
    market_id: str
    added_at: datetime | None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class Position:
    """Tracked position."""

    id: int
    market_id: str
    outcome: str
    shares: Decimal
    avg_price: Decimal
    current_price: Decimal
    pnl: Decimal
    pnl_percent: Decimal
    created_at: datetime | None
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def cost_basis(self) -> Decimal:
        """Amount paid for the position."""
        return self.shares * self.avg_price

    @property
    def market_value(self) -> Decimal:
        """Current market value."""
        return self.shares * self.current_price


@dataclass
class Prediction:
    """A wallet's prediction on a market."""

    id: int
    market_id: str
    wallet_address: str
    prediction: PredictionChoice
    confidence: Decimal
    created_at: datetime | None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class Alert:
    """Price/volume/resolution alert."""

    id: int
    market_id: str
    type: AlertType
    condition: AlertCondition
    value: Decimal
    is_active: bool
    created_at: datetime | None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class SpreadOpportunity:
    """Price gap for the same market between Polymarket and Kalshi."""

    market_id: str
    title: str
    polymarket_price: Decimal
    kalshi_price: Decimal
    spread: Decimal
    spread_percent: Decimal
    direction: SpreadDirection
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class LeaderboardEntry:
    """Prediction leaderboard row."""

    rank: int
    wallet_address: str
    display_name: str
    total_predictions: int
    correct_predictions: int
    accuracy: Decimal
    score: Decimal
    streak: int
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class MarketAnalysis:
    """AI-generated market analysis."""

    market_id: str
    summary: str
    sentiment: Sentiment
    key_factors: list[str]
    risk_level: RiskLevel
    recommendation: str
    confidence: Decimal
    generated_at: datetime | None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class PortfolioInsight:
    """AI-generated portfolio insight for a wallet."""

    total_value: Decimal
    total_pnl: Decimal
    risk_score: Decimal
    diversification_score: Decimal
    recommendations: list[str]
    top_performers: list[str]
    underperformers: list[str]
    generated_at: datetime | None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class TradeEvent:
    """Normalized trade from the live feed."""

    market_id: str
    slug: str
    price: Decimal
    size: Decimal
    side: TradeSide
    timestamp: datetime

    @property
    def notional(self) -> Decimal:
        """Trade value (price * size)."""
        return self.price * self.size
