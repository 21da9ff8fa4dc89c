"""
Snow Oracle data parser.

Transforms API responses and feed frames into typed objects.

The API speaks camelCase JSON; the trade feed speaks snake_case. Parsers
never raise on missing keys: absent numbers become zero, absent strings
become "", unknown enum values map to a fallback member.
"""

from enum import Enum
from typing import Any, TypeVar

from snow_oracle.base.types import (
    Alert,
    AlertCondition,
    AlertType,
    LeaderboardEntry,
    Market,
    MarketAnalysis,
    MarketCategory,
    MarketOutcome,
    MarketSource,
    PortfolioInsight,
    Position,
    Prediction,
    PredictionChoice,
    RiskLevel,
    Sentiment,
    SpreadDirection,
    SpreadOpportunity,
    TradeEvent,
    TradeSide,
    WatchlistItem,
)
from snow_oracle.common.utils import (
    decimal_or_zero,
    parse_datetime,
    parse_int,
    utc_now,
)

E = TypeVar("E", bound=Enum)


# === Helper Functions ===


def _parse_enum(enum_cls: type[E], value: Any, default: E) -> E:
    """Map a raw value onto an enum member, falling back to ``default``."""
    try:
        return enum_cls(value)
    except ValueError:
        return default


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def parse_list(data: Any, parser: Any) -> list[Any]:
    """Apply ``parser`` to every dict in a JSON array; anything else yields []."""
    if not isinstance(data, list):
        return []
    return [parser(item) for item in data if isinstance(item, dict)]


# === Markets ===


def parse_outcome(data: dict[str, Any]) -> MarketOutcome:
    """Parse one entry of a market's ``outcomes`` array."""
    return MarketOutcome(
        name=_str(data.get("name")),
        probability=decimal_or_zero(data.get("probability")),
        price=decimal_or_zero(data.get("price")),
    )


def parse_market(data: dict[str, Any]) -> Market:
    """
    Parse a market from /api/markets or /api/markets/{id}.

    Args:
        data: Raw market object

    Returns:
        Parsed Market object
    """
    return Market(
        id=_str(data.get("id")),
        slug=_str(data.get("slug")),
        title=_str(data.get("title")),
        description=_str(data.get("description")),
        source=_parse_enum(MarketSource, data.get("source"), MarketSource.POLYMARKET),
        category=_parse_enum(MarketCategory, data.get("category"), MarketCategory.OTHER),
        probability=decimal_or_zero(data.get("probability")),
        volume=decimal_or_zero(data.get("volume")),
        liquidity=decimal_or_zero(data.get("liquidity")),
        end_date=parse_datetime(data.get("endDate")),
        image_url=data.get("imageUrl") or None,
        outcomes=parse_list(data.get("outcomes"), parse_outcome),
        last_updated=parse_datetime(data.get("lastUpdated")),
        raw=data,
    )


# === User Data ===


def parse_watchlist_item(data: dict[str, Any]) -> WatchlistItem:
    """Parse a watchlist entry."""
    return WatchlistItem(
        id=parse_int(data.get("id")),
        market_id=_str(data.get("marketId")),
        added_at=parse_datetime(data.get("addedAt")),
        raw=data,
    )


def parse_position(data: dict[str, Any]) -> Position:
    """Parse a tracked position."""
    return Position(
        id=parse_int(data.get("id")),
        market_id=_str(data.get("marketId")),
        outcome=_str(data.get("outcome")),
        shares=decimal_or_zero(data.get("shares")),
        avg_price=decimal_or_zero(data.get("avgPrice")),
        current_price=decimal_or_zero(data.get("currentPrice")),
        pnl=decimal_or_zero(data.get("pnl")),
        pnl_percent=decimal_or_zero(data.get("pnlPercent")),
        created_at=parse_datetime(data.get("createdAt")),
        raw=data,
    )


def parse_prediction(data: dict[str, Any]) -> Prediction:
    """Parse a prediction."""
    return Prediction(
        id=parse_int(data.get("id")),
        market_id=_str(data.get("marketId")),
        wallet_address=_str(data.get("walletAddress")),
        prediction=_parse_enum(PredictionChoice, data.get("prediction"), PredictionChoice.YES),
        confidence=decimal_or_zero(data.get("confidence")),
        created_at=parse_datetime(data.get("createdAt")),
        raw=data,
    )


def parse_alert(data: dict[str, Any]) -> Alert:
    """Parse an alert."""
    return Alert(
        id=parse_int(data.get("id")),
        market_id=_str(data.get("marketId")),
        type=_parse_enum(AlertType, data.get("type"), AlertType.PRICE),
        condition=_parse_enum(AlertCondition, data.get("condition"), AlertCondition.ABOVE),
        value=decimal_or_zero(data.get("value")),
        is_active=bool(data.get("isActive", False)),
        created_at=parse_datetime(data.get("createdAt")),
        raw=data,
    )


# === Analytics ===


def parse_spread(data: dict[str, Any]) -> SpreadOpportunity:
    """Parse a cross-venue spread opportunity."""
    return SpreadOpportunity(
        market_id=_str(data.get("marketId")),
        title=_str(data.get("title")),
        polymarket_price=decimal_or_zero(data.get("polymarketPrice")),
        kalshi_price=decimal_or_zero(data.get("kalshiPrice")),
        spread=decimal_or_zero(data.get("spread")),
        spread_percent=decimal_or_zero(data.get("spreadPercent")),
        direction=_parse_enum(
            SpreadDirection,
            data.get("direction"),
            SpreadDirection.BUY_POLY_SELL_KALSHI,
        ),
        raw=data,
    )


def parse_leaderboard_entry(data: dict[str, Any]) -> LeaderboardEntry:
    """Parse a leaderboard row."""
    return LeaderboardEntry(
        rank=parse_int(data.get("rank")),
        wallet_address=_str(data.get("walletAddress")),
        display_name=_str(data.get("displayName")),
        total_predictions=parse_int(data.get("totalPredictions")),
        correct_predictions=parse_int(data.get("correctPredictions")),
        accuracy=decimal_or_zero(data.get("accuracy")),
        score=decimal_or_zero(data.get("score")),
        streak=parse_int(data.get("streak")),
        raw=data,
    )


def parse_market_analysis(data: dict[str, Any]) -> MarketAnalysis:
    """Parse the AI market analysis response."""
    return MarketAnalysis(
        market_id=_str(data.get("marketId")),
        summary=_str(data.get("summary")),
        sentiment=_parse_enum(Sentiment, data.get("sentiment"), Sentiment.NEUTRAL),
        key_factors=_str_list(data.get("keyFactors")),
        risk_level=_parse_enum(RiskLevel, data.get("riskLevel"), RiskLevel.MEDIUM),
        recommendation=_str(data.get("recommendation")),
        confidence=decimal_or_zero(data.get("confidence")),
        generated_at=parse_datetime(data.get("generatedAt")),
        raw=data,
    )


def parse_portfolio_insight(data: dict[str, Any]) -> PortfolioInsight:
    """Parse the AI portfolio insight response."""
    return PortfolioInsight(
        total_value=decimal_or_zero(data.get("totalValue")),
        total_pnl=decimal_or_zero(data.get("totalPnL")),
        risk_score=decimal_or_zero(data.get("riskScore")),
        diversification_score=decimal_or_zero(data.get("diversificationScore")),
        recommendations=_str_list(data.get("recommendations")),
        top_performers=_str_list(data.get("topPerformers")),
        underperformers=_str_list(data.get("underperformers")),
        generated_at=parse_datetime(data.get("generatedAt")),
        raw=data,
    )


# === Trade Feed ===


def parse_trade_event(data: dict[str, Any]) -> TradeEvent:
    """
    Normalize the ``data`` payload of an activity/trades frame.

    Missing or falsy fields fall back to safe defaults: "" for ids,
    zero for price and size, BUY for anything but "sell", and the
    current time for the timestamp.
    """
    return TradeEvent(
        market_id=_str(data.get("market_id") or ""),
        slug=_str(data.get("slug") or ""),
        price=decimal_or_zero(data.get("price")),
        size=decimal_or_zero(data.get("size")),
        side=TradeSide.SELL if data.get("side") == "sell" else TradeSide.BUY,
        timestamp=parse_datetime(data.get("timestamp")) or utc_now(),
    )
