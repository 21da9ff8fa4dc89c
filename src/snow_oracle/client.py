"""
Snow Oracle REST API client.

Typed access to the aggregation service:
- Markets: listing with filters/sorting/pagination, single market lookup
- User data: watchlist, positions, predictions, alerts
- Analytics: cross-venue spreads, leaderboard
- AI: market analysis, portfolio insights

Every method is one call through RestClient.request(); errors propagate
unchanged (TimeoutError, ApiError, NetworkError).
"""

from enum import Enum
from typing import Any
from urllib.parse import quote

import aiohttp

from snow_oracle.base.rest_client import RestClient, RestConfig
from snow_oracle.base.types import (
    Alert,
    AlertCondition,
    AlertType,
    LeaderboardEntry,
    Market,
    MarketAnalysis,
    MarketCategory,
    MarketSortBy,
    MarketSource,
    PortfolioInsight,
    Position,
    Prediction,
    PredictionChoice,
    SortOrder,
    SpreadOpportunity,
    WatchlistItem,
)
from snow_oracle.config import get_config
from snow_oracle.parser import (
    parse_alert,
    parse_leaderboard_entry,
    parse_list,
    parse_market,
    parse_market_analysis,
    parse_portfolio_insight,
    parse_position,
    parse_prediction,
    parse_spread,
    parse_watchlist_item,
)


def _enum_value(value: Enum | str) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def _path_segment(value: Any) -> str:
    """Percent-encode a value for use as a single path segment."""
    return quote(str(value), safe="!~*'()")


class SnowOracleClient:
    """
    Snow Oracle REST API client.

    Example:
        ```python
        async with SnowOracleClient() as client:
            markets = await client.get_markets(category=MarketCategory.CRYPTO, limit=10)
            for market in markets:
                print(f"{market.title}: {market.probability:.0%}")
        ```
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        config: RestConfig | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API base URL (uses default if not specified)
            timeout: Request timeout in seconds
            headers: Extra headers sent with every request
            config: Full config; takes precedence over the arguments above
            session: Existing aiohttp session to reuse (not closed by close())
        """
        if config is None:
            overrides: dict[str, Any] = {"headers": dict(headers or {})}
            if base_url:
                overrides["base_url"] = base_url
            if timeout is not None:
                overrides["timeout"] = timeout
            config = RestConfig(**overrides)

        self._rest = RestClient(config, session=session)

    @classmethod
    def from_env(cls, headers: dict[str, str] | None = None) -> "SnowOracleClient":
        """Create a client configured from SNOW_ORACLE_* environment variables."""
        return cls(config=get_config().to_rest_config(headers))

    @property
    def config(self) -> RestConfig:
        """Active REST configuration."""
        return self._rest.config

    @property
    def rest(self) -> RestClient:
        """Underlying request gateway."""
        return self._rest

    # === Lifecycle ===

    async def init(self) -> None:
        """Open the HTTP session (done lazily on first request otherwise)."""
        await self._rest.init()

    async def close(self) -> None:
        """Close the HTTP session."""
        await self._rest.close()

    async def __aenter__(self) -> "SnowOracleClient":
        await self.init()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # === Markets ===

    async def get_markets(
        self,
        category: MarketCategory | str | None = None,
        source: MarketSource | str | None = None,
        search: str | None = None,
        sort_by: MarketSortBy | str | None = None,
        sort_order: SortOrder | str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Market]:
        """
        List markets.

        Args:
            category: Filter by category
            source: Filter by upstream venue
            search: Free-text search
            sort_by: Sort key
            sort_order: "asc" or "desc"
            limit: Page size
            offset: Page offset

        Returns:
            List of markets (unset or empty filters are not sent)
        """
        params: dict[str, str] = {}
        if category:
            params["category"] = _enum_value(category)
        if source:
            params["source"] = _enum_value(source)
        if search:
            params["search"] = search
        if sort_by:
            params["sortBy"] = _enum_value(sort_by)
        if sort_order:
            params["sortOrder"] = _enum_value(sort_order)
        if limit:
            params["limit"] = str(limit)
        if offset:
            params["offset"] = str(offset)

        data = await self._rest.get("/api/markets", params=params)
        return parse_list(data, parse_market)

    async def get_market(self, market_id: str) -> Market:
        """Get a single market by id."""
        data = await self._rest.get(f"/api/markets/{_path_segment(market_id)}")
        return parse_market(data or {})

    # === Watchlist ===

    async def get_watchlist(self) -> list[WatchlistItem]:
        """Get the watchlist."""
        data = await self._rest.get("/api/watchlist")
        return parse_list(data, parse_watchlist_item)

    async def add_to_watchlist(self, market_id: str) -> WatchlistItem:
        """Add a market to the watchlist."""
        data = await self._rest.post("/api/watchlist", data={"marketId": market_id})
        return parse_watchlist_item(data or {})

    async def remove_from_watchlist(self, market_id: str) -> None:
        """Remove a market from the watchlist."""
        await self._rest.delete(f"/api/watchlist/{_path_segment(market_id)}")

    # === Positions ===

    async def get_positions(self) -> list[Position]:
        """Get tracked positions."""
        data = await self._rest.get("/api/positions")
        return parse_list(data, parse_position)

    async def create_position(
        self,
        market_id: str,
        outcome: str,
        shares: float,
        avg_price: float,
    ) -> Position:
        """
        Record a position.

        Args:
            market_id: Market id
            outcome: Outcome name (e.g. "Yes")
            shares: Number of shares
            avg_price: Average entry price
        """
        payload = {
            "marketId": market_id,
            "outcome": outcome,
            "shares": shares,
            "avgPrice": avg_price,
        }
        data = await self._rest.post("/api/positions", data=payload)
        return parse_position(data or {})

    # === Predictions ===

    async def get_predictions(self, wallet_address: str | None = None) -> list[Prediction]:
        """Get predictions, optionally only those of one wallet."""
        params = {"walletAddress": wallet_address} if wallet_address else None
        data = await self._rest.get("/api/predictions", params=params)
        return parse_list(data, parse_prediction)

    async def get_market_predictions(self, market_id: str) -> list[Prediction]:
        """Get all predictions on a market."""
        data = await self._rest.get(f"/api/predictions/market/{_path_segment(market_id)}")
        return parse_list(data, parse_prediction)

    async def create_prediction(
        self,
        market_id: str,
        wallet_address: str,
        prediction: PredictionChoice | str,
        confidence: float | None = None,
    ) -> Prediction:
        """
        Submit a prediction.

        Args:
            market_id: Market id
            wallet_address: Predicting wallet
            prediction: "yes" or "no"
            confidence: Optional confidence score
        """
        payload: dict[str, Any] = {
            "marketId": market_id,
            "walletAddress": wallet_address,
            "prediction": _enum_value(prediction),
        }
        if confidence is not None:
            payload["confidence"] = confidence

        data = await self._rest.post("/api/predictions", data=payload)
        return parse_prediction(data or {})

    # === Alerts ===

    async def get_alerts(self) -> list[Alert]:
        """Get alerts."""
        data = await self._rest.get("/api/alerts")
        return parse_list(data, parse_alert)

    async def create_alert(
        self,
        market_id: str,
        alert_type: AlertType | str,
        condition: AlertCondition | str,
        value: float,
    ) -> Alert:
        """
        Create an alert.

        Args:
            market_id: Market id
            alert_type: "price", "volume" or "resolution"
            condition: "above", "below" or "equals"
            value: Threshold
        """
        payload = {
            "marketId": market_id,
            "type": _enum_value(alert_type),
            "condition": _enum_value(condition),
            "value": value,
        }
        data = await self._rest.post("/api/alerts", data=payload)
        return parse_alert(data or {})

    async def delete_alert(self, alert_id: int) -> None:
        """Delete an alert."""
        await self._rest.delete(f"/api/alerts/{_path_segment(alert_id)}")

    # === Analytics ===

    async def get_spreads(self) -> list[SpreadOpportunity]:
        """Get Polymarket/Kalshi spread opportunities."""
        data = await self._rest.get("/api/spreads")
        return parse_list(data, parse_spread)

    async def get_leaderboard(self) -> list[LeaderboardEntry]:
        """Get the prediction leaderboard."""
        data = await self._rest.get("/api/leaderboard")
        return parse_list(data, parse_leaderboard_entry)

    # === AI ===

    async def get_market_analysis(self, market_id: str) -> MarketAnalysis:
        """Request an AI analysis of a market."""
        data = await self._rest.post("/api/ai/market-analysis", data={"marketId": market_id})
        return parse_market_analysis(data or {})

    async def get_portfolio_insights(self, wallet_address: str) -> PortfolioInsight:
        """Request AI insights for a wallet's portfolio."""
        data = await self._rest.post(
            "/api/ai/portfolio-insights", data={"walletAddress": wallet_address}
        )
        return parse_portfolio_insight(data or {})
