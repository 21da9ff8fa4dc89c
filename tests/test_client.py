"""
Tests for SnowOracleClient endpoint mapping and response parsing.

Run with: pytest tests/test_client.py -v
"""

from decimal import Decimal

import pytest

from snow_oracle import (
    AlertCondition,
    AlertType,
    ApiError,
    MarketCategory,
    MarketSortBy,
    MarketSource,
    PredictionChoice,
    RiskLevel,
    Sentiment,
    SnowOracleClient,
    SortOrder,
    SpreadDirection,
)

MARKET = {
    "id": "btc-100k",
    "slug": "will-btc-hit-100k",
    "title": "Will BTC hit $100k?",
    "description": "Resolves YES if BTC trades above $100k.",
    "source": "polymarket",
    "category": "crypto",
    "probability": 0.62,
    "volume": "1250000.5",
    "liquidity": 80000,
    "endDate": "2025-12-31T00:00:00Z",
    "imageUrl": "https://img.test/btc.png",
    "outcomes": [
        {"name": "Yes", "probability": 0.62, "price": 0.62},
        {"name": "No", "probability": 0.38, "price": 0.38},
    ],
    "lastUpdated": "2024-11-05T12:00:00Z",
}


class TestMarkets:
    """Tests for market listing and lookup."""

    @pytest.mark.asyncio
    async def test_get_markets_maps_query(self, api):
        api.add("GET", "/api/markets", [MARKET])

        async with SnowOracleClient(base_url=api.base_url) as client:
            markets = await client.get_markets(
                category=MarketCategory.CRYPTO,
                source="kalshi",
                sort_by=MarketSortBy.END_DATE,
                sort_order=SortOrder.DESC,
                limit=10,
            )

        assert api.last["query"] == {
            "category": "crypto",
            "source": "kalshi",
            "sortBy": "endDate",
            "sortOrder": "desc",
            "limit": "10",
        }

        assert len(markets) == 1
        market = markets[0]
        assert market.slug == "will-btc-hit-100k"
        assert market.source == MarketSource.POLYMARKET
        assert market.category == MarketCategory.CRYPTO
        assert market.probability == Decimal("0.62")
        assert market.volume == Decimal("1250000.5")
        assert market.end_date.year == 2025
        assert [o.name for o in market.outcomes] == ["Yes", "No"]
        assert market.raw["imageUrl"] == "https://img.test/btc.png"

    @pytest.mark.asyncio
    async def test_get_markets_omits_empty_filters(self, api):
        api.add("GET", "/api/markets", [])

        async with SnowOracleClient(base_url=api.base_url) as client:
            markets = await client.get_markets(search="", limit=0, offset=0)

        assert markets == []
        assert api.last["query"] == {}

    @pytest.mark.asyncio
    async def test_get_market_encodes_id(self, api):
        api.add("GET", "/api/markets/btc%20100k%2F2025", MARKET)

        async with SnowOracleClient(base_url=api.base_url) as client:
            market = await client.get_market("btc 100k/2025")

        assert api.last["path"] == "/api/markets/btc%20100k%2F2025"
        assert market.id == "btc-100k"

    @pytest.mark.asyncio
    async def test_unknown_market_raises_api_error(self, api):
        api.add("GET", "/api/markets/nope", status=404, text='{"error":"Market not found"}')

        async with SnowOracleClient(base_url=api.base_url) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.get_market("nope")

        assert exc_info.value.status == 404


class TestUserData:
    """Tests for watchlist, positions, predictions and alerts."""

    @pytest.mark.asyncio
    async def test_watchlist_add_and_remove(self, api):
        api.add("POST", "/api/watchlist", {"id": 7, "marketId": "btc-100k", "addedAt": "2024-11-05T12:00:00Z"})
        api.add("DELETE", "/api/watchlist/btc-100k")

        async with SnowOracleClient(base_url=api.base_url) as client:
            item = await client.add_to_watchlist("btc-100k")
            assert api.last["json"] == {"marketId": "btc-100k"}

            result = await client.remove_from_watchlist("btc-100k")

        assert item.id == 7
        assert item.market_id == "btc-100k"
        assert result is None
        assert api.last["method"] == "DELETE"

    @pytest.mark.asyncio
    async def test_get_watchlist(self, api):
        api.add("GET", "/api/watchlist", [{"id": 1, "marketId": "a"}, {"id": 2, "marketId": "b"}])

        async with SnowOracleClient(base_url=api.base_url) as client:
            items = await client.get_watchlist()

        assert [item.market_id for item in items] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_positions(self, api):
        position = {
            "id": 3,
            "marketId": "btc-100k",
            "outcome": "Yes",
            "shares": 100,
            "avgPrice": "0.40",
            "currentPrice": "0.62",
            "pnl": 22,
            "pnlPercent": 55,
        }
        api.add("GET", "/api/positions", [position])
        api.add("POST", "/api/positions", position)

        async with SnowOracleClient(base_url=api.base_url) as client:
            positions = await client.get_positions()
            created = await client.create_position("btc-100k", "Yes", 100, 0.4)

        assert api.last["json"] == {
            "marketId": "btc-100k",
            "outcome": "Yes",
            "shares": 100,
            "avgPrice": 0.4,
        }
        assert positions[0].cost_basis == Decimal("40.00")
        assert positions[0].market_value == Decimal("62.00")
        assert created.pnl == Decimal("22")

    @pytest.mark.asyncio
    async def test_predictions_filtered_by_wallet(self, api):
        api.add("GET", "/api/predictions", [{"id": 1, "prediction": "no", "walletAddress": "0xabc"}])

        async with SnowOracleClient(base_url=api.base_url) as client:
            predictions = await client.get_predictions(wallet_address="0xabc")

        assert api.last["query"] == {"walletAddress": "0xabc"}
        assert predictions[0].prediction == PredictionChoice.NO

    @pytest.mark.asyncio
    async def test_predictions_without_wallet_sends_no_query(self, api):
        api.add("GET", "/api/predictions", [])

        async with SnowOracleClient(base_url=api.base_url) as client:
            await client.get_predictions()

        assert api.last["query"] == {}

    @pytest.mark.asyncio
    async def test_market_predictions(self, api):
        api.add("GET", "/api/predictions/market/btc-100k", [{"id": 9, "marketId": "btc-100k"}])

        async with SnowOracleClient(base_url=api.base_url) as client:
            predictions = await client.get_market_predictions("btc-100k")

        assert predictions[0].id == 9

    @pytest.mark.asyncio
    async def test_create_prediction(self, api):
        api.add("POST", "/api/predictions", {"id": 4, "prediction": "yes", "confidence": 80})

        async with SnowOracleClient(base_url=api.base_url) as client:
            prediction = await client.create_prediction(
                "btc-100k", "0xabc", PredictionChoice.YES, confidence=80
            )

        assert api.last["json"] == {
            "marketId": "btc-100k",
            "walletAddress": "0xabc",
            "prediction": "yes",
            "confidence": 80,
        }
        assert prediction.confidence == Decimal("80")

    @pytest.mark.asyncio
    async def test_create_prediction_omits_missing_confidence(self, api):
        api.add("POST", "/api/predictions", {"id": 5})

        async with SnowOracleClient(base_url=api.base_url) as client:
            await client.create_prediction("btc-100k", "0xabc", "no")

        assert "confidence" not in api.last["json"]

    @pytest.mark.asyncio
    async def test_alerts(self, api):
        alert = {
            "id": 12,
            "marketId": "btc-100k",
            "type": "price",
            "condition": "below",
            "value": 0.5,
            "isActive": True,
        }
        api.add("GET", "/api/alerts", [alert])
        api.add("POST", "/api/alerts", alert)
        api.add("DELETE", "/api/alerts/12")

        async with SnowOracleClient(base_url=api.base_url) as client:
            alerts = await client.get_alerts()
            created = await client.create_alert(
                "btc-100k", AlertType.PRICE, AlertCondition.BELOW, 0.5
            )
            assert api.last["json"] == {
                "marketId": "btc-100k",
                "type": "price",
                "condition": "below",
                "value": 0.5,
            }
            await client.delete_alert(12)

        assert alerts[0].is_active is True
        assert created.condition == AlertCondition.BELOW
        assert api.last["path"] == "/api/alerts/12"


class TestAnalytics:
    """Tests for spreads, leaderboard and AI endpoints."""

    @pytest.mark.asyncio
    async def test_spreads(self, api):
        api.add(
            "GET",
            "/api/spreads",
            [
                {
                    "marketId": "btc-100k",
                    "polymarketPrice": 0.62,
                    "kalshiPrice": 0.58,
                    "spread": 0.04,
                    "spreadPercent": 6.9,
                    "direction": "buy_kalshi_sell_poly",
                }
            ],
        )

        async with SnowOracleClient(base_url=api.base_url) as client:
            spreads = await client.get_spreads()

        assert spreads[0].direction == SpreadDirection.BUY_KALSHI_SELL_POLY
        assert spreads[0].spread == Decimal("0.04")

    @pytest.mark.asyncio
    async def test_leaderboard(self, api):
        api.add(
            "GET",
            "/api/leaderboard",
            [{"rank": 1, "walletAddress": "0xabc", "totalPredictions": 40, "correctPredictions": 30}],
        )

        async with SnowOracleClient(base_url=api.base_url) as client:
            entries = await client.get_leaderboard()

        assert entries[0].rank == 1
        assert entries[0].correct_predictions == 30

    @pytest.mark.asyncio
    async def test_market_analysis(self, api):
        api.add(
            "POST",
            "/api/ai/market-analysis",
            {
                "marketId": "btc-100k",
                "summary": "Momentum is strong.",
                "sentiment": "bullish",
                "keyFactors": ["ETF inflows", "Halving"],
                "riskLevel": "high",
                "confidence": 72,
            },
        )

        async with SnowOracleClient(base_url=api.base_url) as client:
            analysis = await client.get_market_analysis("btc-100k")

        assert api.last["json"] == {"marketId": "btc-100k"}
        assert analysis.sentiment == Sentiment.BULLISH
        assert analysis.risk_level == RiskLevel.HIGH
        assert analysis.key_factors == ["ETF inflows", "Halving"]

    @pytest.mark.asyncio
    async def test_portfolio_insights(self, api):
        api.add(
            "POST",
            "/api/ai/portfolio-insights",
            {"totalValue": 1500, "totalPnL": -25.5, "recommendations": ["Diversify"]},
        )

        async with SnowOracleClient(base_url=api.base_url) as client:
            insight = await client.get_portfolio_insights("0xabc")

        assert api.last["json"] == {"walletAddress": "0xabc"}
        assert insight.total_pnl == Decimal("-25.5")
        assert insight.recommendations == ["Diversify"]


class TestClientConfig:
    """Tests for client construction."""

    def test_arguments_build_rest_config(self):
        client = SnowOracleClient(
            base_url="http://localhost:5000/", timeout=5, headers={"X-Api-Key": "k"}
        )

        assert client.config.base_url == "http://localhost:5000"
        assert client.config.timeout == 5
        assert client.rest.default_headers["X-Api-Key"] == "k"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SNOW_ORACLE_BASE_URL", "http://oracle.local")
        monkeypatch.setenv("SNOW_ORACLE_TIMEOUT", "12.5")

        client = SnowOracleClient.from_env()

        assert client.config.base_url == "http://oracle.local"
        assert client.config.timeout == 12.5
