"""
Basic usage example for the snow-oracle SDK.

This example demonstrates:
1. Listing and filtering aggregated markets
2. Reading analytics (spreads, leaderboard)
3. Managing the watchlist and alerts
4. Streaming live trades for a market
"""

import asyncio

from snow_oracle import (
    ApiError,
    MarketCategory,
    MarketSortBy,
    SnowOracleClient,
    SnowOracleWebSocket,
    SortOrder,
    TradeEvent,
    setup_logger,
)

logger = setup_logger(level="INFO", gateway_level="WARNING")


async def main() -> None:
    """Main example function."""

    # Reads SNOW_ORACLE_* from the environment / .env
    async with SnowOracleClient.from_env() as client:
        markets = await demo_market_data(client)
        await demo_analytics(client)
        await demo_user_data(client, markets[0].id if markets else None)

    if markets:
        await demo_trade_feed(markets[0].slug)


async def demo_market_data(client: SnowOracleClient) -> list:
    """Demonstrate market data operations."""
    print("\n=== Market Data ===")

    markets = await client.get_markets(
        category=MarketCategory.CRYPTO,
        sort_by=MarketSortBy.VOLUME,
        sort_order=SortOrder.DESC,
        limit=5,
    )
    print(f"Loaded {len(markets)} crypto markets")

    for market in markets:
        print(f"\n{market.title}")
        print(f"  ID: {market.id}")
        print(f"  Source: {market.source.value}")
        print(f"  Probability: {market.probability:.1%}")
        print(f"  Volume: ${market.volume:,.0f}")
        print(f"  End date: {market.end_date}")

    return markets


async def demo_analytics(client: SnowOracleClient) -> None:
    """Demonstrate spread and leaderboard queries."""
    print("\n=== Analytics ===")

    spreads = await client.get_spreads()
    print(f"\n{len(spreads)} spread opportunities")
    for spread in spreads[:3]:
        print(f"  {spread.title}: {spread.spread_percent}% ({spread.direction.value})")

    leaderboard = await client.get_leaderboard()
    print("\nTop predictors:")
    for entry in leaderboard[:5]:
        print(f"  #{entry.rank} {entry.display_name or entry.wallet_address}: {entry.accuracy}%")


async def demo_user_data(client: SnowOracleClient, market_id: str | None) -> None:
    """Demonstrate watchlist and alert operations."""
    print("\n=== Watchlist & Alerts ===")

    if market_id is None:
        print("No market to work with")
        return

    try:
        item = await client.add_to_watchlist(market_id)
        print(f"Watching {item.market_id}")

        alert = await client.create_alert(market_id, "price", "above", 0.75)
        print(f"Alert {alert.id}: {alert.type.value} {alert.condition.value} {alert.value}")

        await client.delete_alert(alert.id)
        await client.remove_from_watchlist(market_id)
    except ApiError as e:
        print(f"API rejected the request: {e}")


async def demo_trade_feed(slug: str, seconds: float = 30.0) -> None:
    """Stream trades for one market."""
    print(f"\n=== Live Trades: {slug} ===")

    feed = SnowOracleWebSocket.from_env()

    def on_trade(trade: TradeEvent) -> None:
        print(f"  {trade.side.value.upper()} {trade.size} @ {trade.price} (${trade.notional:.2f})")

    feed.on_connection_change(lambda connected: logger.info(f"Feed connected: {connected}"))
    unsubscribe = await feed.subscribe(slug, on_trade)

    async with feed:
        await asyncio.sleep(seconds)
        await unsubscribe()


if __name__ == "__main__":
    asyncio.run(main())
