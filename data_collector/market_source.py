"""Simulated market-wide summary."""

from typing import Any, Mapping

from .base import DataSource
from .schemas import MarketSummary
from utils.helpers import utc_now


class MarketSummarySource(DataSource):
    """Market summary plugin. Takes no parameters."""

    plugin_id = "market_summary"

    TOP_GAINERS = ["SOL", "AVAX", "DOT", "LINK", "ADA"]
    TOP_LOSERS = ["DOGE", "SHIB", "LTC", "UNI", "MATIC"]

    async def fetch(self, parameters: Mapping[str, Any]) -> MarketSummary:
        return await self.get_summary()

    async def get_summary(self) -> MarketSummary:
        return MarketSummary(
            total_market_cap=round(2.62 + self.rng.uniform(-0.05, 0.05), 3),
            btc_dominance=round(51.3 + self.rng.uniform(-0.5, 0.5), 2),
            top_gainers=list(self.TOP_GAINERS),
            top_losers=list(self.TOP_LOSERS),
            market_sentiment="Bullish" if self.rng.random() > 0.5 else "Neutral",
            last_updated=utc_now(),
        )
