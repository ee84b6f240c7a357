"""Simulated cryptocurrency quotes and price history."""

from datetime import timedelta
from typing import Any, Dict, List, Mapping, Tuple

from loguru import logger

from .base import DataSource
from .schemas import CryptoPrice, HistoricalDataPoint
from utils.errors import InvalidInputError
from utils.helpers import utc_now


class CryptoSource(DataSource):
    """Crypto price plugin backed by baseline quotes plus random noise."""

    plugin_id = "crypto"

    MAX_HISTORY_DAYS = 365

    # symbol -> (price USD, 24h change %, 24h volume $B, market cap $T)
    BASELINES: Dict[str, Tuple[float, float, float, float]] = {
        "BTC": (68223.45, 2.7, 42.3, 1.34),
        "ETH": (3571.28, -0.8, 19.6, 0.43),
        "BNB": (589.32, 1.3, 2.1, 0.09),
        "SOL": (149.76, 5.2, 3.8, 0.06),
    }

    # symbol -> (starting price, starting volume) for history walks
    HISTORY_BASELINES: Dict[str, Tuple[float, float]] = {
        "BTC": (65000.0, 40.0),
        "ETH": (3400.0, 18.0),
    }

    async def fetch(self, parameters: Mapping[str, Any]) -> CryptoPrice:
        """Fetch a quote; include daily history when ``days`` is given."""
        symbol = self._require_symbol(parameters, default="BTC")
        quote = await self.get_price(symbol)

        days = parameters.get("days")
        if days:
            quote.history = await self.get_history(symbol, int(days))

        return quote

    async def get_price(self, symbol: str) -> CryptoPrice:
        """Current quote for a symbol. Unknown symbols get random values."""
        symbol = self._require_symbol({"symbol": symbol})

        if symbol in self.BASELINES:
            price, change, volume, market_cap = self.BASELINES[symbol]
        else:
            price = 100 + self.rng.random() * 1000
            change = -5 + self.rng.random() * 10
            volume = self.rng.random() * 10
            market_cap = self.rng.random() * 0.5

        price = self._jitter(price, 0.001)

        logger.debug(f"Crypto quote {symbol}: {price:.2f}")

        return CryptoPrice(
            symbol=symbol,
            price=round(price, 2),
            change_24h=round(change, 2),
            volume_24h=round(volume, 2),
            market_cap=round(market_cap, 2),
            last_updated=utc_now(),
        )

    async def get_history(self, symbol: str, days: int) -> List[HistoricalDataPoint]:
        """
        Daily history ending today, oldest first.

        Produces ``days + 1`` points: each day moves price by up to +/-3%
        and volume by up to +/-5%.
        """
        symbol = self._require_symbol({"symbol": symbol})
        if days < 1 or days > self.MAX_HISTORY_DAYS:
            raise InvalidInputError(f"days must be between 1 and {self.MAX_HISTORY_DAYS}")

        price, volume = self.HISTORY_BASELINES.get(symbol, (1000.0, 5.0))
        today = utc_now().date()

        history = []
        for offset in range(days, -1, -1):
            price *= 1 + self.rng.uniform(-0.03, 0.03)
            volume *= 1 + self.rng.uniform(-0.05, 0.05)
            history.append(
                HistoricalDataPoint(
                    date=(today - timedelta(days=offset)).isoformat(),
                    price=round(price, 2),
                    volume=round(volume, 2),
                )
            )

        return history
