"""Simulated equity quotes."""

from typing import Any, Dict, Mapping, Tuple, Union

from loguru import logger

from .base import DataSource
from .schemas import StockPrice, StockWatchlist
from utils.helpers import utc_now


class StockSource(DataSource):
    """Stock price plugin backed by baseline quotes plus random noise."""

    plugin_id = "stock"

    # symbol -> (price USD, change %, volume M)
    BASELINES: Dict[str, Tuple[float, float, float]] = {
        "AAPL": (188.62, 1.2, 53.4),
        "MSFT": (412.65, -0.5, 21.3),
        "GOOGL": (165.10, 0.8, 18.7),
        "AMZN": (178.15, 1.9, 32.1),
    }

    async def fetch(self, parameters: Mapping[str, Any]) -> Union[StockPrice, StockWatchlist]:
        """Quote for ``symbol``, or the whole watchlist when no symbol is given."""
        if not parameters.get("symbol"):
            return await self.get_watchlist()
        symbol = self._require_symbol(parameters)
        return await self.get_price(symbol)

    async def get_price(self, symbol: str) -> StockPrice:
        """Current quote for a symbol. Unknown symbols get random values."""
        symbol = self._require_symbol({"symbol": symbol})

        if symbol in self.BASELINES:
            price, change_percent, volume = self.BASELINES[symbol]
        else:
            price = 50 + self.rng.random() * 200
            change_percent = -2 + self.rng.random() * 4
            volume = self.rng.random() * 30

        price = self._jitter(price, 0.002)

        logger.debug(f"Stock quote {symbol}: {price:.2f}")

        return StockPrice(
            symbol=symbol,
            price=round(price, 2),
            change=round(price * change_percent / 100, 2),
            change_percent=round(change_percent, 2),
            volume=round(volume, 2),
            last_updated=utc_now(),
        )

    async def get_watchlist(self) -> StockWatchlist:
        quotes = [await self.get_price(symbol) for symbol in self.BASELINES]
        return StockWatchlist(quotes=quotes, last_updated=utc_now())
