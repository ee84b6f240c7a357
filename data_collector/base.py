"""Base class for plugin data sources."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

import numpy as np
from pydantic import BaseModel

from config import settings
from utils.errors import InvalidSymbolError
from utils.validators import validate_symbol


class DataSource(ABC):
    """
    A provider for one plugin domain.

    Implementations return a pydantic record carrying ``last_updated`` and
    signal failures with ``SourceUnavailableError`` or ``InvalidSymbolError``.
    """

    plugin_id: str = ""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng(settings.MOCK_DATA_SEED)

    @abstractmethod
    async def fetch(self, parameters: Mapping[str, Any]) -> BaseModel:
        """
        Fetch the current record for this domain.

        Args:
            parameters: Parameters routed to this plugin (symbol, days, topic...)

        Returns:
            Domain record with a ``last_updated`` timestamp
        """
        pass

    def _require_symbol(self, parameters: Mapping[str, Any], default: Optional[str] = None) -> str:
        """Read and normalize the ``symbol`` parameter."""
        raw = parameters.get("symbol") or default
        is_valid, symbol, error = validate_symbol(str(raw) if raw is not None else "")
        if not is_valid:
            raise InvalidSymbolError(f"{self.plugin_id}: {error}")
        return symbol

    def _jitter(self, value: float, spread: float) -> float:
        """Scale value by a uniform factor in [1 - spread/2, 1 + spread/2]."""
        return value * (1 + self.rng.uniform(-spread / 2, spread / 2))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(plugin_id={self.plugin_id!r})>"


def default_sources(rng: Optional[np.random.Generator] = None) -> Dict[str, DataSource]:
    """Build one source per plugin domain, keyed by plugin id."""
    from .crypto_source import CryptoSource
    from .stock_source import StockSource
    from .market_source import MarketSummarySource
    from .news_source import NewsSource

    rng = rng if rng is not None else np.random.default_rng(settings.MOCK_DATA_SEED)
    sources = [
        CryptoSource(rng=rng),
        StockSource(rng=rng),
        MarketSummarySource(rng=rng),
        NewsSource(rng=rng),
    ]
    return {source.plugin_id: source for source in sources}
