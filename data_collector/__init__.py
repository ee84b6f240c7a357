from .base import DataSource, default_sources
from .crypto_source import CryptoSource
from .stock_source import StockSource
from .market_source import MarketSummarySource
from .news_source import NewsSource
from .schemas import (
    CryptoPrice,
    StockPrice,
    StockWatchlist,
    MarketSummary,
    HistoricalDataPoint,
    NewsItem,
    NewsDigest,
)

__all__ = [
    "DataSource",
    "default_sources",
    "CryptoSource",
    "StockSource",
    "MarketSummarySource",
    "NewsSource",
    "CryptoPrice",
    "StockPrice",
    "StockWatchlist",
    "MarketSummary",
    "HistoricalDataPoint",
    "NewsItem",
    "NewsDigest",
]
