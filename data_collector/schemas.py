"""Data schemas for plugin records using Pydantic."""

from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime

from utils.helpers import utc_now


Sentiment = Literal["positive", "negative", "neutral"]


class HistoricalDataPoint(BaseModel):
    """Daily historical price point."""
    date: str
    price: float
    volume: float


class CryptoPrice(BaseModel):
    """Current cryptocurrency quote."""
    symbol: str
    price: float
    change_24h: float = Field(description="24h change in percent")
    volume_24h: float = Field(description="24h volume in billions USD")
    market_cap: float = Field(description="Market cap in trillions USD")
    history: List[HistoricalDataPoint] = []
    last_updated: datetime = Field(default_factory=utc_now)


class StockPrice(BaseModel):
    """Current equity quote."""
    symbol: str
    price: float
    change: float
    change_percent: float
    volume: float = Field(description="Volume in millions of shares")
    last_updated: datetime = Field(default_factory=utc_now)


class StockWatchlist(BaseModel):
    """Quotes for the tracked tickers, returned when no symbol was asked for."""
    quotes: List[StockPrice] = []
    last_updated: datetime = Field(default_factory=utc_now)


class MarketSummary(BaseModel):
    """Broad crypto market snapshot."""
    total_market_cap: float = Field(description="Total market cap in trillions USD")
    btc_dominance: float
    top_gainers: List[str] = []
    top_losers: List[str] = []
    market_sentiment: str = "Neutral"
    last_updated: datetime = Field(default_factory=utc_now)


class NewsItem(BaseModel):
    """Single news article."""
    title: str
    summary: str
    url: str
    source: str
    published_at: datetime
    category: str
    sentiment: Optional[Sentiment] = None


class NewsDigest(BaseModel):
    """News articles returned for one topic, search or sentiment filter."""
    topic: str
    articles: List[NewsItem] = []
    query: Optional[str] = None
    sentiment: Optional[Sentiment] = None
    last_updated: datetime = Field(default_factory=utc_now)

    @property
    def total_count(self) -> int:
        return len(self.articles)
