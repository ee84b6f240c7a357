"""Simulated financial and crypto news feed."""

from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional

from loguru import logger

from .base import DataSource
from .schemas import NewsDigest, NewsItem
from config import settings
from utils.errors import InvalidInputError
from utils.helpers import slugify, utc_now
from utils.validators import validate_limit, validate_sentiment


CRYPTO_NEWS: List[Dict[str, str]] = [
    {
        "title": "Bitcoin Breaks $70,000 Resistance Level",
        "summary": "Bitcoin has surged above $70,000 for the first time since its last all-time high, signaling strong bullish momentum in the crypto market.",
        "source": "CryptoNews",
        "category": "cryptocurrency",
        "sentiment": "positive",
    },
    {
        "title": "Ethereum Upgrade Postponed After Security Vulnerability Found",
        "summary": "The highly anticipated Ethereum network upgrade has been delayed after researchers discovered a potential security flaw in the implementation.",
        "source": "BlockchainDaily",
        "category": "cryptocurrency",
        "sentiment": "negative",
    },
    {
        "title": "Major Bank Announces Crypto Custody Service for Institutional Clients",
        "summary": "One of the world's largest financial institutions has unveiled plans to offer cryptocurrency custody services to its institutional clients, marking another milestone in crypto adoption.",
        "source": "FinanceToday",
        "category": "cryptocurrency",
        "sentiment": "positive",
    },
    {
        "title": "New Regulatory Framework for Cryptocurrencies Proposed",
        "summary": "Lawmakers have introduced a comprehensive bill aimed at providing regulatory clarity for the cryptocurrency industry, addressing issues from taxation to stablecoin oversight.",
        "source": "CryptoInsider",
        "category": "regulation",
        "sentiment": "neutral",
    },
    {
        "title": "NFT Market Shows Signs of Recovery After Year-Long Slump",
        "summary": "The non-fungible token market is showing renewed activity after a prolonged downturn, with trading volumes increasing across major platforms.",
        "source": "ArtTechWeekly",
        "category": "nft",
        "sentiment": "positive",
    },
]

FINANCE_NEWS: List[Dict[str, str]] = [
    {
        "title": "Federal Reserve Signals Potential Rate Cut",
        "summary": "The Federal Reserve has indicated it may consider reducing interest rates in the coming months as inflation shows signs of cooling.",
        "source": "EconomicTimes",
        "category": "finance",
        "sentiment": "positive",
    },
    {
        "title": "Tech Stocks Rally on Strong Earnings Reports",
        "summary": "Technology sector shares surged today following better-than-expected quarterly earnings from several major companies.",
        "source": "MarketWatch",
        "category": "stocks",
        "sentiment": "positive",
    },
    {
        "title": "Oil Prices Drop Amid Concerns Over Demand",
        "summary": "Crude oil prices have fallen sharply as market analysts express concerns about future demand in the face of economic uncertainty.",
        "source": "EnergyDaily",
        "category": "commodities",
        "sentiment": "negative",
    },
    {
        "title": "Housing Market Cools as Mortgage Rates Remain Elevated",
        "summary": "The residential real estate market continues to show signs of slowing as higher mortgage rates dampen buyer demand.",
        "source": "PropertyInsider",
        "category": "real-estate",
        "sentiment": "negative",
    },
    {
        "title": "Major Merger Announced in Healthcare Sector",
        "summary": "Two leading healthcare companies have announced plans to merge in a deal valued at over $30 billion, pending regulatory approval.",
        "source": "BusinessWeek",
        "category": "mergers",
        "sentiment": "neutral",
    },
]

TRENDING_TOPICS = [
    "Bitcoin",
    "Ethereum",
    "Federal Reserve",
    "Inflation",
    "Tech stocks",
    "AI",
    "Oil prices",
    "Interest rates",
    "NFTs",
    "DeFi",
]

CRYPTO_TOPIC_WORDS = ("crypto", "bitcoin", "ethereum")


class NewsSource(DataSource):
    """News plugin: latest headlines, keyword search and sentiment filtering."""

    plugin_id = "news"

    async def fetch(self, parameters: Mapping[str, Any]) -> NewsDigest:
        """
        Route to search, sentiment filter or latest headlines.

        Args:
            parameters: ``topic``, ``query``, ``sentiment`` and ``limit``, all optional
        """
        topic = parameters.get("topic") or ""
        limit = int(parameters.get("limit") or settings.NEWS_DEFAULT_LIMIT)

        if parameters.get("query"):
            return await self.search_news(str(parameters["query"]), limit)
        if parameters.get("sentiment"):
            return await self.get_news_by_sentiment(topic, str(parameters["sentiment"]), limit)
        return await self.get_latest_news(topic, limit)

    async def get_latest_news(self, topic: str, limit: Optional[int] = None) -> NewsDigest:
        """Latest headlines. Crypto topics read the crypto feed, anything else the finance feed."""
        limit = self._check_limit(limit)
        articles = self._build_articles(self._select_feed(topic), limit)
        logger.debug(f"News for topic {topic!r}: {len(articles)} articles")
        return NewsDigest(topic=topic, articles=articles, last_updated=utc_now())

    async def search_news(self, query: str, limit: Optional[int] = None) -> NewsDigest:
        """Case-insensitive keyword search over titles and summaries."""
        if not query or not query.strip():
            raise InvalidInputError("Search query cannot be empty")
        limit = self._check_limit(limit)

        needle = query.strip().lower()
        pool = self._build_articles(CRYPTO_NEWS + FINANCE_NEWS, len(CRYPTO_NEWS) + len(FINANCE_NEWS))
        matches = [
            article for article in pool
            if needle in article.title.lower() or needle in article.summary.lower()
        ]
        return NewsDigest(topic=query.strip(), query=query.strip(), articles=matches[:limit], last_updated=utc_now())

    async def get_news_by_sentiment(self, topic: str, sentiment: str, limit: Optional[int] = None) -> NewsDigest:
        """Headlines for a topic filtered to one sentiment."""
        is_valid, normalized, error = validate_sentiment(sentiment)
        if not is_valid:
            raise InvalidInputError(error)
        limit = self._check_limit(limit)

        feed = self._select_feed(topic)
        articles = [
            article for article in self._build_articles(feed, len(feed))
            if article.sentiment == normalized
        ]
        return NewsDigest(topic=topic, sentiment=normalized, articles=articles[:limit], last_updated=utc_now())

    async def get_trending_topics(self) -> List[str]:
        return list(TRENDING_TOPICS)

    def _select_feed(self, topic: str) -> List[Dict[str, str]]:
        lowered = (topic or "").lower()
        if any(word in lowered for word in CRYPTO_TOPIC_WORDS):
            return CRYPTO_NEWS
        return FINANCE_NEWS

    def _check_limit(self, limit: Optional[int]) -> int:
        limit = settings.NEWS_DEFAULT_LIMIT if limit is None else limit
        is_valid, error = validate_limit(limit)
        if not is_valid:
            raise InvalidInputError(error)
        return limit

    def _build_articles(self, feed: List[Dict[str, str]], limit: int) -> List[NewsItem]:
        """Materialize feed entries with publish times within the last 24 hours."""
        now = utc_now()
        articles = []
        for item in feed[:limit]:
            hours_ago = int(self.rng.integers(0, 24))
            articles.append(
                NewsItem(
                    title=item["title"],
                    summary=item["summary"],
                    url=f"https://example.com/news/{slugify(item['title'])}",
                    source=item["source"],
                    published_at=now - timedelta(hours=hours_ago),
                    category=item["category"],
                    sentiment=item["sentiment"],
                )
            )
        return articles
