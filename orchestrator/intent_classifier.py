"""Intent classifier for deciding which data plugins a query needs."""

import re
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from utils.validators import extract_symbols_from_text


class PluginId(str, Enum):
    """Identifiers of the built-in data plugins."""
    CRYPTO = "crypto"
    STOCK = "stock"
    MARKET_SUMMARY = "market_summary"
    NEWS = "news"


# Dispatch and formatting order when several plugins match
PLUGIN_PRIORITY: List[PluginId] = [
    PluginId.CRYPTO,
    PluginId.STOCK,
    PluginId.MARKET_SUMMARY,
    PluginId.NEWS,
]


class QueryIntent(BaseModel):
    """Plugins and parameters inferred from one query."""
    target_plugins: List[str] = Field(default_factory=list, description="Plugin ids in priority order")
    extracted_parameters: Dict[str, Any] = Field(default_factory=dict, description="Parameter name -> value")
    raw_query: str = Field(default="", description="Original user query")

    @property
    def has_targets(self) -> bool:
        return bool(self.target_plugins)


class IntentClassifier:
    """Classifies user queries into plugin targets using keyword and entity matching."""

    CRYPTO_SYMBOLS = {
        "BTC", "ETH", "BNB", "SOL", "XRP", "ADA", "DOGE", "DOT",
        "AVAX", "LINK", "LTC", "MATIC", "SHIB", "UNI",
    }

    # Tickers that are also everyday words
    AMBIGUOUS_SYMBOLS = frozenset({"SOL", "ADA", "DOT", "LINK", "UNI"})

    CRYPTO_NAMES = {
        "bitcoin": "BTC",
        "ethereum": "ETH",
        "ether": "ETH",
        "binance coin": "BNB",
        "solana": "SOL",
        "ripple": "XRP",
        "cardano": "ADA",
        "dogecoin": "DOGE",
        "polkadot": "DOT",
        "avalanche": "AVAX",
        "chainlink": "LINK",
        "litecoin": "LTC",
        "polygon": "MATIC",
        "shiba inu": "SHIB",
        "uniswap": "UNI",
    }

    STOCK_SYMBOLS = {"AAPL", "MSFT", "GOOGL", "GOOG", "AMZN", "TSLA", "NVDA", "META", "NFLX"}

    COMPANY_NAMES = {
        "apple": "AAPL",
        "microsoft": "MSFT",
        "google": "GOOGL",
        "alphabet": "GOOGL",
        "amazon": "AMZN",
        "tesla": "TSLA",
        "nvidia": "NVDA",
        "netflix": "NFLX",
    }

    # Topic keywords per plugin
    PATTERNS = {
        PluginId.CRYPTO: [
            r"\bcrypto(?:currency|currencies|s)?\b",
            r"\bcoins?\b",
            r"\btokens?\b",
            r"\baltcoins?\b",
        ],
        PluginId.STOCK: [
            r"\bstocks?\b",
            r"\bshare\s+price\b",
            r"\bshares\b",
            r"\bequit(?:y|ies)\b",
            r"\bnasdaq\b",
            r"\bnyse\b",
            r"\bticker\b",
        ],
        PluginId.MARKET_SUMMARY: [
            r"\bmarkets?\b",
            r"\bmarket\s+cap\b",
            r"\bdominance\b",
            r"\b(?:top\s+)?gainers\b",
            r"\b(?:top\s+)?losers\b",
            r"\boverview\b",
        ],
        PluginId.NEWS: [
            r"\bnews\b",
            r"\bheadlines?\b",
            r"\barticles?\b",
            r"\blatest\s+on\b",
            r"\bwhat\s+happened\b",
            r"\bannounce(?:ment|ments|d)?\b",
            r"\btrending\b",
        ],
    }

    DAYS_PATTERNS = [
        (r"\b(?:last|past)\s+(\d{1,3})\s+days?\b", None),
        (r"\b(?:last|past|this)\s+week\b", 7),
        (r"\b(?:last|past|this)\s+month\b", 30),
        (r"\b(?:history|historical|chart|trend)\b", 7),
    ]

    SENTIMENT_PATTERNS = {
        "positive": r"\b(?:positive|bullish|good)\s+(?:news|headlines?)\b",
        "negative": r"\b(?:negative|bearish|bad)\s+(?:news|headlines?)\b",
    }

    SEARCH_PATTERN = r"\bsearch\s+(?:the\s+)?(?:news\s+)?(?:for|about)\s+[\"']?([^\"'?.!]+)"
    TOPIC_PATTERN = r"\b(?:news|headlines?|articles?)\s+(?:about|on|for|regarding)\s+(?:the\s+)?([a-z0-9 ]+?)(?:\s+(?:today|now|please|this\s+week))?[?.!]*$"

    MAX_HISTORY_DAYS = 365

    def __init__(self):
        """Initialize classifier with compiled patterns."""
        self.compiled_patterns = {
            plugin: [re.compile(p, re.IGNORECASE) for p in patterns]
            for plugin, patterns in self.PATTERNS.items()
        }
        self.crypto_name_patterns = self._compile_names(self.CRYPTO_NAMES)
        self.company_name_patterns = self._compile_names(self.COMPANY_NAMES)
        self.days_patterns = [(re.compile(p, re.IGNORECASE), days) for p, days in self.DAYS_PATTERNS]
        self.sentiment_patterns = {
            sentiment: re.compile(p, re.IGNORECASE)
            for sentiment, p in self.SENTIMENT_PATTERNS.items()
        }
        self.search_pattern = re.compile(self.SEARCH_PATTERN, re.IGNORECASE)
        self.topic_pattern = re.compile(self.TOPIC_PATTERN, re.IGNORECASE)

    @staticmethod
    def _compile_names(names: Dict[str, str]) -> List[tuple]:
        return [
            (re.compile(rf"\b{re.escape(name)}\b", re.IGNORECASE), symbol)
            for name, symbol in names.items()
        ]

    def classify(self, query: str) -> QueryIntent:
        """
        Classify user query into plugin targets.

        Args:
            query: User's message

        Returns:
            QueryIntent with plugin ids in priority order and extracted parameters
        """
        query = (query or "").strip()
        matched = set()
        parameters: Dict[str, Any] = {}

        crypto_symbols = self._extract_crypto_symbols(query)
        stock_symbols = self._extract_stock_symbols(query)

        for plugin, patterns in self.compiled_patterns.items():
            if any(pattern.search(query) for pattern in patterns):
                matched.add(plugin)

        if crypto_symbols:
            matched.add(PluginId.CRYPTO)
        if stock_symbols:
            matched.add(PluginId.STOCK)

        if PluginId.CRYPTO in matched:
            parameters["crypto_symbol"] = crypto_symbols[0] if crypto_symbols else "BTC"
            days = self._extract_days(query)
            if days:
                parameters["days"] = days

        if PluginId.STOCK in matched and stock_symbols:
            parameters["stock_symbol"] = stock_symbols[0]

        if PluginId.NEWS in matched:
            parameters.update(self._extract_news_parameters(query, crypto_symbols, stock_symbols))

        target_plugins = [plugin.value for plugin in PLUGIN_PRIORITY if plugin in matched]

        return QueryIntent(
            target_plugins=target_plugins,
            extracted_parameters=parameters,
            raw_query=query,
        )

    def _extract_crypto_symbols(self, query: str) -> List[str]:
        """Crypto tickers and coin names, in order of appearance."""
        found = []
        for match in self._find_names(query, self.crypto_name_patterns):
            if match not in found:
                found.append(match)
        for symbol in extract_symbols_from_text(query, self.CRYPTO_SYMBOLS, self.AMBIGUOUS_SYMBOLS):
            if symbol not in found:
                found.append(symbol)
        return found

    def _extract_stock_symbols(self, query: str) -> List[str]:
        """Stock tickers (upper case or $cashtag) and company names."""
        found = []
        for match in self._find_names(query, self.company_name_patterns):
            if match not in found:
                found.append(match)
        # Every ticker is strict: "meta" and "amzn" in lower case are rarely tickers
        for symbol in extract_symbols_from_text(query, self.STOCK_SYMBOLS, frozenset(self.STOCK_SYMBOLS)):
            if symbol not in found:
                found.append(symbol)
        return found

    @staticmethod
    def _find_names(query: str, patterns: List[tuple]) -> List[str]:
        hits = []
        for pattern, symbol in patterns:
            match = pattern.search(query)
            if match:
                hits.append((match.start(), symbol))
        return [symbol for _, symbol in sorted(hits)]

    def _extract_days(self, query: str) -> Optional[int]:
        """Look-back window in days, if the query asks for history."""
        for pattern, days in self.days_patterns:
            match = pattern.search(query)
            if not match:
                continue
            value = days if days is not None else int(match.group(1))
            return max(1, min(value, self.MAX_HISTORY_DAYS))
        return None

    def _extract_news_parameters(
        self,
        query: str,
        crypto_symbols: List[str],
        stock_symbols: List[str],
    ) -> Dict[str, Any]:
        """Topic, search text and sentiment filter for the news plugin."""
        parameters: Dict[str, Any] = {}

        search = self.search_pattern.search(query)
        if search:
            parameters["news_query"] = search.group(1).strip()

        for sentiment, pattern in self.sentiment_patterns.items():
            if pattern.search(query):
                parameters["news_sentiment"] = sentiment
                break

        topic = self.topic_pattern.search(query)
        if topic:
            parameters["news_topic"] = topic.group(1).strip().lower()
        elif crypto_symbols:
            parameters["news_topic"] = self._crypto_topic(crypto_symbols[0])
        elif stock_symbols:
            parameters["news_topic"] = stock_symbols[0]
        elif self.compiled_patterns[PluginId.CRYPTO][0].search(query):
            parameters["news_topic"] = "crypto"
        else:
            parameters["news_topic"] = "markets"

        return parameters

    def _crypto_topic(self, symbol: str) -> str:
        """Coin name for a ticker, so the news feed picks crypto headlines."""
        for name, mapped in self.CRYPTO_NAMES.items():
            if mapped == symbol:
                return name
        return "crypto"
