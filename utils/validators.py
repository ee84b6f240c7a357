"""Input validation utilities."""

import re
from typing import Optional, Tuple


SYMBOL_PATTERN = re.compile(r'^[A-Z0-9]{1,10}$')

SENTIMENTS = ("positive", "negative", "neutral")


def validate_symbol(symbol: str) -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Validate a crypto or stock symbol.

    Args:
        symbol: Raw symbol input (e.g. "btc", "$ETH", " aapl ")

    Returns:
        Tuple of (is_valid, normalized_symbol, error_message)
    """
    if not symbol or not symbol.strip():
        return False, None, "Symbol cannot be empty"

    normalized = symbol.strip().upper().lstrip('$')

    if not SYMBOL_PATTERN.match(normalized):
        return False, None, f"Invalid symbol format: {symbol.strip()}"

    return True, normalized, None


def validate_query(query: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate a free-form chat query.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(query, str) or not query.strip():
        return False, "Query cannot be empty"
    return True, None


def validate_limit(limit: int, maximum: int = 50) -> Tuple[bool, Optional[str]]:
    """Validate a result-count limit."""
    if limit < 1:
        return False, "Limit must be positive"
    if limit > maximum:
        return False, f"Limit cannot exceed {maximum}"
    return True, None


def validate_sentiment(sentiment: Optional[str]) -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Validate a news sentiment filter.

    Returns:
        Tuple of (is_valid, normalized_sentiment, error_message)
    """
    if not sentiment:
        return False, None, "Sentiment cannot be empty"

    normalized = sentiment.strip().lower()
    if normalized not in SENTIMENTS:
        return False, None, f"Sentiment must be one of: {', '.join(SENTIMENTS)}"
    return True, normalized, None


def extract_symbols_from_text(text: str, known: set[str], strict: frozenset[str] = frozenset()) -> list[str]:
    """
    Extract known symbols from text, preserving order of appearance.

    Symbols in ``strict`` double as ordinary English words ("link", "dot"),
    so they only count when written in upper case or as a $cashtag.

    Args:
        text: User input text
        known: Upper-case symbols to look for
        strict: Subset of ``known`` requiring upper case or a leading $

    Returns:
        List of matched symbols without duplicates
    """
    symbols = []
    for match in re.finditer(r'(\$?)\b([A-Za-z0-9]{2,10})\b', text):
        cashtag, raw = match.group(1), match.group(2)
        candidate = raw.upper()
        if candidate not in known or candidate in symbols:
            continue
        if candidate in strict and not (cashtag or raw.isupper()):
            continue
        symbols.append(candidate)
    return symbols
