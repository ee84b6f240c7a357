"""Tests for utility functions."""

import pytest
from datetime import datetime, timezone, timedelta

from utils.errors import (
    AgentError,
    DataSourceError,
    ErrorKind,
    GenerationError,
    InvalidInputError,
    InvalidSymbolError,
    SourceUnavailableError,
)
from utils.helpers import (
    format_currency,
    format_percentage,
    format_timestamp,
    slugify,
)
from utils.validators import (
    extract_symbols_from_text,
    validate_limit,
    validate_query,
    validate_sentiment,
    validate_symbol,
)


class TestHelpers:
    """Test helper functions."""

    def test_format_currency(self):
        """Test currency formatting."""
        assert format_currency(1234.56) == "$1,234.56"
        assert format_currency(68223.4) == "$68,223.40"
        assert format_currency(-500) == "-$500.00"

    def test_format_percentage(self):
        """Test percentage formatting."""
        assert format_percentage(5.5) == "+5.50%"
        assert format_percentage(-3.2) == "-3.20%"
        assert format_percentage(0) == "0.00%"

    def test_format_timestamp_converts_to_utc(self):
        ist = timezone(timedelta(hours=5, minutes=30))
        value = datetime(2026, 1, 10, 15, 30, tzinfo=ist)
        assert format_timestamp(value) == "2026-01-10T10:00:00Z"

    def test_format_timestamp_naive_is_utc(self):
        assert format_timestamp(datetime(2026, 1, 10, 8, 0, 5)) == "2026-01-10T08:00:05Z"

    def test_slugify(self):
        assert slugify("Bitcoin Breaks $70,000 Resistance Level") == "bitcoin-breaks-70-000-resistance-level"


class TestValidators:
    """Test validation functions."""

    @pytest.mark.parametrize(
        "raw,expected",
        [("btc", "BTC"), (" $eth ", "ETH"), ("AAPL", "AAPL"), ("1INCH", "1INCH")],
    )
    def test_validate_symbol_valid(self, raw, expected):
        assert validate_symbol(raw) == (True, expected, None)

    @pytest.mark.parametrize("raw", ["", "  ", "BTC-USD", "A" * 11, "@INVALID"])
    def test_validate_symbol_invalid(self, raw):
        is_valid, normalized, error = validate_symbol(raw)
        assert is_valid is False
        assert normalized is None
        assert error

    @pytest.mark.parametrize("query", [None, "", "   ", 42])
    def test_validate_query_rejects(self, query):
        assert validate_query(query)[0] is False

    def test_validate_query_accepts(self):
        assert validate_query("What is BTC at?") == (True, None)

    def test_validate_limit(self):
        assert validate_limit(5) == (True, None)
        assert validate_limit(0)[0] is False
        assert validate_limit(51)[0] is False

    def test_validate_sentiment(self):
        assert validate_sentiment(" Positive ") == (True, "positive", None)
        assert validate_sentiment("angry")[0] is False
        assert validate_sentiment(None)[0] is False

    def test_extract_symbols_keeps_order(self):
        known = {"BTC", "ETH", "DOT"}
        assert extract_symbols_from_text("eth then BTC then eth", known) == ["ETH", "BTC"]

    def test_extract_symbols_strict_words(self):
        known = {"BTC", "DOT"}
        strict = frozenset({"DOT"})
        assert extract_symbols_from_text("connect the dot to btc", known, strict) == ["BTC"]
        assert extract_symbols_from_text("DOT and $dot", known, strict) == ["DOT"]


class TestErrors:
    """Error kinds carried by the exception hierarchy."""

    @pytest.mark.parametrize(
        "error_cls,kind",
        [
            (InvalidInputError, ErrorKind.INVALID_INPUT),
            (SourceUnavailableError, ErrorKind.SOURCE_UNAVAILABLE),
            (InvalidSymbolError, ErrorKind.INVALID_SYMBOL),
            (GenerationError, ErrorKind.GENERATION_FAILURE),
        ],
    )
    def test_kind_per_class(self, error_cls, kind):
        error = error_cls("boom")
        assert error.kind == kind
        assert error.message == "boom"
        assert isinstance(error, AgentError)

    def test_source_errors_share_base(self):
        assert issubclass(SourceUnavailableError, DataSourceError)
        assert issubclass(InvalidSymbolError, DataSourceError)

    def test_explicit_kind_overrides_default(self):
        assert AgentError("x", kind=ErrorKind.INVALID_INPUT).kind == ErrorKind.INVALID_INPUT
        assert AgentError("x").kind == ErrorKind.INTERNAL_FAILURE
