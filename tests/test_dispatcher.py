"""Tests for query dispatch, parameter routing and fault isolation."""

import pytest

from data_collector.schemas import CryptoPrice, MarketSummary, NewsDigest, StockPrice, StockWatchlist
from orchestrator.dispatcher import QueryOrchestrator
from orchestrator.intent_classifier import QueryIntent
from orchestrator.plugin_registry import PluginRegistry
from orchestrator.routing import Router
from utils.errors import ErrorKind, InvalidSymbolError
from tests.conftest import FailingSource, MalformedSource, PlainRecordSource, RecordingSource, SlowSource


def intent_for(*plugins, **parameters):
    return QueryIntent(target_plugins=list(plugins), extracted_parameters=parameters, raw_query="q")


@pytest.fixture
def registry(all_plugins_config):
    return PluginRegistry(all_plugins_config.plugins)


class TestRouter:
    """Each plugin receives only its own parameters."""

    def test_crypto_parameters(self):
        extracted = {"crypto_symbol": "ETH", "days": 7, "stock_symbol": "AAPL", "news_topic": "x"}
        assert Router.parameters_for("crypto", extracted) == {"symbol": "ETH", "days": 7}

    def test_stock_parameters(self):
        assert Router.parameters_for("stock", {"crypto_symbol": "ETH", "stock_symbol": "AAPL"}) == {
            "symbol": "AAPL"
        }

    def test_market_summary_takes_nothing(self):
        assert Router.parameters_for("market_summary", {"crypto_symbol": "ETH"}) == {}

    def test_news_parameters_skip_missing_values(self):
        extracted = {"news_topic": "bitcoin", "news_query": None, "news_sentiment": "positive"}
        assert Router.parameters_for("news", extracted) == {"topic": "bitcoin", "sentiment": "positive"}

    def test_unknown_plugin(self):
        assert Router.parameters_for("weather", {"crypto_symbol": "ETH"}) == {}


class TestDispatch:
    """Fan-out to enabled plugins."""

    async def test_single_plugin_success(self, sources, registry):
        orchestrator = QueryOrchestrator(sources)
        results = await orchestrator.dispatch(intent_for("crypto", crypto_symbol="BTC"), registry)

        assert len(results) == 1
        result = results[0]
        assert result.plugin_id == "crypto"
        assert result.success is True
        assert isinstance(result.payload, CryptoPrice)
        assert result.payload.symbol == "BTC"
        assert result.error is None

    async def test_all_plugins_in_priority_order(self, sources, registry):
        orchestrator = QueryOrchestrator(sources)
        intent = intent_for(
            "crypto", "stock", "market_summary", "news",
            crypto_symbol="ETH", stock_symbol="MSFT", news_topic="crypto",
        )
        results = await orchestrator.dispatch(intent, registry)

        assert [r.plugin_id for r in results] == ["crypto", "stock", "market_summary", "news"]
        assert all(r.success for r in results)
        assert isinstance(results[1].payload, StockPrice)
        assert isinstance(results[2].payload, MarketSummary)
        assert isinstance(results[3].payload, NewsDigest)

    async def test_stock_without_symbol_returns_watchlist(self, sources, registry):
        results = await QueryOrchestrator(sources).dispatch(intent_for("stock"), registry)
        assert isinstance(results[0].payload, StockWatchlist)
        assert results[0].payload.quotes

    async def test_disabled_plugin_is_skipped(self, sources, news_disabled_config):
        registry = PluginRegistry(news_disabled_config.plugins)
        recording = RecordingSource(sources["news"])
        orchestrator = QueryOrchestrator({**sources, "news": recording})

        results = await orchestrator.dispatch(intent_for("crypto", "news", news_topic="crypto"), registry)

        assert [r.plugin_id for r in results] == ["crypto"]
        assert recording.received == []

    async def test_unknown_plugin_is_skipped(self, sources, registry):
        results = await QueryOrchestrator(sources).dispatch(intent_for("weather", "crypto"), registry)
        assert [r.plugin_id for r in results] == ["crypto"]

    async def test_empty_intent_dispatches_nothing(self, sources, registry):
        assert await QueryOrchestrator(sources).dispatch(intent_for(), registry) == []

    async def test_result_count_matches_enabled_targets(self, sources, news_disabled_config):
        registry = PluginRegistry(news_disabled_config.plugins)
        intent = intent_for("crypto", "stock", "market_summary", "news", "weather")
        results = await QueryOrchestrator(sources).dispatch(intent, registry)
        assert len(results) == 3

    async def test_routed_parameters_only(self, sources, registry):
        recording = RecordingSource(sources["crypto"])
        orchestrator = QueryOrchestrator({**sources, "crypto": recording})
        intent = intent_for("crypto", crypto_symbol="ETH", days=3, stock_symbol="AAPL")

        results = await orchestrator.dispatch(intent, registry)

        assert recording.received == [{"symbol": "ETH", "days": 3}]
        assert len(results[0].payload.history) == 4


class TestFaultIsolation:
    """One failing plugin never affects the others."""

    async def test_source_unavailable(self, sources, registry):
        failing = FailingSource("crypto")
        orchestrator = QueryOrchestrator({**sources, "crypto": failing})

        results = await orchestrator.dispatch(intent_for("crypto", "market_summary"), registry)

        assert [r.plugin_id for r in results] == ["crypto", "market_summary"]
        assert results[0].success is False
        assert results[0].error == ErrorKind.SOURCE_UNAVAILABLE
        assert "backend down" in results[0].error_message
        assert results[0].payload is None
        assert results[1].success is True
        assert failing.calls == 1

    async def test_invalid_symbol_keeps_kind(self, sources, registry):
        failing = FailingSource("stock", InvalidSymbolError("bad ticker"))
        orchestrator = QueryOrchestrator({**sources, "stock": failing})

        results = await orchestrator.dispatch(intent_for("stock", "news"), registry)

        assert results[0].error == ErrorKind.INVALID_SYMBOL
        assert results[1].success is True

    async def test_invalid_symbol_from_real_source(self, sources, registry):
        results = await QueryOrchestrator(sources).dispatch(
            intent_for("crypto", crypto_symbol="NOT-A-SYMBOL!"), registry
        )
        assert results[0].success is False
        assert results[0].error == ErrorKind.INVALID_SYMBOL

    async def test_unexpected_exception(self, sources, registry):
        orchestrator = QueryOrchestrator({**sources, "news": FailingSource("news", RuntimeError("boom"))})
        results = await orchestrator.dispatch(intent_for("crypto", "news"), registry)

        assert results[0].success is True
        assert results[1].success is False
        assert results[1].error == ErrorKind.SOURCE_UNAVAILABLE
        assert "RuntimeError" in results[1].error_message

    async def test_timeout(self, sources, registry):
        orchestrator = QueryOrchestrator({**sources, "crypto": SlowSource("crypto")}, timeout_seconds=0.05)
        results = await orchestrator.dispatch(intent_for("crypto", "stock"), registry)

        assert results[0].success is False
        assert results[0].error == ErrorKind.SOURCE_UNAVAILABLE
        assert "Timed out" in results[0].error_message
        assert results[1].success is True

    async def test_malformed_payload(self, sources, registry):
        orchestrator = QueryOrchestrator({**sources, "market_summary": MalformedSource("market_summary")})
        results = await orchestrator.dispatch(intent_for("market_summary"), registry)

        assert results[0].success is False
        assert "last_updated" in results[0].error_message

    async def test_non_model_payload_is_malformed(self, sources, registry):
        orchestrator = QueryOrchestrator({**sources, "crypto": PlainRecordSource("crypto")})
        results = await orchestrator.dispatch(intent_for("crypto", "stock"), registry)

        assert results[0].success is False
        assert results[0].error == ErrorKind.SOURCE_UNAVAILABLE
        assert "PlainQuote" in results[0].error_message
        assert results[1].success is True

    async def test_enabled_plugin_without_source(self, sources, registry):
        partial = {k: v for k, v in sources.items() if k != "news"}
        results = await QueryOrchestrator(partial).dispatch(intent_for("crypto", "news"), registry)

        assert [r.plugin_id for r in results] == ["crypto", "news"]
        assert results[1].success is False
        assert results[1].error == ErrorKind.SOURCE_UNAVAILABLE

    async def test_failed_results_carry_timestamp(self, sources, registry):
        orchestrator = QueryOrchestrator({**sources, "crypto": FailingSource("crypto")})
        results = await orchestrator.dispatch(intent_for("crypto"), registry)
        assert results[0].fetched_at is not None
