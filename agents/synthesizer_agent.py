"""Response Synthesizer - merges plugin results into one grounded answer."""

from typing import Any, Dict, List, Optional

from loguru import logger

from data_collector.schemas import (
    CryptoPrice,
    MarketSummary,
    NewsDigest,
    StockPrice,
    StockWatchlist,
)
from orchestrator.dispatcher import DataFetchResult
from orchestrator.intent_classifier import QueryIntent
from utils.errors import AgentError, GenerationError
from utils.helpers import format_currency, format_percentage, format_timestamp
from .llm_provider import TextGenerator, get_llm_provider
from .schemas import AgentConfig, AgentResponse, SourceReference


CITATION_INSTRUCTION = (
    "Base your answer on the live data provided. "
    "Cite each data source by name and its timestamp when you use it."
)

UNAVAILABLE_INSTRUCTION = (
    "Live data for this request is unavailable. Say so explicitly, "
    "do not invent prices or figures, and answer only from general knowledge."
)


class ResponseSynthesizer:
    """Turns a query plus its fetch results into an ``AgentResponse``."""

    def __init__(self, generator: Optional[TextGenerator] = None):
        self._generator = generator

    @property
    def generator(self) -> TextGenerator:
        if self._generator is None:
            self._generator = get_llm_provider()
        return self._generator

    async def synthesize(
        self,
        query: str,
        results: List[DataFetchResult],
        config: AgentConfig,
        intent: Optional[QueryIntent] = None,
    ) -> AgentResponse:
        """
        Produce the final answer for one query.

        Args:
            query: The user's request
            results: Fetch results in priority order (may be empty)
            config: Agent configuration (system prompt, model)
            intent: Classified intent, used to tell skipped plugins apart
                from a query that needed no data

        Returns:
            AgentResponse whose provenance reflects only successful results

        Raises:
            GenerationError: If the language-generation step fails
        """
        successes = [result for result in results if result.success]
        failures = [result for result in results if not result.success]

        if successes:
            return await self._grounded_response(query, successes, failures, config)

        if failures:
            notice = "Live data could not be retrieved from: " + ", ".join(
                self._display_name(config, result.plugin_id) for result in failures
            ) + "."
            logger.info(f"All {len(failures)} plugin(s) failed; answering without live data")
            return await self._unavailable_response(query, config, notice)

        skipped = self._skipped_plugins(intent, config)
        if skipped:
            notice = "Live data is unavailable: " + ", ".join(skipped) + "."
            logger.info(f"Targeted plugins skipped ({', '.join(skipped)}); answering without live data")
            return await self._unavailable_response(query, config, notice)

        text = await self._generate(query, None, config.system_prompt, config)
        logger.info("No plugin targeted; plain generative answer")
        return AgentResponse(text=text, mcp_data_used=False, used_sources=[])

    async def _grounded_response(
        self,
        query: str,
        successes: List[DataFetchResult],
        failures: List[DataFetchResult],
        config: AgentConfig,
    ) -> AgentResponse:
        grounding = [
            {
                "plugin_id": result.plugin_id,
                "fetched_at": format_timestamp(result.fetched_at),
                "data": result.payload.model_dump(mode="json"),
            }
            for result in successes
        ]
        system_prompt = f"{config.system_prompt}\n\n{CITATION_INSTRUCTION}"
        prompt = self._build_grounded_prompt(query, successes, failures, config)

        text = await self._generate(prompt, grounding, system_prompt, config)

        footer = "Sources: " + "; ".join(
            f"{self._display_name(config, result.plugin_id)} (as of {format_timestamp(result.fetched_at)})"
            for result in successes
        )
        if failures:
            footer += "\nUnavailable: " + ", ".join(
                self._display_name(config, result.plugin_id) for result in failures
            )

        logger.info(
            f"Synthesized answer from {len(successes)} source(s), {len(failures)} unavailable"
        )
        return AgentResponse(
            text=f"{text}\n\n{footer}",
            mcp_data_used=True,
            used_sources=[
                SourceReference(plugin_id=result.plugin_id, fetched_at=result.fetched_at)
                for result in successes
            ],
        )

    async def _unavailable_response(self, query: str, config: AgentConfig, notice: str) -> AgentResponse:
        system_prompt = f"{config.system_prompt}\n\n{UNAVAILABLE_INSTRUCTION}"
        prompt = f"{query}\n\nNote: {notice}"
        text = await self._generate(prompt, None, system_prompt, config)
        return AgentResponse(text=f"{notice}\n\n{text}", mcp_data_used=False, used_sources=[])

    async def _generate(
        self,
        prompt: str,
        grounding: Optional[List[Dict[str, Any]]],
        system_prompt: str,
        config: AgentConfig,
    ) -> str:
        try:
            return await self.generator.generate(
                prompt,
                grounding_context=grounding,
                system_prompt=system_prompt,
                model=config.model_identifier,
            )
        except GenerationError:
            raise
        except AgentError as e:
            raise GenerationError(e.message) from e
        except Exception as e:
            logger.error(f"Language generation failed: {type(e).__name__}: {e}")
            raise GenerationError(f"Language generation failed: {e}") from e

    def _skipped_plugins(self, intent: Optional[QueryIntent], config: AgentConfig) -> List[str]:
        if intent is None:
            return []
        configured = {plugin.id for plugin in config.plugins}
        return [
            f"{self._display_name(config, plugin_id)} plugin is "
            + ("disabled" if plugin_id in configured else "not configured")
            for plugin_id in intent.target_plugins
        ]

    @staticmethod
    def _display_name(config: AgentConfig, plugin_id: str) -> str:
        for plugin in config.plugins:
            if plugin.id == plugin_id:
                return plugin.display_name or plugin_id
        return plugin_id

    def _build_grounded_prompt(
        self,
        query: str,
        successes: List[DataFetchResult],
        failures: List[DataFetchResult],
        config: AgentConfig,
    ) -> str:
        """Build the user prompt with one section per successful plugin."""
        sections = []
        for result in successes:
            title = self._display_name(config, result.plugin_id).upper()
            sections.append(
                f"=== {title} (as of {format_timestamp(result.fetched_at)}) ===\n"
                f"{self._format_payload(result.payload)}"
            )

        prompt = f"Question: {query}\n\n" + "\n\n".join(sections)
        if failures:
            prompt += "\n\n=== UNAVAILABLE ===\n" + "\n".join(
                f"{self._display_name(config, result.plugin_id)}: {result.error_message}"
                for result in failures
            )
        return prompt

    def _format_payload(self, payload: Any) -> str:
        if isinstance(payload, CryptoPrice):
            return self._format_crypto(payload)
        if isinstance(payload, StockPrice):
            return self._format_stock(payload)
        if isinstance(payload, StockWatchlist):
            return "\n".join(self._format_stock(quote) for quote in payload.quotes)
        if isinstance(payload, MarketSummary):
            return self._format_market(payload)
        if isinstance(payload, NewsDigest):
            return self._format_news(payload)
        return str(payload)

    def _format_crypto(self, data: CryptoPrice) -> str:
        text = f"""Symbol: {data.symbol}
Price: {format_currency(data.price)}
24h Change: {format_percentage(data.change_24h)}
24h Volume: ${data.volume_24h:.2f}B
Market Cap: ${data.market_cap:.2f}T"""
        if data.history:
            first, last = data.history[0], data.history[-1]
            text += (
                f"\nHistory: {len(data.history)} points, "
                f"{first.date} {format_currency(first.price)} -> {last.date} {format_currency(last.price)}"
            )
        return text

    def _format_stock(self, data: StockPrice) -> str:
        return (
            f"{data.symbol}: {format_currency(data.price)} "
            f"({data.change:+.2f}, {format_percentage(data.change_percent)}), "
            f"volume {data.volume:.1f}M"
        )

    def _format_market(self, data: MarketSummary) -> str:
        return f"""Total Market Cap: ${data.total_market_cap:.2f}T
BTC Dominance: {data.btc_dominance:.1f}%
Top Gainers: {', '.join(data.top_gainers) or 'N/A'}
Top Losers: {', '.join(data.top_losers) or 'N/A'}
Sentiment: {data.market_sentiment}"""

    def _format_news(self, data: NewsDigest) -> str:
        lines = [f"Topic: {data.topic} ({data.total_count} articles)"]
        for item in data.articles:
            sentiment = f" [{item.sentiment}]" if item.sentiment else ""
            lines.append(f"- {item.title} ({item.source}){sentiment}: {item.summary}")
        return "\n".join(lines)
