"""Insights agent facade - the single entry point for answering a query."""

from typing import Mapping, Optional

from loguru import logger

from data_collector.base import DataSource, default_sources
from orchestrator.dispatcher import QueryOrchestrator
from orchestrator.intent_classifier import IntentClassifier
from orchestrator.langgraph_flow import QueryGraph
from orchestrator.plugin_registry import PluginRegistry
from utils.errors import AgentError, InternalFailureError, InvalidInputError
from utils.validators import validate_query
from .llm_provider import TextGenerator
from .schemas import AgentConfig, AgentResponse
from .synthesizer_agent import ResponseSynthesizer


class InsightsAgent:
    """
    Conversational agent that routes a query to its data plugins and
    returns one provenance-tagged answer.

    The configuration is fixed for the agent's lifetime. Concurrent calls to
    ``process_query`` share nothing mutable.
    """

    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        sources: Optional[Mapping[str, DataSource]] = None,
        generator: Optional[TextGenerator] = None,
        classifier: Optional[IntentClassifier] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self._config = config if config is not None else AgentConfig.default()
        self._registry = PluginRegistry(self._config.plugins)
        self._graph = QueryGraph(
            classifier=classifier or IntentClassifier(),
            orchestrator=QueryOrchestrator(
                sources if sources is not None else default_sources(),
                timeout_seconds=timeout_seconds,
            ),
            registry=self._registry,
            synthesizer=ResponseSynthesizer(generator),
            config=self._config,
        )

    @property
    def config(self) -> AgentConfig:
        return self._config

    @property
    def registry(self) -> PluginRegistry:
        return self._registry

    async def process_query(self, query: str) -> AgentResponse:
        """
        Answer one natural-language query.

        Args:
            query: Free-form user request

        Returns:
            AgentResponse with text and provenance

        Raises:
            InvalidInputError: Empty or whitespace-only query
            GenerationError: The language-generation step failed
            InternalFailureError: Any other unexpected fault
        """
        is_valid, error = validate_query(query)
        if not is_valid:
            raise InvalidInputError(error)

        logger.info(f"[{self._config.name}] Processing query: {query[:80]!r}")

        try:
            state = await self._graph.run(query.strip())
        except AgentError:
            raise
        except Exception as e:
            logger.exception(f"[{self._config.name}] Query pipeline failed")
            raise InternalFailureError(f"Internal failure while processing query: {e}") from e

        response = state.get("response")
        if not isinstance(response, AgentResponse):
            raise InternalFailureError("Query pipeline produced no response")
        return response

    def __repr__(self) -> str:
        return f"<InsightsAgent(name={self._config.name!r}, plugins={[p.id for p in self._config.plugins]})>"
