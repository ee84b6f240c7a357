"""LangGraph pipeline: classify -> dispatch -> synthesize."""

from typing import Any, List, Optional, TypedDict

from langgraph.graph import StateGraph, END
from loguru import logger

from orchestrator.dispatcher import DataFetchResult, QueryOrchestrator
from orchestrator.intent_classifier import IntentClassifier, QueryIntent
from orchestrator.plugin_registry import PluginRegistry


class GraphState(TypedDict):
    """State for one query through the pipeline."""
    # Input
    query: str

    # Intermediate
    intent: Optional[QueryIntent]
    results: List[DataFetchResult]

    # Output
    response: Optional[Any]


class QueryGraph:
    """
    Compiled query pipeline shared by all calls of one agent.

    The graph object is immutable after construction; each ``run`` gets its
    own state, so concurrent queries do not interfere.
    """

    def __init__(
        self,
        classifier: IntentClassifier,
        orchestrator: QueryOrchestrator,
        registry: PluginRegistry,
        synthesizer: Any,
        config: Any,
    ):
        self.classifier = classifier
        self.orchestrator = orchestrator
        self.registry = registry
        self.synthesizer = synthesizer
        self.config = config
        self.graph = self._build_graph()

    def _build_graph(self):
        graph = StateGraph(GraphState)

        graph.add_node("classify", self._classify)
        graph.add_node("dispatch", self._dispatch)
        graph.add_node("synthesize", self._synthesize)

        graph.set_entry_point("classify")
        graph.add_conditional_edges(
            "classify",
            self._route_after_classify,
            {"dispatch": "dispatch", "synthesize": "synthesize"},
        )
        graph.add_edge("dispatch", "synthesize")
        graph.add_edge("synthesize", END)

        return graph.compile()

    # Node implementations
    async def _classify(self, state: GraphState) -> dict:
        intent = self.classifier.classify(state["query"])
        logger.info(f"Intent: targets={intent.target_plugins} params={intent.extracted_parameters}")
        return {"intent": intent}

    def _route_after_classify(self, state: GraphState) -> str:
        """No targeted plugin means no dispatch at all."""
        intent = state.get("intent")
        return "dispatch" if intent is not None and intent.has_targets else "synthesize"

    async def _dispatch(self, state: GraphState) -> dict:
        results = await self.orchestrator.dispatch(state["intent"], self.registry)
        return {"results": results}

    async def _synthesize(self, state: GraphState) -> dict:
        response = await self.synthesizer.synthesize(
            state["query"],
            state.get("results") or [],
            self.config,
            intent=state.get("intent"),
        )
        return {"response": response}

    # Public interface
    async def run(self, query: str) -> GraphState:
        """
        Run the pipeline for one query.

        Returns:
            Final state with intent, results and response
        """
        initial_state: GraphState = {
            "query": query,
            "intent": None,
            "results": [],
            "response": None,
        }
        return await self.graph.ainvoke(initial_state)
