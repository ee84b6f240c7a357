from .schemas import (
    AgentConfig,
    AgentResponse,
    SourceReference,
    build_plugin,
    expand_plugins,
)
from .llm_provider import LLMProvider, TextGenerator, get_llm_provider
from .synthesizer_agent import ResponseSynthesizer
from .agent import InsightsAgent

__all__ = [
    "AgentConfig",
    "AgentResponse",
    "SourceReference",
    "build_plugin",
    "expand_plugins",
    "LLMProvider",
    "TextGenerator",
    "get_llm_provider",
    "ResponseSynthesizer",
    "InsightsAgent",
]
