"""Tests for the LLM provider (no network access)."""

import json
from types import SimpleNamespace

import pytest

from agents.llm_provider import LLMProvider, render_grounding_context
from config import settings
from utils.errors import GenerationError


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def openrouter_only(completions):
    provider = LLMProvider()
    provider.gemini_enabled = False
    provider.openrouter_client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return provider


@pytest.fixture(autouse=True)
def no_api_keys(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", None)
    monkeypatch.setattr(settings, "OPENROUTER_API_KEY", None)


class TestGroundingContext:

    def test_empty_context_adds_nothing(self):
        assert render_grounding_context(None) == ""
        assert render_grounding_context([]) == ""

    def test_context_serialized_as_json(self):
        records = [{"plugin_id": "crypto", "fetched_at": "2026-01-01T00:00:00Z", "data": {"price": 1.5}}]
        rendered = render_grounding_context(records)
        payload = rendered.split("```json\n", 1)[1].rsplit("\n```", 1)[0]
        assert json.loads(payload) == records


class TestLLMProvider:

    async def test_no_provider_configured(self):
        with pytest.raises(GenerationError, match="No LLM provider configured"):
            await LLMProvider().generate("hello")

    async def test_openrouter_receives_prompt_and_context(self):
        completions = FakeCompletions(content="  Answer.  ")
        provider = openrouter_only(completions)

        text = await provider.generate(
            "What is BTC?",
            grounding_context=[{"plugin_id": "crypto", "data": {"price": 1}}],
            system_prompt="Be precise.",
        )

        assert text == "Answer."
        messages = completions.requests[0]["messages"]
        assert messages[0] == {"role": "system", "content": "Be precise."}
        assert messages[1]["content"].startswith("What is BTC?")
        assert '"plugin_id": "crypto"' in messages[1]["content"]
        assert completions.requests[0]["model"] == settings.FALLBACK_LLM_MODEL

    async def test_empty_completion_is_generation_error(self):
        provider = openrouter_only(FakeCompletions(content=""))
        with pytest.raises(GenerationError):
            await provider.generate("hello")

    async def test_provider_exception_is_generation_error(self):
        provider = openrouter_only(FakeCompletions(error=ValueError("bad request")))
        with pytest.raises(GenerationError, match="bad request"):
            await provider.generate("hello")
