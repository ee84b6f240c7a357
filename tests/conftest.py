"""Test configuration and fixtures."""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
import sys
from typing import Any, Dict, List, Mapping, Optional

import numpy as np
import pytest
from pydantic import BaseModel

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from agents.schemas import AgentConfig, build_plugin
from data_collector.base import DataSource, default_sources
from database.queries import DatabaseManager
from utils.errors import GenerationError, SourceUnavailableError


class FakeGenerator:
    """Records every generate() call and returns a canned answer."""

    def __init__(self, answer: str = "Generated answer.", error: Optional[Exception] = None):
        self.answer = answer
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def generate(self, prompt, grounding_context=None, system_prompt=None, model=None) -> str:
        self.calls.append(
            {
                "prompt": prompt,
                "grounding_context": grounding_context,
                "system_prompt": system_prompt,
                "model": model,
            }
        )
        if self.error is not None:
            raise self.error
        return self.answer

    @property
    def last_call(self) -> Dict[str, Any]:
        return self.calls[-1]


class FailingSource(DataSource):
    """Always raises the configured error."""

    def __init__(self, plugin_id: str, error: Optional[Exception] = None):
        super().__init__(rng=np.random.default_rng(0))
        self.plugin_id = plugin_id
        self.error = error or SourceUnavailableError(f"{plugin_id} backend down")
        self.calls = 0

    async def fetch(self, parameters: Mapping[str, Any]) -> BaseModel:
        self.calls += 1
        raise self.error


class SlowSource(DataSource):
    """Sleeps longer than any test timeout."""

    def __init__(self, plugin_id: str, delay: float = 5.0):
        super().__init__(rng=np.random.default_rng(0))
        self.plugin_id = plugin_id
        self.delay = delay

    async def fetch(self, parameters: Mapping[str, Any]) -> BaseModel:
        await asyncio.sleep(self.delay)
        raise AssertionError("should have timed out")


class RecordingSource(DataSource):
    """Wraps a real source and records the parameters it was called with."""

    def __init__(self, inner: DataSource):
        super().__init__(rng=inner.rng)
        self.inner = inner
        self.plugin_id = inner.plugin_id
        self.received: List[Dict[str, Any]] = []

    async def fetch(self, parameters: Mapping[str, Any]) -> BaseModel:
        self.received.append(dict(parameters))
        return await self.inner.fetch(parameters)


class MalformedPayload(BaseModel):
    value: int = 1


class MalformedSource(DataSource):
    """Returns a record without last_updated."""

    def __init__(self, plugin_id: str):
        super().__init__(rng=np.random.default_rng(0))
        self.plugin_id = plugin_id

    async def fetch(self, parameters: Mapping[str, Any]) -> BaseModel:
        return MalformedPayload()


@dataclass
class PlainQuote:
    symbol: str
    last_updated: datetime


class PlainRecordSource(DataSource):
    """Returns a dataclass record instead of a pydantic model."""

    def __init__(self, plugin_id: str):
        super().__init__(rng=np.random.default_rng(0))
        self.plugin_id = plugin_id

    async def fetch(self, parameters: Mapping[str, Any]) -> Any:
        return PlainQuote(symbol="BTC", last_updated=datetime(2026, 1, 1))


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def sources(rng):
    """Simulated sources for every plugin, deterministically seeded."""
    return default_sources(rng=rng)


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def all_plugins_config():
    """Agent with crypto, stock, market_summary and news enabled."""
    return AgentConfig(
        name="Test Agent",
        model_identifier="test-model",
        system_prompt="You are a test agent.",
        plugins=(
            build_plugin("crypto"),
            build_plugin("stock"),
            build_plugin("market_summary"),
            build_plugin("news"),
        ),
    )


@pytest.fixture
def news_disabled_config(all_plugins_config):
    return all_plugins_config.with_plugin_enabled("news", False)


@pytest.fixture(scope="function")
def test_db():
    """Create a test database for each test."""
    db = DatabaseManager("sqlite:///:memory:")
    db.create_tables()
    yield db
    db.drop_tables()
