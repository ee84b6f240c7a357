"""Query orchestrator: fans a classified intent out to the enabled data plugins."""

import asyncio
import time
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from loguru import logger
from pydantic import BaseModel, Field

from config import settings
from data_collector.base import DataSource
from orchestrator.intent_classifier import QueryIntent
from orchestrator.plugin_registry import PluginRegistry
from orchestrator.routing import Router
from utils.errors import DataSourceError, ErrorKind
from utils.helpers import utc_now


class DataFetchResult(BaseModel):
    """Outcome of invoking one plugin for one query."""
    plugin_id: str
    success: bool
    payload: Optional[Any] = None
    error: Optional[ErrorKind] = None
    error_message: Optional[str] = None
    fetched_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def ok(cls, plugin_id: str, payload: Any) -> "DataFetchResult":
        return cls(plugin_id=plugin_id, success=True, payload=payload, fetched_at=utc_now())

    @classmethod
    def failed(cls, plugin_id: str, error: ErrorKind, message: str) -> "DataFetchResult":
        return cls(
            plugin_id=plugin_id,
            success=False,
            error=error,
            error_message=message,
            fetched_at=utc_now(),
        )


class QueryOrchestrator:
    """
    Dispatches an intent to its data sources.

    Every targeted plugin that is enabled gets attempted concurrently; each
    call is bounded by ``timeout_seconds`` and isolated, so one failing
    plugin only produces a failed result for itself.
    """

    def __init__(
        self,
        sources: Mapping[str, DataSource],
        timeout_seconds: Optional[float] = None,
    ):
        self.sources: Dict[str, DataSource] = dict(sources)
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.DATA_COLLECTION_TIMEOUT
        )

    async def dispatch(self, intent: QueryIntent, registry: PluginRegistry) -> List[DataFetchResult]:
        """
        Invoke every targeted, enabled plugin and collect the results.

        Args:
            intent: Classified query intent
            registry: Plugins configured for the agent

        Returns:
            One result per attempted plugin, in the intent's priority order.
            Unknown and disabled plugins are skipped and yield no result.
        """
        selected = []
        for plugin_id in intent.target_plugins:
            if plugin_id not in registry:
                logger.info(f"Skipping plugin '{plugin_id}': not configured")
                continue
            if not registry.is_enabled(plugin_id):
                logger.info(f"Skipping plugin '{plugin_id}': disabled")
                continue
            selected.append(plugin_id)

        if not selected:
            return []

        tasks = [
            self._fetch_one(plugin_id, Router.parameters_for(plugin_id, intent.extracted_parameters))
            for plugin_id in selected
        ]
        results = await asyncio.gather(*tasks)

        succeeded = sum(1 for result in results if result.success)
        logger.info(f"Dispatch complete: {succeeded}/{len(results)} plugins succeeded")

        return list(results)

    async def _fetch_one(self, plugin_id: str, parameters: Dict[str, Any]) -> DataFetchResult:
        """Run one source under the timeout, converting any failure into a result."""
        source = self.sources.get(plugin_id)
        if source is None:
            logger.warning(f"Plugin '{plugin_id}' is enabled but has no data source")
            return DataFetchResult.failed(
                plugin_id, ErrorKind.SOURCE_UNAVAILABLE, f"No data source registered for '{plugin_id}'"
            )

        start = time.perf_counter()
        try:
            payload = await asyncio.wait_for(source.fetch(parameters), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(f"Plugin '{plugin_id}' timed out after {self.timeout_seconds}s")
            return DataFetchResult.failed(
                plugin_id, ErrorKind.SOURCE_UNAVAILABLE, f"Timed out after {self.timeout_seconds}s"
            )
        except DataSourceError as e:
            logger.warning(f"Plugin '{plugin_id}' failed: {e.message}")
            return DataFetchResult.failed(plugin_id, e.kind, e.message)
        except Exception as e:
            logger.error(f"Plugin '{plugin_id}' raised {type(e).__name__}: {e}")
            return DataFetchResult.failed(
                plugin_id, ErrorKind.SOURCE_UNAVAILABLE, f"{type(e).__name__}: {e}"
            )

        if not isinstance(payload, BaseModel):
            logger.warning(f"Plugin '{plugin_id}' returned {type(payload).__name__}, not a record")
            return DataFetchResult.failed(
                plugin_id, ErrorKind.SOURCE_UNAVAILABLE, f"Malformed payload: {type(payload).__name__} is not a record"
            )

        if getattr(payload, "last_updated", None) is None:
            logger.warning(f"Plugin '{plugin_id}' returned a payload without last_updated")
            return DataFetchResult.failed(
                plugin_id, ErrorKind.SOURCE_UNAVAILABLE, "Malformed payload: missing last_updated"
            )

        elapsed = time.perf_counter() - start
        logger.debug(f"Plugin '{plugin_id}' fetched in {elapsed:.3f}s")
        return DataFetchResult.ok(plugin_id, payload)
