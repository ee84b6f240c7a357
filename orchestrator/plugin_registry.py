"""Plugin registry answering which data plugins are configured and usable."""

from typing import Any, Dict, Iterable, Iterator, List, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field


class Plugin(BaseModel):
    """A named, independently enablable data provider."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Plugin identifier, e.g. 'crypto'")
    display_name: str = Field(default="", description="Human-readable name")
    enabled: bool = True
    credential: Optional[str] = Field(default=None, repr=False, description="API key, if the provider needs one")


class PluginRegistry:
    """
    Read-only view over the plugins an agent was configured with.

    Lookups never raise: an unknown id is reported as absent/disabled so a
    stray reference cannot break the query pipeline.

    Example:
        >>> registry = PluginRegistry([Plugin(id="crypto"), Plugin(id="news", enabled=False)])
        >>> registry.is_enabled("crypto")
        True
        >>> registry.is_enabled("news")
        False
        >>> registry.get("weather") is None
        True
    """

    def __init__(self, plugins: Iterable[Plugin] = ()):
        self._plugins: Dict[str, Plugin] = {}
        for plugin in plugins:
            if plugin.id in self._plugins:
                raise ValueError(f"Plugin '{plugin.id}' is configured more than once")
            self._plugins[plugin.id] = plugin

        logger.debug(
            f"Plugin registry: {len(self._plugins)} configured, "
            f"enabled={[p.id for p in self.list_enabled()]}"
        )

    def get(self, plugin_id: Any) -> Optional[Plugin]:
        """Plugin by id, or None if unknown."""
        if not isinstance(plugin_id, str):
            return None
        return self._plugins.get(plugin_id)

    def is_enabled(self, plugin_id: Any) -> bool:
        """True only for a configured plugin that is switched on."""
        plugin = self.get(plugin_id)
        return plugin is not None and plugin.enabled

    def list_enabled(self) -> List[Plugin]:
        """Enabled plugins in configuration order."""
        return [plugin for plugin in self._plugins.values() if plugin.enabled]

    def list_all(self) -> List[Plugin]:
        return list(self._plugins.values())

    def __contains__(self, plugin_id: Any) -> bool:
        return self.get(plugin_id) is not None

    def __len__(self) -> int:
        return len(self._plugins)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._plugins.keys()))

    def __repr__(self) -> str:
        states = {pid: plugin.enabled for pid, plugin in self._plugins.items()}
        return f"<PluginRegistry(plugins={states})>"
