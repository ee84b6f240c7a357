"""Agent configuration and response schemas using Pydantic."""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Any, Dict, List, Mapping, Optional, Tuple
from datetime import datetime

from config import settings
from orchestrator.intent_classifier import PluginId
from orchestrator.plugin_registry import Plugin


PLUGIN_DISPLAY_NAMES: Dict[str, str] = {
    PluginId.CRYPTO.value: "Crypto Prices",
    PluginId.STOCK.value: "Stock Prices",
    PluginId.MARKET_SUMMARY.value: "Market Summary",
    PluginId.NEWS.value: "News & Events",
}

# Older agent rows used one "financial" plugin for every price feed
LEGACY_PLUGIN_ALIASES: Dict[str, List[str]] = {
    "financial": [PluginId.CRYPTO.value, PluginId.STOCK.value, PluginId.MARKET_SUMMARY.value],
}


def build_plugin(plugin_id: str, enabled: bool = True, credential: Optional[str] = None) -> Plugin:
    """Plugin with its standard display name."""
    return Plugin(
        id=plugin_id,
        display_name=PLUGIN_DISPLAY_NAMES.get(plugin_id, plugin_id.replace("_", " ").title()),
        enabled=enabled,
        credential=credential,
    )


def expand_plugins(entries: List[Any]) -> Tuple[Plugin, ...]:
    """
    Normalize stored plugin entries into Plugin objects.

    Entries may be plain ids ("crypto"), legacy aliases ("financial") or
    dicts with ``id``/``enabled``/``credential``. Later duplicates are dropped.
    """
    plugins: Dict[str, Plugin] = {}
    for entry in entries or []:
        if isinstance(entry, Plugin):
            candidates = [entry]
        elif isinstance(entry, str):
            ids = LEGACY_PLUGIN_ALIASES.get(entry, [entry])
            candidates = [build_plugin(plugin_id) for plugin_id in ids]
        elif isinstance(entry, Mapping):
            plugin_id = entry.get("id")
            if not plugin_id:
                raise ValueError(f"Plugin entry without id: {entry!r}")
            ids = LEGACY_PLUGIN_ALIASES.get(plugin_id, [plugin_id])
            candidates = [
                build_plugin(
                    pid,
                    enabled=bool(entry.get("enabled", True)),
                    credential=entry.get("credential") or entry.get("api_key") or None,
                )
                for pid in ids
            ]
        else:
            raise ValueError(f"Unsupported plugin entry: {entry!r}")

        for plugin in candidates:
            plugins.setdefault(plugin.id, plugin)

    return tuple(plugins.values())


class AgentConfig(BaseModel):
    """Immutable configuration of one agent instance."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    name: str = Field(default_factory=lambda: settings.DEFAULT_AGENT_NAME)
    model_identifier: str = Field(default_factory=lambda: settings.PRIMARY_LLM_MODEL)
    system_prompt: str = Field(default_factory=lambda: settings.DEFAULT_SYSTEM_PROMPT)
    plugins: Tuple[Plugin, ...] = ()

    @classmethod
    def default(cls) -> "AgentConfig":
        """Configuration of the demo agent, all default plugins enabled."""
        return cls(plugins=expand_plugins(list(settings.DEFAULT_PLUGINS)))

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "AgentConfig":
        """Build from a persisted agent row (see ``AgentRecord.to_dict``)."""
        return cls(
            name=record.get("name") or settings.DEFAULT_AGENT_NAME,
            model_identifier=record.get("base_model") or settings.PRIMARY_LLM_MODEL,
            system_prompt=record.get("system_prompt") or settings.DEFAULT_SYSTEM_PROMPT,
            plugins=expand_plugins(record.get("plugins") or []),
        )

    def with_plugin_enabled(self, plugin_id: str, enabled: bool) -> "AgentConfig":
        """Copy of this configuration with one plugin switched on or off."""
        if not any(plugin.id == plugin_id for plugin in self.plugins):
            raise ValueError(f"Plugin '{plugin_id}' is not configured")
        plugins = tuple(
            plugin.model_copy(update={"enabled": enabled}) if plugin.id == plugin_id else plugin
            for plugin in self.plugins
        )
        return self.model_copy(update={"plugins": plugins})


class SourceReference(BaseModel):
    """Provenance of data that contributed to a response."""
    plugin_id: str
    fetched_at: datetime


class AgentResponse(BaseModel):
    """Final answer returned by ``process_query``."""
    text: str
    mcp_data_used: bool = False
    used_sources: List[SourceReference] = []

    @model_validator(mode="after")
    def _check_provenance(self) -> "AgentResponse":
        if self.mcp_data_used != bool(self.used_sources):
            raise ValueError("mcp_data_used must be true exactly when used_sources is non-empty")
        return self
