"""Routing of extracted query parameters to the plugin that consumes them."""

from typing import Any, Dict, Mapping

from orchestrator.intent_classifier import PluginId


class Router:
    """Maps intent parameter names onto each plugin's ``fetch`` parameter names."""

    # plugin -> {intent parameter name: fetch parameter name}
    PARAMETER_ROUTES: Dict[str, Dict[str, str]] = {
        PluginId.CRYPTO.value: {
            "crypto_symbol": "symbol",
            "days": "days",
        },
        PluginId.STOCK.value: {
            "stock_symbol": "symbol",
        },
        PluginId.MARKET_SUMMARY.value: {},
        PluginId.NEWS.value: {
            "news_topic": "topic",
            "news_query": "query",
            "news_sentiment": "sentiment",
            "news_limit": "limit",
        },
    }

    @classmethod
    def parameters_for(cls, plugin_id: str, extracted: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Select the parameters relevant to one plugin.

        Args:
            plugin_id: Target plugin
            extracted: All parameters extracted from the query

        Returns:
            Parameters renamed for the plugin's ``fetch``; empty for unknown plugins
        """
        routes = cls.PARAMETER_ROUTES.get(plugin_id, {})
        return {
            target: extracted[source]
            for source, target in routes.items()
            if extracted.get(source) is not None
        }

