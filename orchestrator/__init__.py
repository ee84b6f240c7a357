"""Orchestrator module for intent classification, plugin policy and dispatch."""

from .intent_classifier import IntentClassifier, QueryIntent, PluginId, PLUGIN_PRIORITY
from .plugin_registry import Plugin, PluginRegistry
from .routing import Router
from .dispatcher import DataFetchResult, QueryOrchestrator
from .langgraph_flow import QueryGraph

__all__ = [
    "IntentClassifier",
    "QueryIntent",
    "PluginId",
    "PLUGIN_PRIORITY",
    "Plugin",
    "PluginRegistry",
    "Router",
    "DataFetchResult",
    "QueryOrchestrator",
    "QueryGraph",
]
