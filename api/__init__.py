"""HTTP API for the financial insights agent."""

from typing import Mapping, Optional

from fastapi import FastAPI

from agents.llm_provider import TextGenerator
from data_collector.base import DataSource, default_sources
from database import DatabaseManager, get_db_manager
from .errors import register_error_handlers
from .routes import router


def create_app(
    db_manager: Optional[DatabaseManager] = None,
    sources: Optional[Mapping[str, DataSource]] = None,
    generator: Optional[TextGenerator] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        db_manager: Database to use (process-wide manager by default)
        sources: Data sources keyed by plugin id (simulated sources by default)
        generator: Language-generation backend (Gemini/OpenRouter by default)
    """
    app = FastAPI(title="Financial Insights Agent")
    app.state.db_manager = db_manager or get_db_manager()
    app.state.sources = dict(sources) if sources is not None else default_sources()
    app.state.generator = generator

    register_error_handlers(app)
    app.include_router(router)

    @app.get("/health", tags=["system"])
    def health():
        return {"ok": True}

    return app


__all__ = ["create_app"]
