"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List, Optional
from functools import lru_cache


FINANCIAL_AGENT_PROMPT = (
    "You are a financial insights agent with access to real-time market data "
    "through MCP plugins. Your goal is to provide accurate, up-to-date information "
    "about financial markets, cryptocurrency prices, and related news. "
    "Always specify the source and timestamp of your data."
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # LLM Providers
    GEMINI_API_KEY: str = Field(default="")
    OPENROUTER_API_KEY: Optional[str] = Field(default=None)

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./insights_agent.db")

    # App Settings
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: str = Field(default="logs")

    # HTTP surface
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 5000

    # LLM Settings
    PRIMARY_LLM_MODEL: str = "gemini-2.5-flash"
    FALLBACK_LLM_MODEL: str = "nousresearch/nous-hermes-2-yi-34b"
    LLM_TEMPERATURE: float = 0.3
    LLM_MAX_TOKENS: int = 2048

    # Timeouts (seconds)
    DATA_COLLECTION_TIMEOUT: float = 10.0

    # Data sources
    MOCK_DATA_SEED: Optional[int] = None  # None = fresh entropy per process
    NEWS_DEFAULT_LIMIT: int = 5

    # Seeded on first start
    DEFAULT_USERNAME: str = "demo_user"
    DEFAULT_AGENT_NAME: str = "Financial Insights Agent"
    DEFAULT_SYSTEM_PROMPT: str = FINANCIAL_AGENT_PROMPT
    DEFAULT_PLUGINS: List[str] = ["crypto", "stock", "market_summary", "news"]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
