"""Request and response bodies for the HTTP API."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from config import settings


class AgentCreate(BaseModel):
    """Body for POST /api/agents."""

    model_config = ConfigDict(protected_namespaces=())

    name: str = Field(..., min_length=1)
    base_model: str = Field(default_factory=lambda: settings.PRIMARY_LLM_MODEL)
    system_prompt: str = Field(default_factory=lambda: settings.DEFAULT_SYSTEM_PROMPT)
    plugins: List[Any] = Field(
        default_factory=lambda: list(settings.DEFAULT_PLUGINS),
        description="Plugin ids, or {id, enabled} objects",
    )
    user_id: Optional[int] = None


class MessageCreate(BaseModel):
    """Body for POST /api/messages."""
    agent_id: int
    role: str = Field(..., pattern="^(user|assistant)$")
    content: str = Field(..., min_length=1)
    mcp_data_used: bool = False
    sources: Optional[List[dict]] = None


class ChatRequest(BaseModel):
    """Body for POST /api/agents/{id}/chat."""
    query: str = Field(..., description="Natural-language question for the agent")
