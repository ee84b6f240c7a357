"""
HTTP routes: plugin data endpoints, agent management and chat.

Handlers only translate between HTTP and the data sources, database and
agent; error-to-status mapping lives in ``api.errors``.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Query, Request
from loguru import logger

from agents import AgentConfig, AgentResponse, InsightsAgent
from data_collector import (
    CryptoSource,
    HistoricalDataPoint,
    MarketSummarySource,
    NewsSource,
    StockSource,
)
from data_collector.base import DataSource
from database import DatabaseManager
from utils.errors import InvalidInputError, SourceUnavailableError
from .schemas import AgentCreate, ChatRequest, MessageCreate

router = APIRouter(prefix="/api")


def _db(request: Request) -> DatabaseManager:
    return request.app.state.db_manager


def _source(request: Request, plugin_id: str) -> Any:
    source: DataSource = request.app.state.sources.get(plugin_id)
    if source is None:
        raise SourceUnavailableError(f"No data source registered for '{plugin_id}'")
    return source


def _digest(digest) -> Dict[str, Any]:
    return {**digest.model_dump(mode="json"), "total_count": digest.total_count}


def _get_agent_or_404(request: Request, agent_id: int):
    agent = _db(request).get_agent(agent_id)
    if agent is None:
        raise HTTPException(status_code=404, detail="Agent not found")
    return agent


# --- Plugin data ---

@router.get("/mcp/crypto/{symbol}", tags=["mcp"])
@router.get("/mcp/financial/crypto/{symbol}", tags=["mcp"])
async def get_crypto_price(symbol: str, request: Request):
    source: CryptoSource = _source(request, "crypto")
    return await source.get_price(symbol)


@router.get("/mcp/financial/crypto/{symbol}/history", tags=["mcp"])
async def get_crypto_history(
    symbol: str, request: Request, days: int = Query(7)
) -> List[HistoricalDataPoint]:
    source: CryptoSource = _source(request, "crypto")
    return await source.get_history(symbol, days)


@router.get("/mcp/financial/stock/{symbol}", tags=["mcp"])
async def get_stock_price(symbol: str, request: Request):
    source: StockSource = _source(request, "stock")
    return await source.get_price(symbol)


@router.get("/mcp/financial/market-summary", tags=["mcp"])
async def get_market_summary(request: Request):
    source: MarketSummarySource = _source(request, "market_summary")
    return await source.get_summary()


@router.get("/mcp/news", tags=["mcp"])
async def get_latest_news(request: Request, topic: str = "cryptocurrency", limit: int = 5):
    source: NewsSource = _source(request, "news")
    return _digest(await source.get_latest_news(topic, limit))


@router.get("/mcp/news/search", tags=["mcp"])
async def search_news(request: Request, query: str = "", limit: int = 5):
    if not query.strip():
        raise HTTPException(status_code=400, detail="Query parameter is required")
    source: NewsSource = _source(request, "news")
    return _digest(await source.search_news(query, limit))


@router.get("/mcp/news/sentiment", tags=["mcp"])
async def get_news_by_sentiment(request: Request, topic: str = "", sentiment: str = "", limit: int = 5):
    if not topic.strip():
        raise HTTPException(
            status_code=400,
            detail="Topic and valid sentiment (positive, negative, neutral) parameters are required",
        )
    source: NewsSource = _source(request, "news")
    return _digest(await source.get_news_by_sentiment(topic, sentiment, limit))


@router.get("/mcp/news/trending", tags=["mcp"])
async def get_trending_topics(request: Request) -> List[str]:
    source: NewsSource = _source(request, "news")
    return await source.get_trending_topics()


# --- Agents and messages ---

@router.get("/agents", tags=["agents"])
def list_agents(request: Request) -> List[dict]:
    return [agent.to_dict() for agent in _db(request).get_all_agents()]


@router.get("/agents/{agent_id}", tags=["agents"])
def get_agent(agent_id: int, request: Request) -> dict:
    return _get_agent_or_404(request, agent_id).to_dict()


@router.post("/agents", tags=["agents"], status_code=201)
def create_agent(body: AgentCreate, request: Request) -> dict:
    try:
        AgentConfig.from_record(body.model_dump())
    except ValueError as e:
        raise InvalidInputError(f"Invalid agent configuration: {e}") from e
    agent = _db(request).create_agent(**body.model_dump())
    return agent.to_dict()


@router.get("/agents/{agent_id}/messages", tags=["agents"])
def list_messages(agent_id: int, request: Request) -> List[dict]:
    return [message.to_dict() for message in _db(request).get_chat_messages_by_agent(agent_id)]


@router.post("/messages", tags=["agents"], status_code=201)
def create_message(body: MessageCreate, request: Request) -> dict:
    _get_agent_or_404(request, body.agent_id)
    message = _db(request).create_chat_message(**body.model_dump())
    return message.to_dict()


@router.post("/agents/{agent_id}/chat", tags=["chat"])
async def chat(agent_id: int, body: ChatRequest, request: Request) -> AgentResponse:
    record = _get_agent_or_404(request, agent_id)
    agent = InsightsAgent(
        AgentConfig.from_record(record.to_dict()),
        sources=request.app.state.sources,
        generator=request.app.state.generator,
    )

    response = await agent.process_query(body.query)

    db = _db(request)
    db.create_chat_message(agent_id=agent_id, role="user", content=body.query)
    db.create_chat_message(
        agent_id=agent_id,
        role="assistant",
        content=response.text,
        mcp_data_used=response.mcp_data_used,
        sources=[source.model_dump(mode="json") for source in response.used_sources],
    )
    logger.info(
        f"Agent {agent_id} answered (mcp_data_used={response.mcp_data_used}, "
        f"sources={[s.plugin_id for s in response.used_sources]})"
    )
    return response
