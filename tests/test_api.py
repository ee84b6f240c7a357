"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from api import create_app
from utils.errors import GenerationError
from tests.conftest import FailingSource, FakeGenerator


@pytest.fixture
def generator():
    return FakeGenerator("BTC is trading near $68,000.")


@pytest.fixture
def client(test_db, sources, generator):
    test_db.seed_default_data()
    app = create_app(db_manager=test_db, sources=sources, generator=generator)
    return TestClient(app)


@pytest.fixture
def agent_id(client):
    return client.get("/api/agents").json()[0]["id"]


class TestPluginRoutes:

    @pytest.mark.parametrize("path", ["/api/mcp/crypto/btc", "/api/mcp/financial/crypto/BTC"])
    def test_crypto_price(self, client, path):
        response = client.get(path)
        assert response.status_code == 200
        assert response.json()["symbol"] == "BTC"
        assert "last_updated" in response.json()

    def test_invalid_symbol_is_400(self, client):
        response = client.get("/api/mcp/financial/stock/NOT-VALID")
        assert response.status_code == 400
        assert "Invalid symbol" in response.json()["message"]

    def test_crypto_history(self, client):
        response = client.get("/api/mcp/financial/crypto/ETH/history", params={"days": 3})
        assert response.status_code == 200
        assert len(response.json()) == 4

    def test_crypto_history_default_window(self, client):
        assert len(client.get("/api/mcp/financial/crypto/BTC/history").json()) == 8

    def test_market_summary(self, client):
        body = client.get("/api/mcp/financial/market-summary").json()
        assert {"total_market_cap", "btc_dominance", "top_gainers", "top_losers"} <= set(body)

    def test_latest_news(self, client):
        body = client.get("/api/mcp/news", params={"topic": "bitcoin", "limit": 2}).json()
        assert body["total_count"] == 2
        assert len(body["articles"]) == 2

    def test_news_search_requires_query(self, client):
        response = client.get("/api/mcp/news/search")
        assert response.status_code == 400
        assert response.json() == {"message": "Query parameter is required"}

    def test_news_by_sentiment(self, client):
        body = client.get("/api/mcp/news/sentiment", params={"topic": "crypto", "sentiment": "positive"}).json()
        assert all(article["sentiment"] == "positive" for article in body["articles"])

    def test_news_by_unknown_sentiment_is_400(self, client):
        response = client.get("/api/mcp/news/sentiment", params={"topic": "crypto", "sentiment": "meh"})
        assert response.status_code == 400

    def test_trending(self, client):
        assert "Bitcoin" in client.get("/api/mcp/news/trending").json()

    def test_missing_source_is_503(self, test_db, sources, generator):
        partial = {k: v for k, v in sources.items() if k != "news"}
        client = TestClient(create_app(db_manager=test_db, sources=partial, generator=generator))
        response = client.get("/api/mcp/news/trending")
        assert response.status_code == 503
        assert "message" in response.json()


class TestAgentRoutes:

    def test_list_agents_includes_seeded_agent(self, client):
        agents = client.get("/api/agents").json()
        assert len(agents) == 1
        assert agents[0]["plugins"] == ["crypto", "stock", "market_summary", "news"]

    def test_get_missing_agent_is_404(self, client):
        response = client.get("/api/agents/999")
        assert response.status_code == 404
        assert response.json() == {"message": "Agent not found"}

    def test_create_agent(self, client):
        response = client.post("/api/agents", json={"name": "Crypto Only", "plugins": ["crypto"]})
        assert response.status_code == 201
        created = response.json()
        assert client.get(f"/api/agents/{created['id']}").json()["name"] == "Crypto Only"

    def test_create_agent_with_bad_plugins_is_400(self, client):
        response = client.post("/api/agents", json={"name": "Bad", "plugins": [{"enabled": True}]})
        assert response.status_code == 400

    def test_create_agent_requires_name(self, client):
        response = client.post("/api/agents", json={"plugins": ["crypto"]})
        assert response.status_code == 400
        assert "message" in response.json()

    def test_post_and_list_messages(self, client, agent_id):
        response = client.post(
            "/api/messages", json={"agent_id": agent_id, "role": "user", "content": "hello"}
        )
        assert response.status_code == 201
        messages = client.get(f"/api/agents/{agent_id}/messages").json()
        assert [m["content"] for m in messages] == ["hello"]


class TestChatRoute:

    def test_chat_with_live_data(self, client, agent_id):
        response = client.post(f"/api/agents/{agent_id}/chat", json={"query": "What is the price of BTC?"})

        assert response.status_code == 200
        body = response.json()
        assert body["mcp_data_used"] is True
        assert body["used_sources"][0]["plugin_id"] == "crypto"
        assert body["text"].startswith("BTC is trading near $68,000.")

        messages = client.get(f"/api/agents/{agent_id}/messages").json()
        assert [m["role"] for m in messages] == ["user", "assistant"]
        assert messages[1]["mcp_data_used"] is True
        assert messages[1]["sources"][0]["plugin_id"] == "crypto"

    def test_chat_empty_query_is_400(self, client, agent_id):
        response = client.post(f"/api/agents/{agent_id}/chat", json={"query": "   "})
        assert response.status_code == 400
        assert response.json() == {"message": "Query cannot be empty"}
        assert client.get(f"/api/agents/{agent_id}/messages").json() == []

    def test_chat_unknown_agent_is_404(self, client):
        assert client.post("/api/agents/999/chat", json={"query": "hi"}).status_code == 404

    def test_chat_generation_failure_is_502(self, test_db, sources):
        test_db.seed_default_data()
        app = create_app(
            db_manager=test_db, sources=sources, generator=FakeGenerator(error=GenerationError("LLM down"))
        )
        client = TestClient(app)
        agent_id = client.get("/api/agents").json()[0]["id"]

        response = client.post(f"/api/agents/{agent_id}/chat", json={"query": "What is the price of BTC?"})

        assert response.status_code == 502
        assert response.json() == {"message": "LLM down"}

    def test_chat_source_failure_still_answers(self, test_db, sources, generator):
        test_db.seed_default_data()
        app = create_app(
            db_manager=test_db, sources={**sources, "crypto": FailingSource("crypto")}, generator=generator
        )
        client = TestClient(app)
        agent_id = client.get("/api/agents").json()[0]["id"]

        response = client.post(f"/api/agents/{agent_id}/chat", json={"query": "What is the price of BTC?"})

        assert response.status_code == 200
        assert response.json()["mcp_data_used"] is False
        assert "Live data could not be retrieved" in response.json()["text"]
