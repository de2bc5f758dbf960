"""
Tests for the research query endpoints
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from api.query_endpoints import DEGRADED_ANSWER, DEGRADED_DISCLAIMER
from main import app
from rag.agent import LegalResearchAgent
from rag.response_generator import FALLBACK_ANSWER


@pytest.fixture
def client():
    """Test client with the application lifespan (corpus load) running"""
    with TestClient(app) as test_client:
        yield test_client


class TestQueryEndpoint:
    """Test query endpoint functionality"""

    def test_answer_with_supporting_entries(self, client):
        response = client.post("/api/query", json={"question": "Explain the writ of scire facias"})

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"answer", "supportingEntries", "disclaimer"}
        assert data["supportingEntries"][0]["id"] == "scire-facias"
        assert data["supportingEntries"][0]["matchedKeywords"] == ["scire facias"]
        assert data["supportingEntries"][0]["citations"]
        assert "Scire Facias" in data["answer"]
        assert data["disclaimer"]

    def test_no_match_returns_fallback(self, client):
        response = client.post("/api/query", json={"question": "asdkj qweoiu"})

        assert response.status_code == 200
        data = response.json()
        assert data["answer"] == FALLBACK_ANSWER
        assert data["supportingEntries"] == []
        assert data["disclaimer"]

    @pytest.mark.parametrize("body", [{}, {"question": None}, {"question": ""}])
    def test_missing_question_is_valid(self, client, body):
        response = client.post("/api/query", json=body)

        assert response.status_code == 200
        assert response.json()["answer"] == FALLBACK_ANSWER

    def test_empty_body_is_valid(self, client):
        response = client.post("/api/query")

        assert response.status_code == 200
        assert response.json()["supportingEntries"] == []

    def test_non_string_question_is_coerced(self, client):
        response = client.post("/api/query", json={"question": 1677})

        assert response.status_code == 200
        assert response.json()["answer"] == FALLBACK_ANSWER

    def test_repeated_questions_are_identical(self, client):
        payload = {"question": "What is consideration in contract law?"}

        first = client.post("/api/query", json=payload)
        second = client.post("/api/query", json=payload)

        assert first.content == second.content

    def test_internal_failure_returns_degraded_response(self, client):
        with patch.object(LegalResearchAgent, "answer", side_effect=RuntimeError("boom")):
            response = client.post("/api/query", json={"question": "mandamus"})

        assert response.status_code == 500
        assert response.json() == {
            "answer": DEGRADED_ANSWER,
            "supportingEntries": [],
            "disclaimer": DEGRADED_DISCLAIMER,
        }
        assert "boom" not in response.text

    def test_errors_are_counted(self, client):
        with patch.object(LegalResearchAgent, "answer", side_effect=KeyError("entry")):
            client.post("/api/query", json={"question": "mandamus"})

        counters = client.get("/metrics").json()["counters"]
        errors = [c for c in counters if c["name"] == "query_request_errors_total"]
        assert any(c["labels"] == {"error_type": "programming_error"} for c in errors)


class TestServiceEndpoints:

    def test_query_health(self, client):
        response = client.get("/api/query/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["corpus_size"] >= 15

    def test_root_and_health(self, client):
        assert client.get("/").json()["endpoints"]["query"] == "/api/query"
        assert client.get("/health").json()["status"] == "healthy"

    def test_metrics_snapshot(self, client):
        client.post("/api/query", json={"question": "habeas corpus"})

        data = client.get("/metrics").json()
        names = {c["name"] for c in data["counters"]}
        assert "query_requests_total" in names
        assert "query_processing_seconds" in {h["name"] for h in data["histograms"]}


if __name__ == "__main__":
    pytest.main([__file__])
