"""
Integration tests for the FastAPI application.

The app runs for real; only the backing store (in-memory) and the Gemini
client (scripted) are substituted.
"""

from unittest.mock import AsyncMock, patch

import pytest

from gemini_gateway.llm.exceptions import UpstreamHTTPError, UpstreamTimeoutError
from gemini_gateway.pool.models import PoolState

OCR_BODY = {"imageBase64": "aGVsbG8=", "mimeType": "image/png"}


def test_root_endpoint(api_client):
    client, _ = api_client()
    
    response = client.get("/")
    
    assert response.status_code == 200
    data = response.json()
    assert "version" in data
    assert data["health"] == "/health"


def test_request_id_header(api_client):
    client, _ = api_client()
    
    response = client.get("/api/hex", params={"label": ""})
    
    assert "X-Request-ID" in response.headers


def test_unknown_route(api_client):
    client, _ = api_client()
    
    response = client.get("/api/nope")
    
    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}


class TestOcrEndpoint:
    
    def test_success(self, api_client):
        client, llm = api_client(["Sky Blue\n#87CEEB"])
        
        response = client.post("/api/ocr", json=OCR_BODY)
        
        assert response.status_code == 200
        assert response.json() == {"text": "Sky Blue\n#87CEEB", "source": "Gemini"}
        assert len(llm.calls) == 1
    
    @pytest.mark.parametrize(
        "body",
        [
            {"mimeType": "image/png"},
            {"imageBase64": "aGVsbG8="},
            {"imageBase64": "", "mimeType": "image/png"},
            {},
        ],
    )
    def test_malformed_body(self, api_client, body):
        client, llm = api_client()
        
        response = client.post("/api/ocr", json=body)
        
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}
        assert llm.calls == []
    
    def test_non_json_body(self, api_client):
        client, _ = api_client()
        
        response = client.post(
            "/api/ocr", content=b"not json", headers={"content-type": "application/json"}
        )
        
        assert response.status_code == 400
    
    def test_upstream_error_message_and_accounting(self, api_client, memory_store, credentials):
        client, _ = api_client([UpstreamHTTPError("API key not valid. Please pass a valid API key.", 400)])
        
        response = client.post("/api/ocr", json=OCR_BODY)
        
        assert response.status_code == 500
        assert response.json() == {"error": "API key not valid. Please pass a valid API key."}
        state = PoolState.model_validate_json(memory_store._data["state"][0])
        assert state.permanent_fails == [credentials[0]]
    
    def test_timeout(self, api_client, memory_store):
        client, _ = api_client([UpstreamTimeoutError("Gemini extract timeout after 15s")])
        
        response = client.post("/api/ocr", json=OCR_BODY)
        
        assert response.status_code == 500
        assert response.json() == {"error": "Gemini extract timeout after 15s"}
        assert "state" not in memory_store._data
    
    def test_empty_text(self, api_client):
        client, _ = api_client([""])
        
        response = client.post("/api/ocr", json=OCR_BODY)
        
        assert response.status_code == 500
        assert response.json() == {"error": "Gemini OCR returned empty text"}
    
    def test_no_usable_key(self, api_client):
        client, llm = api_client(GEMINI_KEYS=[])
        
        response = client.post("/api/ocr", json=OCR_BODY)
        
        assert response.status_code == 500
        assert response.json() == {"error": "No usable API key"}
        assert llm.calls == []


class TestHexEndpoint:
    
    def test_lookup_then_cached(self, api_client):
        client, llm = api_client(["#87CEEB"])
        
        first = client.get("/api/hex", params={"label": "Sky   Blue!!"})
        second = client.get("/api/hex", params={"label": "BLUE, SKY"})
        
        assert first.status_code == 200
        assert first.json() == {"hex": "#87CEEB"}
        assert second.json() == {"hex": "#87CEEB"}
        assert len(llm.calls) == 1
    
    def test_color_alias(self, api_client):
        client, _ = api_client(["#FF0000"])
        
        response = client.get("/api/hex", params={"color": "Red"})
        
        assert response.json() == {"hex": "#FF0000"}
    
    def test_bypass_cache(self, api_client):
        client, llm = api_client(["#87CEEB", "#00BFFF"])
        
        client.get("/api/hex", params={"label": "sky blue"})
        response = client.get("/api/hex", params={"label": "sky blue", "bypassCache": "1"})
        
        assert response.json() == {"hex": "#00BFFF"}
        assert len(llm.calls) == 2
    
    def test_bypass_flag_only_one_means_true(self, api_client):
        client, llm = api_client(["#87CEEB"])
        
        client.get("/api/hex", params={"label": "sky blue"})
        client.get("/api/hex", params={"label": "sky blue", "bypassCache": "true"})
        
        assert len(llm.calls) == 1
    
    @pytest.mark.parametrize("params", [{}, {"label": ""}, {"label": "   "}])
    def test_missing_label(self, api_client, params):
        client, llm = api_client()
        
        response = client.get("/api/hex", params=params)
        
        assert response.status_code == 200
        assert response.json() == {"hex": "N/A"}
        assert llm.calls == []
    
    @pytest.mark.parametrize(
        "reply",
        [UpstreamHTTPError("quota", 429), UpstreamTimeoutError("timeout"), "I think it's blue"],
    )
    def test_failures_are_not_found(self, api_client, reply):
        client, _ = api_client([reply])
        
        response = client.get("/api/hex", params={"label": "sky blue"})
        
        assert response.status_code == 200
        assert response.json() == {"hex": "N/A"}


class TestPoolStatusEndpoint:
    
    def test_disabled_by_default(self, api_client):
        client, _ = api_client()
        
        response = client.get("/api/keys/status")
        
        assert response.status_code == 404
    
    def test_masked_status(self, api_client, credentials):
        client, _ = api_client(
            [UpstreamHTTPError("quota", 429)], EXPOSE_POOL_STATUS=True
        )
        client.get("/api/hex", params={"label": "sky blue"})
        
        response = client.get("/api/keys/status")
        
        assert response.status_code == 200
        data = response.json()
        assert data["pool_size"] == 3
        assert data["cooling_down"] == 1
        assert data["available"] == 2
        assert data["permanently_failed"] == 0
        for key in credentials:
            assert key not in response.text


class TestHealthEndpoint:
    
    def test_healthy(self, api_client):
        client, _ = api_client()
        
        response = client.get("/health")
        
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["services"] == {"store": "ok", "credentials": "3/3 usable"}
    
    def test_degraded_without_keys(self, api_client):
        client, _ = api_client(GEMINI_KEYS=[])
        
        response = client.get("/health")
        
        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
    
    def test_unhealthy_when_store_unreachable(self, api_client, memory_store):
        client, _ = api_client()
        
        with patch.object(memory_store, "ping", AsyncMock(return_value=False)):
            response = client.get("/health")
        
        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["services"]["store"] == "unreachable"
        assert data["services"]["credentials"] == "3 configured"
