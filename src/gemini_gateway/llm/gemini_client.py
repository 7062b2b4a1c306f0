"""
Gemini client implementation.

Communicates with the Gemini REST API (v1beta generateContent) using a
persistent httpx AsyncClient. The API key travels as the `key` query
parameter, so request URLs must never be logged.
"""

import asyncio
import json
import time
from typing import Any, Optional

import httpx
import structlog

from gemini_gateway.llm.base_client import BaseLLMClient
from gemini_gateway.llm.exceptions import (
    UpstreamError,
    UpstreamHTTPError,
    UpstreamTimeoutError,
)
from gemini_gateway.monitoring.metrics import upstream_latency_seconds

logger = structlog.get_logger(__name__)


def extract_candidate_text(response_data: Any) -> str:
    """Text of the first part of the first candidate, or "" if absent."""
    try:
        text = response_data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return ""
    return text if isinstance(text, str) else ""


def extract_error_message(response: httpx.Response) -> Optional[str]:
    """Provider error message from a Gemini error body ({"error": {"message": ...}})."""
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return None
    return message if isinstance(message, str) and message else None


class GeminiClient(BaseLLMClient):
    """
    Gemini-specific client using httpx for async HTTP communication.
    
    API Endpoints:
    - POST /models/{model}:generateContent?key=...: Generate content
    
    Features:
    - Connection pooling via persistent AsyncClient
    - Whole-call timeout (connect + send + read) enforced with asyncio
    - No retries: rotation to another key benefits later requests only
    """
    
    def __init__(
        self,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        model: str = "gemini-1.5-flash-latest",
        timeout: float = 15.0,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs
    ):
        """
        Initialize Gemini client.
        
        Args:
            base_url: API base URL including version segment
            model: Model name used for every call
            timeout: Whole-call timeout in seconds
            connection_limits: httpx connection pool limits
            transport: Optional httpx transport (tests use httpx.MockTransport)
            **kwargs: Additional config
        """
        super().__init__(base_url, timeout, **kwargs)
        self.model = model
        
        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=10,
                max_connections=50,
                keepalive_expiry=30.0,
            )
        
        self._client: Optional[httpx.AsyncClient] = None
        self._connection_limits = connection_limits
        self._transport = transport
    
    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                transport=self._transport,
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client
    
    async def generate(
        self, api_key: str, parts: list[dict[str, Any]], operation: str = "generate"
    ) -> str:
        """
        POST /models/{model}:generateContent with payload:
        {"contents": [{"parts": [...]}]}
        
        Response:
        {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}
        """
        payload = {"contents": [{"parts": parts}]}
        start_time = time.perf_counter()
        
        client = await self._get_client()
        try:
            response = await asyncio.wait_for(
                client.post(
                    f"/models/{self.model}:generateContent",
                    params={"key": api_key},
                    json=payload,
                ),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning(
                "Gemini request timeout",
                operation=operation,
                timeout=self.timeout,
                error_type=type(e).__name__,
            )
            raise UpstreamTimeoutError(
                f"Gemini {operation} timeout after {self.timeout:g}s",
                details={"timeout": self.timeout},
            ) from e
        except httpx.HTTPError as e:
            # Never include str(e): httpx errors can embed the request URL
            logger.error(
                "Gemini network error",
                operation=operation,
                error_type=type(e).__name__,
            )
            raise UpstreamError(
                f"Gemini {operation} network error",
                details={"error_type": type(e).__name__},
            ) from e
        finally:
            upstream_latency_seconds.labels(call=operation).observe(
                time.perf_counter() - start_time
            )
        
        if response.is_error:
            message = extract_error_message(response) or (
                f"Gemini {operation} error: {response.status_code}"
            )
            logger.error(
                "Gemini HTTP error",
                operation=operation,
                status_code=response.status_code,
                error_message=message,
            )
            raise UpstreamHTTPError(
                message,
                status_code=response.status_code,
                details={"status": response.status_code},
            )
        
        try:
            response_data = response.json()
        except json.JSONDecodeError as e:
            logger.error("Failed to parse Gemini response JSON", operation=operation)
            raise UpstreamError(
                f"Invalid JSON response from Gemini {operation}",
                details={"parse_error": str(e)},
            ) from e
        
        text = extract_candidate_text(response_data)
        logger.info(
            "Gemini generation successful",
            operation=operation,
            latency_ms=int((time.perf_counter() - start_time) * 1000),
            text_length=len(text),
        )
        return text
    
    async def close(self):
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed httpx AsyncClient")
        self._client = None
