"""
Upstream inference client layer.

Components:
- BaseLLMClient: Abstract base class for upstream clients
- GeminiClient: Implementation for the Gemini generateContent API
- prompts: Fixed instruction prompts for extraction and classification
- validators: Color-code grammar and not-found sentinel
- exceptions: Gateway exception hierarchy
"""

from gemini_gateway.llm.base_client import BaseLLMClient
from gemini_gateway.llm.exceptions import (
    EmptyResultError,
    GatewayError,
    NoUsableCredentialError,
    UpstreamError,
    UpstreamHTTPError,
    UpstreamTimeoutError,
)
from gemini_gateway.llm.gemini_client import GeminiClient
from gemini_gateway.llm.validators import (
    NOT_FOUND,
    is_valid_color_code,
    normalize_color_reply,
)

__all__ = [
    "BaseLLMClient",
    "GeminiClient",
    "EmptyResultError",
    "GatewayError",
    "NoUsableCredentialError",
    "UpstreamError",
    "UpstreamHTTPError",
    "UpstreamTimeoutError",
    "NOT_FOUND",
    "is_valid_color_code",
    "normalize_color_reply",
]
