"""
Abstract base client for the upstream inference API.

The client is credential-agnostic: the caller picks an API key from the
credential pool and passes it per call. Reporting failures back to the
pool is the caller's job (see services.upstream).
"""

from abc import ABC, abstractmethod
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for upstream inference clients.
    
    Responsibilities:
    - Send one bounded-timeout generation request per call
    - Return the generated text
    - Translate HTTP failures and timeouts into UpstreamError subclasses
    
    Does NOT handle:
    - Credential selection or failure accounting (CredentialPool)
    - Reply validation (validators)
    - Retries: a failed call is never retried within the same request
    """
    
    def __init__(self, base_url: str, timeout: float = 15.0, **kwargs):
        """
        Initialize base client.
        
        Args:
            base_url: Base URL of the inference API
            timeout: Whole-call timeout in seconds
            **kwargs: Additional provider-specific config
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.extra_config = kwargs
        
        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            base_url=self.base_url,
            timeout=timeout,
        )
    
    @abstractmethod
    async def generate(
        self, api_key: str, parts: list[dict[str, Any]], operation: str = "generate"
    ) -> str:
        """
        Generate text from the given content parts.
        
        Args:
            api_key: Credential to authenticate the call with
            parts: Provider content parts (text and/or inline data)
            operation: Short name used in error messages and logs
        
        Returns:
            Generated text ("" when the provider returned no text)
        
        Raises:
            UpstreamHTTPError: Non-2xx response
            UpstreamTimeoutError: Call exceeded the timeout
            UpstreamError: Network failure or unreadable response
        """
    
    async def close(self):
        """Close client connections. Subclasses holding connections override this."""
        logger.debug("Closing LLM client", client_class=self.__class__.__name__)
    
    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"timeout={self.timeout}s)"
        )
