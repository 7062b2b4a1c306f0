"""
Upstream client: one Gemini call per request, with credential accounting.

Each call selects a key from the credential pool, issues a single
bounded-timeout request and, on a non-2xx status, reports the failure to
the pool before re-raising. The pool rotates its pointer on every report,
so the next request prefers a different key; the current request is not
retried.

Timeouts are not reported by default: a slow network is not evidence of a
bad key. Set penalize_timeouts to report them with timeout_failure_status.
"""

import structlog

from gemini_gateway.llm import prompts
from gemini_gateway.llm.base_client import BaseLLMClient
from gemini_gateway.llm.exceptions import (
    EmptyResultError,
    NoUsableCredentialError,
    UpstreamHTTPError,
    UpstreamTimeoutError,
)
from gemini_gateway.llm.validators import NOT_FOUND, normalize_color_reply
from gemini_gateway.logging_config import mask_credential
from gemini_gateway.monitoring.metrics import upstream_requests_total
from gemini_gateway.pool.manager import CredentialPool

logger = structlog.get_logger(__name__)


class UpstreamClient:
    """Credential-aware wrapper around an LLM client."""
    
    def __init__(
        self,
        llm_client: BaseLLMClient,
        pool: CredentialPool,
        penalize_timeouts: bool = False,
        timeout_failure_status: int = 504,
    ):
        """
        Initialize upstream client.
        
        Args:
            llm_client: Raw inference client
            pool: Credential pool to select from and report to
            penalize_timeouts: Report timeouts against the key used
            timeout_failure_status: Status reported for a penalized timeout
        """
        self.llm_client = llm_client
        self.pool = pool
        self.penalize_timeouts = penalize_timeouts
        self.timeout_failure_status = timeout_failure_status
    
    async def _report(self, api_key: str, status_code: int, operation: str) -> None:
        """Record a failure; a store error here must not mask the upstream error."""
        try:
            await self.pool.report_failure(api_key, status_code)
        except Exception as e:
            logger.warning(
                "Could not record credential failure",
                operation=operation,
                credential=mask_credential(api_key),
                status_code=status_code,
                error=str(e),
                error_type=type(e).__name__,
            )
    
    async def _call(self, api_key: str, parts: list[dict], operation: str) -> str:
        try:
            return await self.llm_client.generate(api_key, parts, operation=operation)
        except UpstreamHTTPError as e:
            upstream_requests_total.labels(call=operation, outcome="http_error").inc()
            await self._report(api_key, e.status_code, operation)
            raise
        except UpstreamTimeoutError:
            upstream_requests_total.labels(call=operation, outcome="timeout").inc()
            if self.penalize_timeouts:
                await self._report(api_key, self.timeout_failure_status, operation)
            else:
                logger.info(
                    "Timeout not counted against credential",
                    operation=operation,
                    credential=mask_credential(api_key),
                )
            raise
    
    async def extract_text(self, image_base64: str, mime_type: str) -> str:
        """
        Extract text from an image.
        
        Args:
            image_base64: Base64-encoded image bytes
            mime_type: Declared media type of the image
        
        Returns:
            Extracted text (never empty)
        
        Raises:
            NoUsableCredentialError: Every key is permanently failed
            EmptyResultError: Gemini returned no text
            UpstreamError: HTTP failure, timeout or network error
        """
        api_key = await self.pool.select_credential()
        if not api_key:
            upstream_requests_total.labels(call="extract", outcome="no_credential").inc()
            raise NoUsableCredentialError("No usable API key")
        
        parts = prompts.build_extraction_parts(image_base64, mime_type)
        text = await self._call(api_key, parts, operation="extract")
        
        if not text:
            upstream_requests_total.labels(call="extract", outcome="empty").inc()
            raise EmptyResultError("Gemini OCR returned empty text")
        
        upstream_requests_total.labels(call="extract", outcome="success").inc()
        return text
    
    async def classify_label(self, label: str) -> str:
        """
        Ask Gemini for the color code of a label.
        
        Args:
            label: Color name as given by the caller
        
        Returns:
            Validated color code, or NOT_FOUND when no key is usable or the
            reply does not match the color-code grammar
        
        Raises:
            UpstreamError: HTTP failure, timeout or network error
        """
        api_key = await self.pool.select_credential()
        if not api_key:
            upstream_requests_total.labels(call="classify", outcome="no_credential").inc()
            return NOT_FOUND
        
        parts = prompts.build_classification_parts(label)
        reply = await self._call(api_key, parts, operation="classify")
        
        code = normalize_color_reply(reply)
        outcome = "miss" if code == NOT_FOUND else "success"
        upstream_requests_total.labels(call="classify", outcome=outcome).inc()
        if code == NOT_FOUND:
            logger.info("Classification miss", label=label, reply=reply[:64])
        return code
