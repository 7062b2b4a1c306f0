"""
Custom exceptions for the gateway.

These exceptions let the dispatcher and the API layer distinguish between
upstream HTTP failures (which count against the credential used), timeouts
(which by default do not) and an exhausted credential pool.
"""


class GatewayError(Exception):
    """
    Base exception for all gateway errors.
    
    Carries a human-readable message plus structured details for logging.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UpstreamError(GatewayError):
    """
    Raised when a call to the Gemini API does not produce a usable result.
    
    Surfaced to callers as a 500 with the message.
    """
    pass


class UpstreamHTTPError(UpstreamError):
    """
    Raised when Gemini answers with a non-2xx status.
    
    The message is the provider's error message when the body carries one.
    """
    def __init__(self, message: str, status_code: int, details: dict | None = None):
        super().__init__(message, details)
        self.status_code = status_code


class UpstreamTimeoutError(UpstreamError):
    """
    Raised when the Gemini call exceeds the configured timeout.
    
    Separate from UpstreamHTTPError: a timeout is not reported against the
    credential unless PENALIZE_TIMEOUTS is enabled.
    """
    pass


class NoUsableCredentialError(UpstreamError):
    """Raised when every credential in the pool is permanently failed."""
    pass


class EmptyResultError(UpstreamError):
    """Raised when text extraction succeeds at HTTP level but returns no text."""
    pass
