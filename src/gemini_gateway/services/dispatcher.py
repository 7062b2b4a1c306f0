"""
Request dispatcher for the two request kinds.

- extract_text: passes straight through; failures propagate to the caller
- lookup_hex: cache first, upstream on miss; never raises
"""

import structlog

from gemini_gateway.cache.canonical import canonicalize
from gemini_gateway.cache.response_cache import ResponseCache
from gemini_gateway.llm.validators import NOT_FOUND, is_valid_color_code
from gemini_gateway.services.upstream import UpstreamClient

logger = structlog.get_logger(__name__)


class Dispatcher:
    """Routes requests to the upstream client, applying the cache to color lookups."""
    
    def __init__(self, upstream: UpstreamClient, cache: ResponseCache):
        self.upstream = upstream
        self.cache = cache
    
    async def extract_text(self, image_base64: str, mime_type: str) -> str:
        return await self.upstream.extract_text(image_base64, mime_type)
    
    async def lookup_hex(self, label: str | None, bypass_cache: bool = False) -> str:
        """
        Resolve a color label to a color code.
        
        Labels with no [a-z0-9] content (e.g. Cyrillic or CJK names) have an
        empty canonical key. They are still sent upstream but never cached,
        so unrelated labels cannot share an entry.
        
        Args:
            label: Free-form color name
            bypass_cache: Skip the cache read (the result is still written)
        
        Returns:
            Color code, or NOT_FOUND; errors collapse into NOT_FOUND
        """
        if not label or not label.strip():
            return NOT_FOUND
        
        key = canonicalize(label)
        cacheable = bool(key)
        
        try:
            if cacheable:
                cached = await self.cache.lookup(key, bypass=bypass_cache)
                if cached is not None:
                    return cached
            
            code = await self.upstream.classify_label(label)
            if not is_valid_color_code(code):
                return NOT_FOUND
            if cacheable:
                await self.cache.store(key, code)
            return code
        
        except Exception as e:
            logger.warning(
                "Color lookup failed, returning not-found",
                label=label,
                canonical_key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return NOT_FOUND
