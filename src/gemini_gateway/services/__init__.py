"""
Request orchestration.

- upstream.py: UpstreamClient, Gemini calls with credential accounting
- dispatcher.py: Dispatcher, cache + upstream for the two request kinds
"""

from gemini_gateway.services.dispatcher import Dispatcher
from gemini_gateway.services.upstream import UpstreamClient

__all__ = [
    "Dispatcher",
    "UpstreamClient",
]
