"""
FastAPI API routes and endpoints.

- routes.py: POST /api/ocr, GET /api/hex, GET /api/keys/status, GET /health
- dependencies.py: Dependency injection for store, pool, cache, clients
- models.py: API request/response models
- error_handlers.py: Exception handlers for structured error responses
- middleware.py: Request tracing
"""

from gemini_gateway.api import dependencies, error_handlers, models
from gemini_gateway.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "error_handlers",
    "models",
]
