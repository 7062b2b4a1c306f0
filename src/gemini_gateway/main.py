"""
FastAPI application entry point for Gemini Gateway.
"""

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from gemini_gateway.api.dependencies import get_llm_client, get_store
from gemini_gateway.api.error_handlers import EXCEPTION_HANDLERS
from gemini_gateway.api.middleware import RequestTracingMiddleware
from gemini_gateway.api.routes import router
from gemini_gateway.config import settings
from gemini_gateway.logging_config import configure_logging
from gemini_gateway.persistence.redis_client import RedisClient

# Configure structured logging before any other imports
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Gemini access gateway with API key rotation and cached color lookups",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Request tracing middleware (must be first for request_id in all logs)
app.add_middleware(RequestTracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

app.include_router(router)


@app.on_event("startup")
async def startup():
    """Application startup - report configuration (never the keys themselves)."""
    logger.info(
        "Application startup",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        model=settings.GEMINI_MODEL,
        credentials=len(settings.GEMINI_KEYS),
        store_backend=settings.STORE_BACKEND,
        penalize_timeouts=settings.PENALIZE_TIMEOUTS,
    )
    if not settings.GEMINI_KEYS:
        logger.error("No Gemini API keys configured (GEMINI_KEYS)")


@app.on_event("shutdown")
async def shutdown():
    """Application shutdown - close pooled connections."""
    logger.info("Application shutdown")
    await get_llm_client().close()
    if settings.STORE_BACKEND.lower() != "memory":
        await get_store().close()
        await RedisClient.close_async_pool()
    logger.info("Application shutdown complete")


if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """Root endpoint with API documentation links."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(
        "gemini_gateway.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Only for development
    )
