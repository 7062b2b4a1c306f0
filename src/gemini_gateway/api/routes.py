"""
API routes.

- POST /api/ocr: text extraction, failures surface as 400/500
- GET /api/hex: cached color lookup, always 200
- GET /api/keys/status: masked credential pool status (opt-in)
- GET /health: store reachability and pool summary
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from gemini_gateway.api.dependencies import (
    get_credential_pool,
    get_dispatcher,
    get_settings,
    get_store,
)
from gemini_gateway.api.models import (
    ErrorResponse,
    HealthResponse,
    HexResponse,
    OcrRequest,
    OcrResponse,
    PoolStatusResponse,
)
from gemini_gateway.config import Settings
from gemini_gateway.persistence.store import KeyValueStore
from gemini_gateway.pool.manager import CredentialPool
from gemini_gateway.pool.models import CredentialStatus
from gemini_gateway.services.dispatcher import Dispatcher

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/api/ocr",
    response_model=OcrResponse,
    summary="Extract text from an image",
    responses={
        400: {"model": ErrorResponse, "description": "Malformed request body"},
        500: {"model": ErrorResponse, "description": "Upstream failure or timeout"},
    },
)
async def extract_text(
    request: OcrRequest,
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> OcrResponse:
    """Extract all text from an inline base64 image."""
    logger.info(
        "OCR request received",
        mime_type=request.mime_type,
        payload_chars=len(request.image_base64),
    )
    text = await dispatcher.extract_text(request.image_base64, request.mime_type)
    return OcrResponse(text=text, source="Gemini")


@router.get(
    "/api/hex",
    response_model=HexResponse,
    summary="Resolve a color name to a hex code",
    description="""
    Always returns 200. The hex field holds a color code (#RGB or #RRGGBB)
    or N/A when none could be determined, including on internal errors.
    
    Lookups are cached by canonical label: word order, case and
    punctuation do not matter. bypassCache=1 forces a fresh upstream call.
    """,
)
async def lookup_hex(
    label: Optional[str] = Query(default=None, description="Color name"),
    color: Optional[str] = Query(default=None, description="Alias of label"),
    bypass_cache: str = Query(default="0", alias="bypassCache"),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> HexResponse:
    hex_code = await dispatcher.lookup_hex(
        label if label is not None else color,
        bypass_cache=bypass_cache == "1",
    )
    return HexResponse(hex=hex_code)


@router.get(
    "/api/keys/status",
    response_model=PoolStatusResponse,
    summary="Masked credential pool status",
    responses={404: {"model": ErrorResponse, "description": "Status endpoint disabled"}},
)
async def pool_status(
    pool: CredentialPool = Depends(get_credential_pool),
    settings: Settings = Depends(get_settings),
) -> PoolStatusResponse:
    if not settings.EXPOSE_POOL_STATUS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    
    snapshots = await pool.snapshot()
    counts = {s: 0 for s in CredentialStatus}
    for snapshot in snapshots:
        counts[snapshot.status] += 1
    
    return PoolStatusResponse(
        pool_size=len(snapshots),
        available=counts[CredentialStatus.AVAILABLE],
        cooling_down=counts[CredentialStatus.COOLING_DOWN],
        permanently_failed=counts[CredentialStatus.PERMANENTLY_FAILED],
        credentials=snapshots,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={
        200: {"description": "Healthy or degraded"},
        503: {"description": "Backing store unreachable"},
    },
)
async def health_check(
    store: KeyValueStore = Depends(get_store),
    pool: CredentialPool = Depends(get_credential_pool),
    settings: Settings = Depends(get_settings),
):
    """
    Check the backing store and summarize the credential pool.
    
    The upstream API is not probed: a probe would spend quota on every
    health check.
    """
    services = {}
    usable = 0

    store_ok = await store.ping()
    services["store"] = "ok" if store_ok else "unreachable"

    if not pool.credentials:
        services["credentials"] = "none_configured"
    elif store_ok:
        snapshots = await pool.snapshot()
        usable = sum(1 for s in snapshots if s.status is not CredentialStatus.PERMANENTLY_FAILED)
        services["credentials"] = f"{usable}/{len(snapshots)} usable"
    else:
        services["credentials"] = f"{len(pool.credentials)} configured"

    if not store_ok:
        health_status = "unhealthy"
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif usable == 0:
        health_status = "degraded"
        status_code = status.HTTP_200_OK
    else:
        health_status = "healthy"
        status_code = status.HTTP_200_OK
    
    logger.info("Health check", status=health_status, services=services)
    
    response = HealthResponse(
        status=health_status,
        version=settings.APP_VERSION,
        services=services,
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json"),
    )
