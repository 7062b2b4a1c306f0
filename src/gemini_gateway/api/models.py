"""
API request and response models for FastAPI endpoints.

Field aliases keep the camelCase JSON contract of existing clients.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from gemini_gateway.pool.models import CredentialSnapshot


class OcrRequest(BaseModel):
    """Request body for text extraction."""
    model_config = ConfigDict(populate_by_name=True)
    
    image_base64: str = Field(
        ...,
        alias="imageBase64",
        min_length=1,
        description="Base64-encoded image bytes",
    )
    mime_type: str = Field(
        ...,
        alias="mimeType",
        min_length=1,
        description="Declared media type of the image",
        examples=["image/png", "image/jpeg"],
    )


class OcrResponse(BaseModel):
    """Extracted text plus provenance."""
    
    text: str = Field(description="Extracted text")
    source: str = Field(default="Gemini", description="Provider that produced the text")


class HexResponse(BaseModel):
    """Color lookup result."""
    
    hex: str = Field(
        description="Color code, or N/A when none could be determined",
        examples=["#87CEEB", "N/A"],
    )


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""
    
    error: str


class PoolStatusResponse(BaseModel):
    """Masked credential pool status."""
    
    pool_size: int = Field(ge=0)
    available: int = Field(ge=0)
    cooling_down: int = Field(ge=0)
    permanently_failed: int = Field(ge=0)
    credentials: list[CredentialSnapshot]


class HealthResponse(BaseModel):
    """Service health check response."""
    
    status: str = Field(description="healthy, degraded or unhealthy")
    version: str
    services: dict[str, str]
    timestamp: datetime
