"""
Data models for the credential pool.

PoolState is the single persisted aggregate. It is serialized with the
camelCase field names used on the wire so existing records stay readable.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class FailureClass(str, Enum):
    """How an upstream failure affects the credential that caused it."""
    
    RATE_LIMITED = "rate_limited"
    INVALID_CREDENTIAL = "invalid_credential"
    OTHER = "other"


class SelectionMode(str, Enum):
    """Which scan produced a selection."""
    
    NORMAL = "normal"
    FALLBACK = "fallback"
    EXHAUSTED = "exhausted"


class CredentialStatus(str, Enum):
    AVAILABLE = "available"
    COOLING_DOWN = "cooling_down"
    PERMANENTLY_FAILED = "permanently_failed"


class PoolState(BaseModel):
    """
    Rotation pointer plus per-credential exclusions.
    
    Timestamps are epoch seconds. permanent_fails only ever grows.
    """
    model_config = ConfigDict(populate_by_name=True)
    
    current_index: int = Field(default=0, ge=0, alias="currentIndex")
    cooldowns: dict[str, float] = Field(
        default_factory=dict,
        description="Credential -> epoch seconds until which it is excluded",
    )
    permanent_fails: list[str] = Field(default_factory=list, alias="permanentFails")
    
    def is_permanently_failed(self, credential: str) -> bool:
        return credential in self.permanent_fails
    
    def is_cooling_down(self, credential: str, now: float) -> bool:
        until = self.cooldowns.get(credential)
        return bool(until) and now < until
    
    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class Selection(BaseModel):
    """Result of a selection scan: the credential (if any) and the new state."""
    model_config = ConfigDict(frozen=True)
    
    credential: Optional[str] = None
    state: PoolState
    mode: SelectionMode
    index: Optional[int] = None


class CredentialSnapshot(BaseModel):
    """Operator view of one credential; never carries the full secret."""
    
    position: int
    credential: str = Field(description="Masked credential")
    status: CredentialStatus
    cooldown_until: Optional[float] = None
    current: bool = False
