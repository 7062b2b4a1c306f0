"""
Store-backed credential pool.

Wraps the pure transitions in policy.py with whole-aggregate
read-modify-write against the backing store. There is no compare-and-swap:
two requests that select or report at the same time can both read the same
state and the later write wins. Lost pointer advances or lost failure
reports are tolerated; a credential that keeps failing is reported again
by a later request.
"""

import time
from collections.abc import Sequence
from typing import Callable, Optional

import structlog
from pydantic import ValidationError

from gemini_gateway.logging_config import mask_credential
from gemini_gateway.monitoring.metrics import (
    credential_failures_total,
    credential_selections_total,
)
from gemini_gateway.persistence.store import KeyValueStore
from gemini_gateway.pool import policy
from gemini_gateway.pool.models import (
    CredentialSnapshot,
    CredentialStatus,
    FailureClass,
    PoolState,
    SelectionMode,
)

logger = structlog.get_logger(__name__)


class CredentialPool:
    """
    Rotating pool of upstream API keys.
    
    State is created lazily: a missing or unreadable record is treated as a
    fresh pool (pointer at 0, no cooldowns, no failures).
    """
    
    def __init__(
        self,
        store: KeyValueStore,
        credentials: Sequence[str],
        state_key: str = "state",
        cooldown_seconds: float = 30 * 24 * 60 * 60,
        rate_limit_statuses: Sequence[int] = tuple(policy.DEFAULT_RATE_LIMIT_STATUSES),
        invalid_statuses: Sequence[int] = tuple(policy.DEFAULT_INVALID_CREDENTIAL_STATUSES),
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize credential pool.
        
        Args:
            store: Backing key-value store
            credentials: Ordered API keys
            state_key: Store key of the PoolState aggregate
            cooldown_seconds: Cooldown after a first rate-limit failure
            rate_limit_statuses: HTTP statuses treated as quota exhaustion
            invalid_statuses: HTTP statuses treated as a bad/forbidden key
            clock: Time source returning epoch seconds
        """
        self.store = store
        self.credentials = list(credentials)
        self.state_key = state_key
        self.cooldown_seconds = cooldown_seconds
        self.rate_limit_statuses = frozenset(rate_limit_statuses)
        self.invalid_statuses = frozenset(invalid_statuses)
        self._clock = clock
    
    def __len__(self) -> int:
        return len(self.credentials)
    
    async def load_state(self) -> PoolState:
        raw = await self.store.get(self.state_key)
        if raw is None:
            return PoolState()
        try:
            return PoolState.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Discarding unreadable pool state",
                state_key=self.state_key,
                error=str(e),
            )
            return PoolState()
    
    async def save_state(self, state: PoolState) -> None:
        await self.store.put(self.state_key, state.to_json())
    
    async def select_credential(self) -> Optional[str]:
        """
        Select a credential for the next upstream call.
        
        Returns:
            API key, or None when every key is permanently failed
        """
        state = await self.load_state()
        selection = policy.select_credential(state, self.credentials, self._clock())
        
        credential_selections_total.labels(mode=selection.mode.value).inc()
        
        if selection.mode is SelectionMode.EXHAUSTED:
            logger.error(
                "No usable credential",
                pool_size=len(self.credentials),
                permanently_failed=len(state.permanent_fails),
            )
            return None
        
        if selection.mode is SelectionMode.FALLBACK:
            logger.warning(
                "All credentials cooling down, using fallback",
                credential=mask_credential(selection.credential),
                index=selection.index,
            )
        
        if selection.state.current_index != state.current_index:
            await self.save_state(selection.state)
        
        logger.debug(
            "Credential selected",
            credential=mask_credential(selection.credential),
            index=selection.index,
            mode=selection.mode.value,
        )
        return selection.credential
    
    def classify(self, status_code: int) -> FailureClass:
        return policy.classify_failure(
            status_code, self.rate_limit_statuses, self.invalid_statuses
        )
    
    async def report_failure(self, credential: str, status_code: int) -> PoolState:
        """
        Record an upstream failure and rotate the pointer.
        
        Args:
            credential: API key used for the failed call
            status_code: Upstream HTTP status
        
        Returns:
            The state that was written
        """
        failure_class = self.classify(status_code)
        state = await self.load_state()
        new_state = policy.report_failure(
            state,
            self.credentials,
            credential,
            failure_class,
            now=self._clock(),
            cooldown_seconds=self.cooldown_seconds,
        )
        await self.save_state(new_state)
        
        credential_failures_total.labels(failure_class=failure_class.value).inc()
        
        newly_failed = (
            new_state.is_permanently_failed(credential)
            and not state.is_permanently_failed(credential)
        )
        logger.warning(
            "Credential failure recorded",
            credential=mask_credential(credential),
            status_code=status_code,
            failure_class=failure_class.value,
            cooldown_until=new_state.cooldowns.get(credential),
            permanently_failed=new_state.is_permanently_failed(credential),
            newly_failed=newly_failed,
            next_index=new_state.current_index,
        )
        return new_state
    
    async def snapshot(self) -> list[CredentialSnapshot]:
        """Masked per-credential status for operators."""
        state = await self.load_state()
        now = self._clock()
        current = state.current_index % len(self.credentials) if self.credentials else None
        
        snapshots = []
        for position, credential in enumerate(self.credentials):
            if state.is_permanently_failed(credential):
                status = CredentialStatus.PERMANENTLY_FAILED
            elif state.is_cooling_down(credential, now):
                status = CredentialStatus.COOLING_DOWN
            else:
                status = CredentialStatus.AVAILABLE
            snapshots.append(
                CredentialSnapshot(
                    position=position,
                    credential=mask_credential(credential),
                    status=status,
                    cooldown_until=state.cooldowns.get(credential),
                    current=position == current,
                )
            )
        return snapshots
