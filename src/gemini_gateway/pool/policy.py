"""
Credential pool state transitions.

Pure functions over an explicit PoolState: no I/O, no clock reads. The
caller supplies `now` and persists the returned state. Inputs are never
mutated; every transition returns a new PoolState.

Policy:
- Selection scans cyclically from the pointer for a credential that is
  neither permanently failed nor cooling down.
- With nothing usable, the first non-permanently-failed credential is
  returned anyway (availability over rate-limit compliance).
- A rate-limited credential gets one cooldown. Failing again after that
  cooldown elapsed makes it permanently failed.
- An invalid credential is permanently failed on first report.
- Every failure report advances the pointer by one.
"""

from collections.abc import Collection, Sequence

from gemini_gateway.pool.models import (
    FailureClass,
    PoolState,
    Selection,
    SelectionMode,
)

DEFAULT_RATE_LIMIT_STATUSES = frozenset({429})
DEFAULT_INVALID_CREDENTIAL_STATUSES = frozenset({400, 403})


def classify_failure(
    status_code: int,
    rate_limit_statuses: Collection[int] = DEFAULT_RATE_LIMIT_STATUSES,
    invalid_statuses: Collection[int] = DEFAULT_INVALID_CREDENTIAL_STATUSES,
) -> FailureClass:
    """Map an upstream HTTP status to its failure class."""
    if status_code in rate_limit_statuses:
        return FailureClass.RATE_LIMITED
    if status_code in invalid_statuses:
        return FailureClass.INVALID_CREDENTIAL
    return FailureClass.OTHER


def select_credential(
    state: PoolState,
    credentials: Sequence[str],
    now: float,
) -> Selection:
    """
    Pick the next usable credential.
    
    Args:
        state: Current pool state
        credentials: Ordered credential list from configuration
        now: Current time in epoch seconds
    
    Returns:
        Selection with the chosen credential (None when every credential is
        permanently failed or the list is empty) and the updated state
    """
    count = len(credentials)
    if count == 0:
        return Selection(credential=None, state=state, mode=SelectionMode.EXHAUSTED)
    
    start = state.current_index % count
    for offset in range(count):
        index = (start + offset) % count
        credential = credentials[index]
        if not credential:
            continue
        if state.is_permanently_failed(credential):
            continue
        if state.is_cooling_down(credential, now):
            continue
        return Selection(
            credential=credential,
            state=state.model_copy(update={"current_index": index}),
            mode=SelectionMode.NORMAL,
            index=index,
        )
    
    # Everything is cooling down or failed: hand out a cooled-down key anyway
    for index, credential in enumerate(credentials):
        if not credential or state.is_permanently_failed(credential):
            continue
        return Selection(
            credential=credential,
            state=state.model_copy(update={"current_index": index}),
            mode=SelectionMode.FALLBACK,
            index=index,
        )
    
    return Selection(credential=None, state=state, mode=SelectionMode.EXHAUSTED)


def report_failure(
    state: PoolState,
    credentials: Sequence[str],
    credential: str,
    failure_class: FailureClass,
    now: float,
    cooldown_seconds: float,
) -> PoolState:
    """
    Record a failed upstream call made with `credential`.
    
    Args:
        state: Current pool state
        credentials: Ordered credential list from configuration
        credential: Credential used for the failed call
        failure_class: Result of classify_failure for the response status
        now: Current time in epoch seconds
        cooldown_seconds: Cooldown length for a first rate-limit failure
    
    Returns:
        New PoolState with exclusions updated and the pointer advanced
    """
    cooldowns = dict(state.cooldowns)
    permanent_fails = list(state.permanent_fails)
    
    if failure_class is FailureClass.RATE_LIMITED:
        cooldown_until = cooldowns.get(credential)
        if not cooldown_until:
            cooldowns[credential] = now + cooldown_seconds
        elif now > cooldown_until and credential not in permanent_fails:
            permanent_fails.append(credential)
    elif failure_class is FailureClass.INVALID_CREDENTIAL:
        if credential not in permanent_fails:
            permanent_fails.append(credential)
    
    current_index = state.current_index
    if credentials:
        current_index = (current_index + 1) % len(credentials)
    
    return PoolState(
        current_index=current_index,
        cooldowns=cooldowns,
        permanent_fails=permanent_fails,
    )
