"""
Credential pool: API key rotation with cooldown and permanent failure.

- models.py: PoolState aggregate and status enums
- policy.py: Pure selection / failure-report transitions
- manager.py: CredentialPool, store-backed read-modify-write
"""

from gemini_gateway.pool.manager import CredentialPool
from gemini_gateway.pool.models import (
    CredentialSnapshot,
    CredentialStatus,
    FailureClass,
    PoolState,
    Selection,
    SelectionMode,
)
from gemini_gateway.pool.policy import (
    classify_failure,
    report_failure,
    select_credential,
)

__all__ = [
    "CredentialPool",
    "CredentialSnapshot",
    "CredentialStatus",
    "FailureClass",
    "PoolState",
    "Selection",
    "SelectionMode",
    "classify_failure",
    "report_failure",
    "select_credential",
]
