"""Monitoring and metrics instrumentation for Gemini Gateway.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from gemini_gateway.monitoring.metrics import (
    cache_lookups_total,
    credential_failures_total,
    credential_selections_total,
    upstream_latency_seconds,
    upstream_requests_total,
)

__all__ = [
    "cache_lookups_total",
    "credential_failures_total",
    "credential_selections_total",
    "upstream_latency_seconds",
    "upstream_requests_total",
]
