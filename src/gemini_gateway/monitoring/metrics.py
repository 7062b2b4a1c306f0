"""Custom Prometheus metrics for Gemini Gateway.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- credential_selections_total{mode="fallback"} (every key is cooling down)
- credential_selections_total{mode="exhausted"} (every key is permanently failed)
- credential_failures_total (rate of rate-limit and invalid-key responses)
"""

from prometheus_client import Counter, Histogram

# === Upstream Metrics ===

upstream_requests_total = Counter(
    "upstream_requests_total",
    "Total Gemini calls by call type and outcome",
    ["call", "outcome"],
)
"""
Labels:
- call: extract, classify
- outcome: success, http_error, timeout, empty, miss, no_credential
"""

upstream_latency_seconds = Histogram(
    "upstream_latency_seconds",
    "Gemini call latency in seconds",
    ["call"],
    buckets=[0.25, 0.5, 1.0, 2.0, 4.0, 8.0, 15.0],
)

# === Credential Pool Metrics ===

credential_selections_total = Counter(
    "credential_selections_total",
    "Credential selections by scan mode",
    ["mode"],
)
"""
Labels:
- mode: normal, fallback (all keys cooling down), exhausted (no key left)

Alert thresholds:
- WARN: any fallback selection
- CRITICAL: any exhausted selection
"""

credential_failures_total = Counter(
    "credential_failures_total",
    "Upstream failures recorded against credentials by class",
    ["failure_class"],
)

# === Cache Metrics ===

cache_lookups_total = Counter(
    "cache_lookups_total",
    "Hex cache lookups by result",
    ["result"],
)
"""
Labels:
- result: hit, miss, expired, bypass
"""
