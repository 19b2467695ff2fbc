"""Metrics facade.

Service code should ONLY call the semantic helpers here so we can change backend freely.

Metrics:
- oauth_callbacks_total{provider,outcome}       Callback validations by result
- oauth_request_latency_seconds{endpoint}       Outbound token / profile call latency
- oauth_request_failures_total{endpoint,kind}   Outbound call failures by class
"""

from __future__ import annotations

import logging

from prometheus_client import Counter, Histogram

logger = logging.getLogger("metrics")

_OAUTH_CALLBACKS = Counter(
    "oauth_callbacks_total",
    "OAuth callback validations",
    ["provider", "outcome"],
)
_OAUTH_REQUEST_LATENCY = Histogram(
    "oauth_request_latency_seconds",
    "Latency of outbound OAuth provider calls",
    ["endpoint"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30),
)
_OAUTH_REQUEST_FAILURES = Counter(
    "oauth_request_failures_total",
    "Failed outbound OAuth provider calls",
    ["endpoint", "kind"],
)


def oauth_callback(provider: str, outcome: str) -> None:
    _OAUTH_CALLBACKS.labels(provider=provider, outcome=outcome).inc()
    logger.debug("metric oauth_callbacks_total{provider=%s,outcome=%s} += 1", provider, outcome)


def oauth_request_observed(endpoint: str, latency_seconds: float) -> None:
    _OAUTH_REQUEST_LATENCY.labels(endpoint=endpoint).observe(latency_seconds)


def oauth_request_failed(endpoint: str, kind: str) -> None:
    _OAUTH_REQUEST_FAILURES.labels(endpoint=endpoint, kind=kind).inc()
