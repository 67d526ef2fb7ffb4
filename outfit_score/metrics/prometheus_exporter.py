"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import Counter

outfit_analysis_total = Counter(
    "outfit_analysis_total",
    "Total number of outfit analysis requests by outcome.",
    ["outcome"],
)

model_attempt_failures_total = Counter(
    "model_attempt_failures_total",
    "Model calls that failed and advanced the fallback list.",
    ["operation"],
)

fallback_response_total = Counter(
    "fallback_response_total",
    "Responses replaced by a canned fallback after all models failed.",
    ["operation"],
)
