"""Sentiment service package initialization."""

__all__ = [
    "types",
    "sanitize",
    "filters",
    "hf_model",
    "rule_model",
    "scoring",
    "aggregator",
    "store",
    "pipeline",
]
