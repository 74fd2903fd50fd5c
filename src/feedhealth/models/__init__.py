"""Domain models for feed health tracking."""

from feedhealth.models.health import (
    FeedHealth,
    FeedHealthModel,
    LoadOutcome,
    decode_failure_counts,
    decode_threshold,
    encode_failure_counts,
    encode_threshold,
)

__all__ = [
    "FeedHealth",
    "FeedHealthModel",
    "LoadOutcome",
    "decode_failure_counts",
    "decode_threshold",
    "encode_failure_counts",
    "encode_threshold",
]
