"""Feed health models and persisted payload codecs.

The failure-count map is stored as a JSON object of feed title to count.
The slow-threshold override is stored as a bare JSON number.

Example:
    >>> from feedhealth.models.health import encode_failure_counts, decode_failure_counts
    >>> data = encode_failure_counts({"Hacker News": 2})
    >>> data
    b'{"Hacker News":2}'
    >>> decode_failure_counts(data)
    {'Hacker News': 2}
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from feedhealth.core.exceptions import CodecError

_COUNTS_ADAPTER: TypeAdapter[dict[str, NonNegativeInt]] = TypeAdapter(dict[str, NonNegativeInt])
_THRESHOLD_ADAPTER: TypeAdapter[float] = TypeAdapter(float)


class LoadOutcome(str, Enum):
    """Classification of a single feed load.

    Example:
        >>> LoadOutcome.SLOW.value
        'slow'
        >>> list(LoadOutcome)
        [<LoadOutcome.FAST: 'fast'>, <LoadOutcome.SLOW: 'slow'>, <LoadOutcome.FAILED: 'failed'>]
    """

    FAST = "fast"  # Resets the failure count
    SLOW = "slow"  # Increments, capped at max_failures
    FAILED = "failed"  # Increments, uncapped


class FeedHealthModel(BaseModel):
    """Base model with standard configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )


class FeedHealth(FeedHealthModel):
    """Point-in-time health snapshot of one feed.

    Example:
        >>> h = FeedHealth(title="Ars", load_time=12.0, failure_count=1, slow=True)
        >>> h.status
        'SLOW'
        >>> FeedHealth(title="Ars", load_time=-1.0, failure_count=1).status
        'FAILED'
    """

    title: str = Field(..., description="Feed identifier")
    load_time: float = Field(default=0.0, description="Last recorded duration in seconds")
    failure_count: int = Field(default=0, ge=0)
    skipped: bool = Field(default=False, description="Failure count reached max_failures")
    slow: bool = Field(default=False, description="Last load exceeded the slow threshold")
    score: int = Field(default=10, ge=0, le=10, description="Performance score 0-10")

    @property
    def status(self) -> str:
        """Display label, most severe first."""
        if self.skipped:
            return "SKIPPED"
        if self.slow:
            return "SLOW"
        if self.load_time < 0:
            return "FAILED"
        return "OK"


def encode_failure_counts(counts: dict[str, int]) -> bytes:
    """Serialize a failure-count map.

    Raises:
        CodecError: If the map holds values that are not counts.
    """
    try:
        return _COUNTS_ADAPTER.dump_json(_COUNTS_ADAPTER.validate_python(counts))
    except PydanticValidationError as e:
        raise CodecError(f"Cannot encode failure counts: {e}") from e


def decode_failure_counts(data: bytes) -> dict[str, int]:
    """Deserialize a failure-count map.

    Example:
        >>> decode_failure_counts(b"not json")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        CodecError: Cannot decode failure counts

    Raises:
        CodecError: If the payload is not a JSON object of non-negative integers.
    """
    try:
        return _COUNTS_ADAPTER.validate_json(data)
    except PydanticValidationError as e:
        raise CodecError(f"Cannot decode failure counts: {e}") from e


def encode_threshold(seconds: float) -> bytes:
    """Serialize a slow-threshold override.

    Example:
        >>> encode_threshold(12.5)
        b'12.5'
    """
    return _THRESHOLD_ADAPTER.dump_json(seconds)


def decode_threshold(data: bytes) -> float:
    """Deserialize a slow-threshold override.

    Raises:
        CodecError: If the payload is not a JSON number.
    """
    try:
        return _THRESHOLD_ADAPTER.validate_json(data)
    except PydanticValidationError as e:
        raise CodecError(f"Cannot decode slow threshold: {e}") from e
