"""
Retry policy definition.
"""

from dataclasses import dataclass, field, replace
from typing import Callable

from ..exceptions import is_retriable

Classifier = Callable[[BaseException], bool]


@dataclass(frozen=True)
class RetryPolicy:
    """
    Configuration for retry behavior.

    The policy is immutable; the `with_*` methods return a modified copy, so
    they chain and never affect a retry sequence already using the original.

    Attributes:
        retries: Number of retries after the first attempt; when 0 the
            function is called only once (default: 3)
        min_wait: Wait before the first retry, in seconds (default: 1.0)
        max_wait: Exponential backoff caps at this value, in seconds (default: 60.0)
        is_retriable: Only retry when is_retriable(err) is True
            (default: the error is tagged retryable)
    """

    retries: int = 3
    min_wait: float = 1.0
    max_wait: float = 60.0
    is_retriable: Classifier = field(default=is_retriable, compare=False)

    def with_retries(self, retries: int) -> "RetryPolicy":
        return replace(self, retries=retries)

    def with_min_wait(self, seconds: float) -> "RetryPolicy":
        return replace(self, min_wait=seconds)

    def with_max_wait(self, seconds: float) -> "RetryPolicy":
        return replace(self, max_wait=seconds)

    def with_classifier(self, fn: Classifier) -> "RetryPolicy":
        return replace(self, is_retriable=fn)

    @classmethod
    def aggressive(cls) -> "RetryPolicy":
        """Preset for aggressive retry (more attempts, longer waits)."""
        return cls(
            retries=10,
            min_wait=2.0,
            max_wait=120.0,
        )

    @classmethod
    def conservative(cls) -> "RetryPolicy":
        """Preset for conservative retry (fewer attempts, shorter waits)."""
        return cls(
            retries=2,
            min_wait=0.5,
            max_wait=10.0,
        )

    @classmethod
    def no_retry(cls) -> "RetryPolicy":
        """Preset for no retry (single attempt only)."""
        return cls(retries=0)
