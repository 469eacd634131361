"""
Error classification and retry delay strategies.
"""
import random
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from tenacity import RetryCallState

from unitforge.support.exceptions import QuotaError

QUOTA_MARKERS = ("quota", "429", "too many requests")

RETRY_DELAY_PATTERNS = (
    re.compile(r'retryDelay"?\s*:\s*"?(\d+(?:\.\d+)?)s'),
    re.compile(r"retry-after[\"']?\s*[:=]\s*[\"']?(\d+(?:\.\d+)?)", re.IGNORECASE),
)


class ErrorKind(str, Enum):
    QUOTA = "quota"
    TRANSIENT = "transient"


def classify_error(error: BaseException) -> ErrorKind:
    """Quota errors get the long backoff; everything else is transient."""
    if isinstance(error, QuotaError):
        return ErrorKind.QUOTA
    text = str(error).lower()
    if any(marker in text for marker in QUOTA_MARKERS):
        return ErrorKind.QUOTA
    return ErrorKind.TRANSIENT


def parse_retry_delay(text: str) -> float | None:
    """Provider-suggested delay in seconds, if the error text carries one."""
    for pattern in RETRY_DELAY_PATTERNS:
        match = pattern.search(text)
        if match:
            return float(match.group(1))
    return None


class BackoffStrategy(Protocol):
    def delay(self, failures: int, error: BaseException) -> float:
        """Seconds to wait after the ``failures``-th failed attempt."""
        ...


@dataclass
class ExponentialBackoff:
    base_delay: float

    def delay(self, failures: int, error: BaseException) -> float:
        return self.base_delay * (2 ** failures)


@dataclass
class QuotaBackoff:
    default_delay: float = 60.0
    buffer: float = 15.0
    max_jitter: float = 30.0
    rng: random.Random = field(default_factory=random.Random)

    def delay(self, failures: int, error: BaseException) -> float:
        suggested = getattr(error, "retry_after", None)
        if suggested is None:
            suggested = parse_retry_delay(str(error))
        base = suggested if suggested is not None else self.default_delay
        return base + self.buffer + self.rng.random() * self.max_jitter


@dataclass
class ErrorAwareWait:
    """
    tenacity ``wait`` callable: quota errors get ``quota``, the rest ``transient``.

    ``attempt_number`` counts failed attempts so far, so the first retry
    waits ``transient.delay(1, error)``.
    """
    quota: BackoffStrategy
    transient: BackoffStrategy

    def strategy_for(self, error: BaseException) -> BackoffStrategy:
        if classify_error(error) is ErrorKind.QUOTA:
            return self.quota
        return self.transient

    def __call__(self, retry_state: RetryCallState) -> float:
        error = retry_state.outcome.exception()
        return self.strategy_for(error).delay(retry_state.attempt_number, error)
