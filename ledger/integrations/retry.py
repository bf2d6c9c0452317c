import random
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

from django.conf import settings


def full_jitter_delay(attempt, *, base_delay, max_delay):
    if attempt < 1:
        raise ValueError("attempt must be >= 1")
    if base_delay < 0 or max_delay < 0:
        raise ValueError("base_delay and max_delay must be >= 0")

    cap = min(max_delay, base_delay * (2 ** (attempt - 1)))
    return random.uniform(0, cap)


def parse_retry_after_seconds(value):
    """Accept either delta-seconds or an HTTP-date (RFC 9110)."""
    if value is None:
        return None

    raw = str(value).strip()
    if not raw:
        return None

    try:
        return max(0.0, float(raw))
    except ValueError:
        pass

    try:
        retry_at = parsedate_to_datetime(raw)
    except (TypeError, ValueError, OverflowError):
        return None

    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)

    return max(0.0, (retry_at - datetime.now(timezone.utc)).total_seconds())


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget and full-jitter backoff shared by the settlement callers.

    ``max_attempts`` counts the first try, so ``RetryPolicy(max_attempts=1)``
    never retries.
    """

    max_attempts: int = 1
    base_delay: float = 0.0
    max_delay: float = 0.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("base_delay and max_delay must be >= 0")

    @classmethod
    def from_settings(cls):
        return cls(
            max_attempts=settings.SETTLEMENT_RETRY_MAX_ATTEMPTS,
            base_delay=settings.SETTLEMENT_RETRY_BASE_DELAY,
            max_delay=settings.SETTLEMENT_RETRY_MAX_DELAY,
        )

    def can_retry(self, attempt):
        return attempt < self.max_attempts

    def delay_for(self, attempt, *, retry_after=None):
        delay = full_jitter_delay(
            attempt, base_delay=self.base_delay, max_delay=self.max_delay
        )
        # Retry-After is a lower bound.
        if retry_after is None:
            return delay
        return max(delay, retry_after)


def retry_on_exceptions(func, *, exceptions, policy, on_retry=None, sleep=time.sleep):
    attempt = 1
    while True:
        try:
            return func()
        except exceptions as exc:
            if not policy.can_retry(attempt):
                raise

            delay = policy.delay_for(attempt)
            if on_retry is not None:
                on_retry(attempt=attempt, delay_seconds=delay, exception=exc)
            if delay > 0:
                sleep(delay)
            attempt += 1
