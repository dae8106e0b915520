"""
Exponential backoff policy for rate-limited scoring requests.
"""
from dataclasses import dataclass

from accesswatch.config import settings


@dataclass(frozen=True)
class RetryPolicy:
    """
    Decides whether another attempt is allowed and how long to wait first.

    delay_ms(attempt) = min(base_delay_ms * 2 ** attempt, max_delay_ms)
    """
    max_retries: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 30000

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(
            max_retries=settings.AUDIT_MAX_RETRIES,
            base_delay_ms=settings.AUDIT_RETRY_BASE_DELAY_MS,
            max_delay_ms=settings.AUDIT_RETRY_MAX_DELAY_MS,
        )

    def should_retry(self, attempt: int) -> bool:
        return attempt < self.max_retries

    def delay_ms(self, attempt: int) -> int:
        return min(self.base_delay_ms * (2 ** attempt), self.max_delay_ms)

    def delay_seconds(self, attempt: int) -> float:
        return self.delay_ms(attempt) / 1000
