"""RetryOutcome model - the terminal result of a successful retry sequence"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Generic, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RetryOutcome(Generic[T]):
    """Result of a retried operation"""

    value: T  # Operation return value
    attempts_used: int  # 1..max_attempts
    elapsed_ms: float  # First attempt to terminal outcome
    errors_seen: Tuple[BaseException, ...] = ()  # Failures before success, in order
    succeeded: bool = True
    completed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def retries(self) -> int:
        """Number of retries (0 if succeeded on first try)"""
        return self.attempts_used - 1
