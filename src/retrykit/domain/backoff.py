"""Backoff delay calculation (milliseconds)."""

from __future__ import annotations

import math
import random
from typing import List

from retrykit.domain.config.retry import RetryPolicy

# Total jitter band as a fraction of the delay: +/-5%
JITTER_SPAN = 0.1


def calculate_delay(attempt: int, policy: RetryPolicy) -> int:
    """Calculate the delay after a failed attempt.

    delay = min(max_delay, base_delay * backoff_multiplier ^ (attempt - 1)),
    then perturbed by up to +/-5% when jitter is enabled.

    Args:
        attempt: The attempt that just failed (1-indexed)
        policy: Effective retry policy

    Returns:
        Delay in whole milliseconds, never negative

    Raises:
        ValueError: If attempt is below 1 or the delay is not finite
    """
    if attempt < 1:
        raise ValueError(f"attempt must be >= 1, got {attempt}")
    if policy.base_delay == 0:
        return 0

    try:
        delay = policy.base_delay * policy.backoff_multiplier ** (attempt - 1)
    except OverflowError:
        delay = math.inf
    delay = min(delay, policy.max_delay)
    if not math.isfinite(delay):
        raise ValueError(f"delay for attempt {attempt} is unbounded; max_delay must be finite")

    if policy.jitter:
        delay += (random.random() - 0.5) * delay * JITTER_SPAN

    return max(0, math.floor(delay))


def delay_schedule(policy: RetryPolicy) -> List[int]:
    """Delays before attempts 2..max_attempts"""
    return [calculate_delay(attempt, policy) for attempt in range(1, policy.max_attempts)]
