"""Retry executor - runs the attempt loop against a caller-supplied operation.

The loop itself is driven by tenacity: attempts are bounded with
``stop_after_attempt``, eligibility is decided by the error classifier through
``retry_if_exception`` and the wait between attempts comes from
``calculate_delay``. The executor adds per-call policy overrides, outcome
records, terminal error wrapping and shared statistics on top.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, TypeVar, Union

from pydantic import ValidationError
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt

from retrykit.application.stats_accumulator import StatsAccumulator
from retrykit.domain.backoff import calculate_delay
from retrykit.domain.classifier import ErrorClassifier
from retrykit.domain.config.retry import PolicyOverrides, RetryPolicy
from retrykit.domain.errors import ConfigurationError, ExhaustedError, NonRetryableError
from retrykit.domain.models.outcome import RetryOutcome
from retrykit.domain.models.stats import StatsSnapshot
from retrykit.version import __version__

logger = logging.getLogger(__name__)

T = TypeVar("T")

Overrides = Union[PolicyOverrides, Mapping[str, Any], None]
SleepFunc = Callable[[float], Awaitable[Any]]


class RetryExecutor:
    """Retry executor

    Provides retry logic with:
    - Bounded attempts
    - Exponential backoff with optional +/-5% jitter
    - Code- and message-based error filtering
    - Aggregate statistics shared by concurrent calls
    """

    UNIT_ID = "retry"
    VERSION = __version__

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        classifier: Optional[ErrorClassifier] = None,
        executor_id: Optional[str] = None,
        sleep: Optional[SleepFunc] = None,
    ):
        """Create a new RetryExecutor.

        Args:
            policy: Base retry policy (defaults apply if None)
            classifier: Error classifier (default keyword table if None)
            executor_id: Identifier used in error messages and serialization
            sleep: Coroutine function used for inter-attempt delays (seconds)
        """
        self._policy = policy or RetryPolicy()
        self._classifier = classifier or ErrorClassifier(
            retryable_error_codes=self._policy.retryable_error_codes
        )
        self._id = executor_id or self.UNIT_ID
        self._sleep = sleep or asyncio.sleep
        self._stats = StatsAccumulator()

    @classmethod
    def create(
        cls,
        config: Optional[Mapping[str, Any]] = None,
        *,
        classifier: Optional[ErrorClassifier] = None,
        sleep: Optional[SleepFunc] = None,
        **kwargs: Any,
    ) -> "RetryExecutor":
        """Create an executor from plain configuration values.

        Args:
            config: Policy fields (max_attempts, base_delay, max_delay, jitter,
                backoff_multiplier, retryable_error_codes)
            classifier: Optional error classifier
            sleep: Optional sleep coroutine function
            **kwargs: Policy fields, merged over ``config``

        Returns:
            RetryExecutor instance

        Raises:
            ConfigurationError: If the policy is invalid
        """
        values = {**(config or {}), **kwargs}
        try:
            policy = RetryPolicy(**values)
        except ValidationError as e:
            raise ConfigurationError.from_validation_error(e) from e
        return cls(policy, classifier=classifier, sleep=sleep)

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        overrides: Overrides = None,
    ) -> RetryOutcome[T]:
        """Execute an operation with retry logic.

        Args:
            operation: Zero-argument async function to execute
            overrides: Policy fields applied to this call only

        Returns:
            Outcome with attempt metadata

        Raises:
            NonRetryableError: The classifier rejected a failure
            ExhaustedError: Every allowed attempt failed
            ConfigurationError: Overrides produce an invalid policy

        Example:
            executor = RetryExecutor.create(max_attempts=5)
            outcome = await executor.execute(fetch_data)
        """
        policy = self._policy.merge(overrides)
        errors: List[BaseException] = []
        attempts = 0

        async def _attempt() -> T:
            nonlocal attempts
            attempts += 1
            try:
                return await operation()
            except Exception as e:
                errors.append(e)
                raise

        retrying = AsyncRetrying(
            sleep=self._sleep,
            stop=stop_after_attempt(policy.max_attempts),
            wait=lambda state: calculate_delay(state.attempt_number, policy) / 1000.0,
            # BaseException (cancellation, interrupts) is never retried
            retry=retry_if_exception(
                lambda e: isinstance(e, Exception)
                and self._classifier.is_retryable(e, policy.retryable_error_codes)
            ),
            before_sleep=self._before_sleep_log(policy),
            reraise=True,
        )

        self._stats.record_start()
        start_time = time.monotonic()
        try:
            value = await retrying(_attempt)
        except Exception as e:
            self._stats.record_failure(attempts - 1)
            if attempts >= policy.max_attempts:
                logger.error(f"[{self._id}] Operation failed after {attempts} attempts: {e}")
                raise ExhaustedError(self._id, attempts, errors) from e
            logger.warning(f"[{self._id}] Non-retryable error on attempt {attempts}: {e}")
            raise NonRetryableError(self._id, attempts, errors) from e

        self._stats.record_success(attempts - 1)
        elapsed_ms = (time.monotonic() - start_time) * 1000.0
        logger.debug(f"[{self._id}] Operation succeeded after {attempts} attempt(s)")
        return RetryOutcome(
            value=value,
            attempts_used=attempts,
            elapsed_ms=elapsed_ms,
            errors_seen=tuple(errors),
            succeeded=True,
            completed_at=datetime.now(timezone.utc),
        )

    def _before_sleep_log(self, policy: RetryPolicy) -> Callable[[RetryCallState], None]:
        def _log(retry_state: RetryCallState) -> None:
            if retry_state.outcome is None:
                return
            exception = retry_state.outcome.exception()
            delay_ms = retry_state.next_action.sleep * 1000.0 if retry_state.next_action else 0.0
            logger.warning(
                f"[{self._id}] Attempt {retry_state.attempt_number}/{policy.max_attempts} "
                f"failed: {exception}. Retrying in {delay_ms:.0f}ms..."
            )

        return _log

    def is_retryable(self, error: BaseException) -> bool:
        """Check if an error would trigger a retry under the base policy"""
        return self._classifier.is_retryable(error, self._policy.retryable_error_codes)

    def get_stats(self) -> StatsSnapshot:
        """Read-only snapshot of the live counters"""
        return self._stats.snapshot()

    def capabilities(self) -> Dict[str, Callable[..., Any]]:
        """Functions exposed for composition by other components"""
        return {
            "execute": self.execute,
            "get_stats": self.get_stats,
            "is_retryable": self.is_retryable,
        }

    def to_serializable(self) -> Dict[str, Any]:
        """Serialize identity, stats and retryable codes for logging/export"""
        return {
            "id": self._id,
            "version": self.VERSION,
            "timestamp": int(time.time() * 1000),
            "stats": self.get_stats().to_dict(),
            "retryable_error_codes": sorted(self._policy.retryable_error_codes),
        }

    def whoami(self) -> str:
        stats = self.get_stats()
        return (
            f"Retry [{stats.total_operations} ops, {stats.successful_operations} succeeded]"
            f" - v{self.VERSION}"
        )

    def help_text(self) -> str:
        """Usage summary with current configuration and statistics"""
        stats = self.get_stats()
        policy = self._policy
        return f"""Retry v{self.VERSION}

Current stats: {stats.total_operations} operations, {stats.total_retries} retries
Success rate: {stats.success_rate * 100:.1f}%
Average attempts: {stats.average_attempts_per_operation:.1f}

Configuration:
  max_attempts: {policy.max_attempts}
  base_delay: {policy.base_delay:g}ms
  max_delay: {policy.max_delay:g}ms
  backoff_multiplier: {policy.backoff_multiplier:g}x
  jitter: {policy.jitter}
  retryable_error_codes: {", ".join(sorted(policy.retryable_error_codes))}

Usage:
  executor = RetryExecutor.create()
  outcome = await executor.execute(operation)
  print(f"Succeeded after {{outcome.attempts_used}} attempts")
"""

    @property
    def id(self) -> str:
        """Get the executor ID."""
        return self._id

    @property
    def policy(self) -> RetryPolicy:
        """Get the base policy."""
        return self._policy


def create(config: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> RetryExecutor:
    """Create a new retry executor (convenience function)."""
    return RetryExecutor.create(config, **kwargs)
