"""
Bounded async retries with exponential backoff, jitter, error classification
and aggregate statistics.
"""
from retrykit.application.retry_executor import RetryExecutor, create
from retrykit.application.stats_accumulator import StatsAccumulator
from retrykit.domain.backoff import calculate_delay, delay_schedule
from retrykit.domain.classifier import ErrorClassifier, error_code
from retrykit.domain.config import AppConfig, ClassifierConfig, PolicyOverrides, RetryPolicy
from retrykit.domain.errors import (
    ConfigurationError,
    ExhaustedError,
    NonRetryableError,
    OperationError,
    RetryError,
    RetryKitError,
)
from retrykit.domain.models.outcome import RetryOutcome
from retrykit.domain.models.stats import StatsSnapshot
from retrykit.version import __version__


__all__ = [
    # Executor
    "RetryExecutor",
    "create",
    "StatsAccumulator",
    # Policy
    "AppConfig",
    "ClassifierConfig",
    "PolicyOverrides",
    "RetryPolicy",
    # Algorithms
    "calculate_delay",
    "delay_schedule",
    "ErrorClassifier",
    "error_code",
    # Models
    "RetryOutcome",
    "StatsSnapshot",
    # Errors
    "RetryKitError",
    "ConfigurationError",
    "OperationError",
    "RetryError",
    "NonRetryableError",
    "ExhaustedError",
    "__version__",
]
