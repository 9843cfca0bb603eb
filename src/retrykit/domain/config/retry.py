"""Retry policy model."""

from __future__ import annotations

from typing import Any, FrozenSet, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from retrykit.domain.errors import ConfigurationError

DEFAULT_RETRYABLE_ERROR_CODES = frozenset({"ECONNRESET", "ETIMEDOUT", "ENOTFOUND", "EHOSTUNREACH"})


class RetryPolicy(BaseModel):
    """Immutable retry policy.

    Attributes:
        max_attempts: Total attempts allowed, including the first
        base_delay: Delay before the second attempt (ms)
        max_delay: Upper clamp on computed delay (ms)
        backoff_multiplier: Exponential growth factor per attempt
        jitter: Apply +/-5% random perturbation to each delay
        retryable_error_codes: Error codes that are always retried
    """

    max_attempts: int = Field(3, ge=1)
    base_delay: float = Field(100.0, ge=0.0, allow_inf_nan=False)
    max_delay: float = Field(5000.0, ge=0.0, allow_inf_nan=False)
    backoff_multiplier: float = Field(2.0, gt=0.0, allow_inf_nan=False)
    jitter: bool = True
    retryable_error_codes: FrozenSet[str] = Field(default=DEFAULT_RETRYABLE_ERROR_CODES)

    model_config = ConfigDict(frozen=True, extra="forbid")

    def merge(self, overrides: Union["PolicyOverrides", Mapping[str, Any], None]) -> "RetryPolicy":
        """Return a new policy with only the supplied fields replaced.

        Args:
            overrides: Partial policy (model, mapping or None)

        Returns:
            Effective policy for a single call

        Raises:
            ConfigurationError: If the merged policy is invalid
        """
        if overrides is None:
            return self
        try:
            if not isinstance(overrides, PolicyOverrides):
                overrides = PolicyOverrides(**overrides)
            update = overrides.model_dump(exclude_none=True)
            if not update:
                return self
            return RetryPolicy(**{**self.model_dump(), **update})
        except ValidationError as e:
            raise ConfigurationError.from_validation_error(e) from e


class PolicyOverrides(BaseModel):
    """Per-call partial policy. Unset fields keep the base policy value."""

    max_attempts: Optional[int] = None
    base_delay: Optional[float] = None
    max_delay: Optional[float] = None
    backoff_multiplier: Optional[float] = None
    jitter: Optional[bool] = None
    retryable_error_codes: Optional[FrozenSet[str]] = None

    model_config = ConfigDict(frozen=True, extra="forbid")
