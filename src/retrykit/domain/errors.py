"""Error taxonomy for retrykit"""

from __future__ import annotations

from typing import Optional, Sequence

from pydantic import ValidationError


class RetryKitError(Exception):
    """Base class for all retrykit errors."""

    pass


class ConfigurationError(RetryKitError):
    """Configuration validation error."""

    @classmethod
    def from_validation_error(cls, error: ValidationError) -> "ConfigurationError":
        """Format pydantic validation errors for the user, one line per field"""
        errors = []
        for item in error.errors():
            field = ".".join(str(x) for x in item["loc"])
            errors.append(f"  - {field}: {item['msg']}")
        return cls("Configuration validation failed:\n" + "\n".join(errors))


class OperationError(RetryKitError):
    """Failure raised by a wrapped operation, optionally carrying a code.

    Operations may raise any exception; this one exists for callers that want
    the classifier to see a machine-readable code (e.g. ``ECONNRESET``).
    """

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class RetryError(RetryKitError):
    """Terminal failure of a retry sequence.

    Attributes:
        attempts: Number of attempts made
        errors: Every error seen, in order
        last_error: The error that ended the sequence
    """

    def __init__(self, message: str, attempts: int, errors: Sequence[BaseException]):
        super().__init__(message)
        self.attempts = attempts
        self.errors = tuple(errors)
        self.last_error = self.errors[-1] if self.errors else None


class NonRetryableError(RetryError):
    """The classifier rejected the latest error; no further attempts were made."""

    def __init__(self, unit_id: str, attempts: int, errors: Sequence[BaseException]):
        last = errors[-1] if errors else None
        super().__init__(f"[{unit_id}] Non-retryable error: {last}", attempts, errors)

    @property
    def error(self) -> Optional[BaseException]:
        """The single triggering error"""
        return self.last_error


class ExhaustedError(RetryError):
    """Every allowed attempt failed."""

    def __init__(self, unit_id: str, attempts: int, errors: Sequence[BaseException]):
        last = errors[-1] if errors else None
        all_errors = ", ".join(str(e) for e in errors)
        super().__init__(
            f"[{unit_id}] Operation failed after {attempts} attempts. "
            f"Last error: {last}. All errors: {all_errors}",
            attempts,
            errors,
        )
