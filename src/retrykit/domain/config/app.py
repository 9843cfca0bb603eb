"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from retrykit.domain.config.classifier import ClassifierConfig
from retrykit.domain.config.retry import RetryPolicy


class AppConfig(BaseModel):
    """Main application configuration.

    This is the root configuration model that aggregates all configuration sections.
    Validation is performed at load time to fail fast on configuration errors.

    Attributes:
        retry: Retry policy
        classifier: Error classification configuration
    """

    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)

    model_config = ConfigDict(
        validate_assignment=True,  # Validate on attribute assignment
        extra="forbid",  # Reject unknown fields
        json_schema_extra={
            "example": {
                "retry": {
                    "max_attempts": 3,
                    "base_delay": 100,
                    "max_delay": 5000,
                    "backoff_multiplier": 2.0,
                    "jitter": True,
                    "retryable_error_codes": ["ECONNRESET", "ETIMEDOUT", "ENOTFOUND", "EHOSTUNREACH"],
                },
                "classifier": {
                    "message_keywords": ["network", "timeout", "503"],
                },
            }
        },
    )
