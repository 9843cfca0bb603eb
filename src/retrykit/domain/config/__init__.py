"""Configuration models with Pydantic validation."""

from retrykit.domain.config.app import AppConfig
from retrykit.domain.config.classifier import ClassifierConfig
from retrykit.domain.config.retry import PolicyOverrides, RetryPolicy

__all__ = [
    "AppConfig",
    "ClassifierConfig",
    "PolicyOverrides",
    "RetryPolicy",
]
