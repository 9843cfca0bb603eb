"""Error classifier configuration model."""

from typing import List

from pydantic import BaseModel, Field

DEFAULT_MESSAGE_KEYWORDS = [
    "network",
    "timeout",
    "connection",
    "reset",
    "refused",
    "unreachable",
    "temporarily",
    "temporary",
    "rate limit",
    "5",
    "429",
    "502",
    "503",
    "504",
    "unavailable",
    "service",
]


class ClassifierConfig(BaseModel):
    """Configuration for message-based error classification.

    Attributes:
        message_keywords: Lowercase substrings that mark an error message as retryable
    """

    message_keywords: List[str] = Field(default_factory=lambda: list(DEFAULT_MESSAGE_KEYWORDS))
