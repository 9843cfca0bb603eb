"""Retryable / non-retryable error classification.

Two independent checks, either sufficient: a machine-readable error code that
belongs to the policy's retryable set, or a keyword found in the lowercased
error message. This is a heuristic; false positives and negatives are expected.
"""

from __future__ import annotations

import errno
import logging
import socket
from typing import AbstractSet, Iterable, List, Optional

from retrykit.domain.config.classifier import DEFAULT_MESSAGE_KEYWORDS
from retrykit.domain.config.retry import DEFAULT_RETRYABLE_ERROR_CODES

logger = logging.getLogger(__name__)


def error_code(error: BaseException) -> Optional[str]:
    """Extract a machine-readable code from an error, if it exposes one.

    Args:
        error: The error to inspect

    Returns:
        Code such as ``ECONNRESET``, or None
    """
    code = getattr(error, "code", None)
    if isinstance(code, str) and code:
        return code
    if isinstance(error, socket.gaierror):
        return "ENOTFOUND"
    if isinstance(error, OSError) and error.errno is not None:
        return errno.errorcode.get(error.errno)
    return None


class ErrorClassifier:
    """Decides whether a failure is worth retrying"""

    def __init__(
        self,
        message_keywords: Optional[Iterable[str]] = None,
        retryable_error_codes: Optional[AbstractSet[str]] = None,
    ):
        """Initialize classifier

        Args:
            message_keywords: Substrings that mark a message as retryable
            retryable_error_codes: Fallback code set when none is passed per check
        """
        keywords = DEFAULT_MESSAGE_KEYWORDS if message_keywords is None else message_keywords
        self.message_keywords: List[str] = [k.lower() for k in keywords]
        self.retryable_error_codes = frozenset(
            DEFAULT_RETRYABLE_ERROR_CODES if retryable_error_codes is None else retryable_error_codes
        )

    def matches_code(self, error: BaseException, codes: Optional[AbstractSet[str]] = None) -> bool:
        return self._is_retryable_code(error_code(error), codes)

    def _is_retryable_code(self, code: Optional[str], codes: Optional[AbstractSet[str]]) -> bool:
        if code is None:
            return False
        return code in (self.retryable_error_codes if codes is None else codes)

    def matches_message(self, error: BaseException) -> bool:
        message = str(error).lower()
        return any(keyword in message for keyword in self.message_keywords)

    def is_retryable(self, error: BaseException, codes: Optional[AbstractSet[str]] = None) -> bool:
        """Check if an error should trigger a retry.

        Args:
            error: The error to check
            codes: Retryable error codes of the effective policy

        Returns:
            True if the error looks transient
        """
        code = error_code(error)
        if self._is_retryable_code(code, codes):
            logger.debug(f"Error code {code} is retryable")
            return True
        return self.matches_message(error)
