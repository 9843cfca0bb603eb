"""Tests for ErrorClassifier"""

import errno
import logging
import socket

import pytest

from retrykit.domain.classifier import ErrorClassifier, error_code
from retrykit.domain.errors import OperationError


@pytest.fixture
def classifier():
    return ErrorClassifier()


class TestErrorCode:
    """Tests for error code extraction"""

    def test_string_code_attribute(self):
        assert error_code(OperationError("boom", code="ETIMEDOUT")) == "ETIMEDOUT"

    def test_os_error_errno(self):
        assert error_code(ConnectionResetError(errno.ECONNRESET, "reset by peer")) == "ECONNRESET"

    def test_gaierror_maps_to_not_found(self):
        assert error_code(socket.gaierror(socket.EAI_NONAME, "Name or service not known")) == "ENOTFOUND"

    def test_no_code(self):
        assert error_code(ValueError("nope")) is None

    def test_non_string_code_ignored(self):
        error = RuntimeError("x")
        error.code = 42
        assert error_code(error) is None


class TestIsRetryable:
    """Tests for the classification rules"""

    @pytest.mark.parametrize(
        "message",
        [
            "Network is down",
            "Connection timeout",
            "connection refused",
            "Host unreachable",
            "Service temporarily unavailable",
            "Temporary failure",
            "Rate limit exceeded",
            "HTTP 429",
            "502 Bad Gateway",
            "HTTP 503",
            "Gateway timeout 504",
            "peer reset the stream",
        ],
    )
    def test_retryable_messages(self, classifier, message):
        """Test transient-looking messages are retryable"""
        assert classifier.is_retryable(RuntimeError(message)) is True

    @pytest.mark.parametrize(
        "message",
        [
            "Invalid authentication credentials",
            "Invalid input - not retryable",
            "Permission denied",
            "HTTP 404",
        ],
    )
    def test_non_retryable_messages(self, classifier, message):
        """Test permanent-looking messages are not retryable"""
        assert classifier.is_retryable(RuntimeError(message)) is False

    def test_message_match_is_case_insensitive(self, classifier):
        assert classifier.is_retryable(RuntimeError("SERVICE DOWN")) is True

    def test_digit_five_matches_anywhere(self, classifier):
        """Test the broad '5' keyword is kept from the default table"""
        assert classifier.is_retryable(RuntimeError("field5 missing")) is True

    def test_code_match(self, classifier):
        """Test retryable code on an otherwise permanent message"""
        assert classifier.is_retryable(OperationError("Invalid input", code="ECONNRESET")) is True

    def test_code_outside_set(self, classifier):
        assert classifier.is_retryable(OperationError("Invalid input", code="EACCES")) is False

    def test_per_call_codes_replace_defaults(self, classifier):
        """Test codes passed per check take precedence over the classifier's own"""
        error = OperationError("Invalid input", code="ECONNRESET")
        assert classifier.is_retryable(error, frozenset({"EQUOTA"})) is False
        assert classifier.is_retryable(OperationError("Invalid input", code="EQUOTA"), {"EQUOTA"}) is True

    def test_custom_keywords(self):
        """Test keyword table is data-driven"""
        classifier = ErrorClassifier(message_keywords=["Overloaded"])
        assert classifier.is_retryable(RuntimeError("server overloaded")) is True
        assert classifier.is_retryable(RuntimeError("HTTP 503")) is False

    def test_empty_keywords_only_codes(self):
        classifier = ErrorClassifier(message_keywords=[])
        assert classifier.is_retryable(RuntimeError("timeout")) is False
        assert classifier.is_retryable(OperationError("timeout", code="ETIMEDOUT")) is True

    def test_code_match_is_logged(self, classifier, caplog):
        """Test the matched code is reported once in the debug log"""
        with caplog.at_level(logging.DEBUG, logger="retrykit.domain.classifier"):
            assert classifier.is_retryable(OperationError("Invalid input", code="ETIMEDOUT")) is True
        assert [r.getMessage() for r in caplog.records] == ["Error code ETIMEDOUT is retryable"]
