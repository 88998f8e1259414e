"""Tests for exceptions module - behavior focused."""

import pytest
import httpx

from retryfetch.exceptions import (
    FetchError,
    RetriableError,
    HTTPStatusError,
    RequestError,
    DecodeError,
    PermanentError,
    RetriesExhaustedError,
    ContextCancelledError,
    DeadlineExceededError,
    is_retriable,
    is_retriable_or_network,
)


class TestRetryableFlag:
    """Test that exceptions have correct retryable defaults."""

    def test_retriable_error_is_retryable(self):
        """Retriable errors should be retryable."""
        assert RetriableError().retryable is True

    def test_http_status_error_not_retryable(self):
        """Status errors (4xx and friends) should not be retryable."""
        assert HTTPStatusError("forbidden").retryable is False

    def test_request_error_not_retryable(self):
        """Transport failures are not retryable by default."""
        assert RequestError().retryable is False

    def test_decode_error_not_retryable(self):
        """Decode errors should not be retryable."""
        assert DecodeError().retryable is False

    def test_annotations_not_retryable(self):
        """Engine annotations are terminal."""
        cause = RetriableError("boom")
        assert PermanentError(cause).retryable is False
        assert RetriesExhaustedError(cause, retries=3).retryable is False

    def test_base_error_not_retryable_by_default(self):
        """Base FetchError should not be retryable by default."""
        assert FetchError("test").retryable is False


class TestClassifier:
    """Test the default and network-aware classifiers."""

    def test_retriable_error_is_retriable(self):
        assert is_retriable(RetriableError()) is True

    def test_plain_exception_is_not_retriable(self):
        assert is_retriable(ValueError("nope")) is False

    def test_none_is_not_retriable(self):
        assert is_retriable(None) is False

    def test_wrapped_retriable_error_is_retriable(self):
        """A foreign exception chained from a RetriableError is retriable."""
        try:
            try:
                raise RetriableError("transient")
            except RetriableError as e:
                raise RuntimeError("wrapper") from e
        except RuntimeError as e:
            err = e

        assert is_retriable(err) is True

    def test_annotation_decides_for_its_cause(self):
        """A permanent annotation of a retriable error is not retriable."""
        assert is_retriable(PermanentError(RetriableError())) is False

    def test_message_is_not_inspected(self):
        """Classification is by tag, never by string matching."""
        assert is_retriable(ValueError("RetriableError: please retry")) is False

    def test_cyclic_cause_chain_terminates(self):
        a = ValueError("a")
        b = ValueError("b")
        a.__cause__ = b
        b.__cause__ = a

        assert is_retriable(a) is False

    def test_network_classifier_retries_transport_failures(self):
        assert is_retriable_or_network(RequestError()) is True
        assert is_retriable_or_network(RetriableError()) is True
        assert is_retriable_or_network(HTTPStatusError("forbidden")) is False


class TestCauseIsKept:
    """Annotations add context without discarding the cause."""

    def test_retriable_error_wraps_cause(self):
        cause = OSError("connection reset")
        error = RetriableError(cause=cause)

        assert error.cause is cause
        assert error.__cause__ is cause
        assert "connection reset" in str(error)

    def test_retriable_error_without_cause(self):
        """5xx responses have no transport error to wrap."""
        error = RetriableError("url: http://x, response code 500")
        assert error.cause is None

    def test_permanent_error_exposes_response(self):
        """The response of the failed attempt stays reachable."""
        response = httpx.Response(403, text="denied")
        cause = HTTPStatusError("forbidden", response=response, url="http://x")
        error = PermanentError(cause)

        assert error.cause is cause
        assert error.response is response
        assert error.status_code == 403
        assert error.url == "http://x"

    def test_annotations_append_status_once(self):
        """The cause's status suffix is not repeated by the annotation."""
        cause = RetriableError("service down", status_code=503)

        permanent = str(PermanentError(cause))
        exhausted = str(RetriesExhaustedError(cause, retries=2))

        assert permanent == "non-retriable error: service down (status: 503)"
        assert exhausted == "retries exhausted (retries=2): service down (status: 503)"

    def test_annotation_of_plain_exception_uses_its_text(self):
        assert str(PermanentError(ValueError("bad input"))) == "non-retriable error: bad input"

    def test_exhausted_error_names_budget(self):
        error = RetriesExhaustedError(RetriableError("still down"), retries=4)

        assert error.retries == 4
        assert "retries=4" in str(error)
        assert "still down" in str(error)


class TestExceptionStringRepresentation:
    """Test that exception string includes useful context."""

    def test_str_includes_message(self):
        error = FetchError("Something went wrong")
        assert "Something went wrong" in str(error)

    def test_str_includes_status_code_when_set(self):
        error = FetchError("Error", status_code=503)
        assert "503" in str(error)

    def test_status_code_taken_from_response(self):
        error = FetchError("Error", response=httpx.Response(502))
        assert error.status_code == 502

    def test_cancelled_includes_reason(self):
        error = ContextCancelledError(reason="shutting down")

        assert error.reason == "shutting down"
        assert "shutting down" in str(error)

    def test_deadline_message(self):
        assert "deadline exceeded" in str(DeadlineExceededError())


class TestExceptionInheritance:
    """Test that all exceptions inherit from FetchError."""

    @pytest.mark.parametrize(
        "exception_class",
        [
            RetriableError,
            RequestError,
            DecodeError,
            ContextCancelledError,
            DeadlineExceededError,
        ],
    )
    def test_inherits_from_base(self, exception_class):
        """All exception types should be catchable as FetchError."""
        assert isinstance(exception_class(), FetchError)

    def test_deadline_is_a_cancellation(self):
        assert isinstance(DeadlineExceededError(), ContextCancelledError)
