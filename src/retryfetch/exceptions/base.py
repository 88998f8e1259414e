"""
Exception classes for retriable fetch operations.

Each exception includes a `retryable` flag indicating whether the operation
can be safely retried with the same parameters. The retry engine never
inspects messages; classification is a flag check on the error chain.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class FetchError(Exception):
    """Base exception for all fetch errors."""

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        status_code: int | None = None,
        url: str | None = None,
        response: "httpx.Response | None" = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.retryable = retryable
        self.url = url
        self.response = response
        if status_code is None and response is not None:
            status_code = response.status_code
        self.status_code = status_code
        if cause is not None:
            self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        """The wrapped error, if any."""
        return self.__cause__

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        return " ".join(parts)


class RetriableError(FetchError):
    """Signals a transient failure that can be retried. Always retryable."""

    def __init__(
        self,
        message: str | None = None,
        *,
        cause: BaseException | None = None,
        **kwargs,
    ):
        if message is None:
            message = str(cause) if cause is not None else "Retriable failure"
        super().__init__(message, retryable=True, cause=cause, **kwargs)


class HTTPStatusError(FetchError):
    """Raised for a non-2xx, non-5xx response. Not retryable."""

    def __init__(self, message: str, *, body: str = "", **kwargs):
        super().__init__(message, retryable=False, **kwargs)
        self.body = body


class RequestError(FetchError):
    """Raised when the request fails before a usable response is received. Not retryable."""

    def __init__(self, message: str = "Request failed", **kwargs):
        super().__init__(message, retryable=False, **kwargs)


class DecodeError(FetchError):
    """Raised when a response body cannot be decoded. Not retryable."""

    def __init__(self, message: str = "Failed to decode response", **kwargs):
        super().__init__(message, retryable=False, **kwargs)


def _detail(cause: BaseException) -> str:
    """Cause text without its status suffix, which the annotation adds itself."""
    if isinstance(cause, FetchError):
        return cause.message
    return str(cause)


class _Annotation(FetchError):
    """Adds context to a failure while keeping the cause and its response."""

    def __init__(self, message: str, *, cause: BaseException, **kwargs):
        kwargs.setdefault("response", getattr(cause, "response", None))
        kwargs.setdefault("status_code", getattr(cause, "status_code", None))
        kwargs.setdefault("url", getattr(cause, "url", None))
        super().__init__(message, retryable=False, cause=cause, **kwargs)


class PermanentError(_Annotation):
    """Raised by the retry engine when a failure is classified as permanent."""

    def __init__(self, cause: BaseException, **kwargs):
        super().__init__(f"non-retriable error: {_detail(cause)}", cause=cause, **kwargs)


class RetriesExhaustedError(_Annotation):
    """Raised by the retry engine when all retries failed."""

    def __init__(self, cause: BaseException, *, retries: int, **kwargs):
        super().__init__(
            f"retries exhausted (retries={retries}): {_detail(cause)}", cause=cause, **kwargs
        )
        self.retries = retries


class ContextCancelledError(FetchError):
    """Raised when the context ends a retry sequence or a request."""

    def __init__(self, message: str = "context cancelled", *, reason: object = None, **kwargs):
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message, retryable=False, **kwargs)
        self.reason = reason


class DeadlineExceededError(ContextCancelledError):
    """Raised when the context deadline has passed."""

    def __init__(self, message: str = "context deadline exceeded", **kwargs):
        super().__init__(message, **kwargs)


def is_retriable(err: BaseException | None) -> bool:
    """
    Default classifier: is `err` (or an error it wraps) tagged retryable.

    Walks the `__cause__` chain and returns the flag of the first FetchError
    found, so annotations decide for the errors they wrap.
    """
    seen = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, FetchError):
            return err.retryable
        seen.add(id(err))
        err = err.__cause__
    return False


def is_retriable_or_network(err: BaseException | None) -> bool:
    """Like `is_retriable`, but also retries transport failures."""
    if isinstance(err, RequestError):
        return True
    return is_retriable(err)
