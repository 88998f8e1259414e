"""
Cancellation context.

A Context carries a cancellation signal, an optional deadline and optional
HTTP clients down a call chain. Children observe their parent's cancellation
and inherit its clients; a child's deadline is the earlier of its own and
the parent's.
"""

import threading
import time

import httpx

from .exceptions import ContextCancelledError, DeadlineExceededError


class Context:
    """Cooperative cancellation token with transport injection."""

    def __init__(
        self,
        parent: "Context | None" = None,
        *,
        deadline: float | None = None,
        client: httpx.Client | None = None,
        async_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the context. Prefer `Context.background()` and the
        `with_*` methods over calling this directly.

        Args:
            parent: Context to inherit cancellation, deadline and clients from
            deadline: Absolute deadline on the `time.monotonic()` clock
            client: Sync HTTP client to use instead of the default
            async_client: Async HTTP client to use instead of the default
        """
        self._parent = parent
        self._deadline = deadline
        self._client = client
        self._async_client = async_client
        self._cancelled = threading.Event()
        self._cancel_lock = threading.Lock()
        self._reason: object = None

    @classmethod
    def background(cls) -> "Context":
        """Root context: never cancelled, no deadline, default transport."""
        return cls()

    def with_cancel(self) -> "Context":
        """Child that can be cancelled independently of this context."""
        return Context(self)

    def with_deadline(self, deadline: float) -> "Context":
        """Child that expires at `deadline` (`time.monotonic()` clock)."""
        return Context(self, deadline=deadline)

    def with_timeout(self, seconds: float) -> "Context":
        """Child that expires `seconds` from now."""
        return self.with_deadline(time.monotonic() + seconds)

    def with_client(self, client: httpx.Client | httpx.AsyncClient) -> "Context":
        """Child that sends requests through `client`. Used primarily in tests."""
        if isinstance(client, httpx.AsyncClient):
            return Context(self, async_client=client)
        return Context(self, client=client)

    def cancel(self, reason: object = None) -> None:
        """Cancel this context and all of its children. Idempotent."""
        with self._cancel_lock:
            if not self._cancelled.is_set():
                self._reason = reason
                self._cancelled.set()

    @property
    def deadline(self) -> float | None:
        parent = self._parent.deadline if self._parent else None
        if parent is None:
            return self._deadline
        if self._deadline is None:
            return parent
        return min(parent, self._deadline)

    def remaining(self) -> float | None:
        """Seconds until the deadline, or None without one."""
        deadline = self.deadline
        if deadline is None:
            return None
        return max(0.0, deadline - time.monotonic())

    def done(self) -> bool:
        return self.err() is not None

    def err(self) -> ContextCancelledError | None:
        """The error describing why the context ended, or None while live."""
        ctx: Context | None = self
        while ctx is not None:
            if ctx._cancelled.is_set():
                return ContextCancelledError(reason=ctx._reason)
            ctx = ctx._parent
        deadline = self.deadline
        if deadline is not None and time.monotonic() >= deadline:
            return DeadlineExceededError()
        return None

    @property
    def client(self) -> httpx.Client | None:
        if self._client is not None:
            return self._client
        return self._parent.client if self._parent else None

    @property
    def async_client(self) -> httpx.AsyncClient | None:
        if self._async_client is not None:
            return self._async_client
        return self._parent.async_client if self._parent else None


def with_client(ctx: Context, client: httpx.Client | httpx.AsyncClient) -> Context:
    """Add an HTTP client to the context to be used instead of the default."""
    return ctx.with_client(client)


def get_client(ctx: Context) -> httpx.Client | None:
    """Sync HTTP client from the context, or None if not present."""
    return ctx.client


def get_async_client(ctx: Context) -> httpx.AsyncClient | None:
    """Async HTTP client from the context, or None if not present."""
    return ctx.async_client
