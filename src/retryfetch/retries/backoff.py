"""
Backoff schedule, retry engine and retry decorators.
"""

import asyncio
import functools
import logging
import time
from typing import Awaitable, Callable, Iterator, ParamSpec, TypeVar

from .config import RetryPolicy
from ..context import Context
from ..exceptions import ContextCancelledError, PermanentError, RetriesExhaustedError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

OnRetry = Callable[[int, Exception, float], None]


def backoff_waits(policy: RetryPolicy) -> Iterator[float]:
    """
    Yield the wait before each retry, in seconds.

    The first wait is `min_wait` (clamped to `max_wait`); every next one
    doubles, capped at `max_wait`.
    """
    wait = min(policy.min_wait, policy.max_wait)
    while True:
        yield wait
        wait = min(2 * wait, policy.max_wait)


def _classify(policy: RetryPolicy, attempt: int, err: Exception) -> None:
    """Raise PermanentError for errors the policy does not retry."""
    if not policy.is_retriable(err):
        logger.debug(f"Attempt {attempt} failed permanently: {err}")
        raise PermanentError(err) from err


def _before_sleep(
    policy: RetryPolicy,
    attempt: int,
    err: Exception,
    wait: float,
    on_retry: OnRetry | None,
) -> None:
    if on_retry:
        on_retry(attempt, err, wait)
    else:
        logger.warning(
            f"Retry {attempt + 1}/{policy.retries}: {err}, waiting {wait:.1f}s"
        )


def _exhausted(policy: RetryPolicy, err: Exception) -> RetriesExhaustedError:
    logger.error(f"All {policy.retries} retries exhausted: {err}")
    return RetriesExhaustedError(err, retries=policy.retries)


def retry(
    ctx: Context,
    policy: RetryPolicy,
    fn: Callable[[int], T],
    *,
    on_retry: OnRetry | None = None,
) -> T:
    """
    Call `fn` and retry it while it raises a retriable error.

    `fn` receives the zero-based attempt number. The call blocks until an
    attempt succeeds, a permanent error occurs, the retries run out, or the
    context ends. The context is checked before every attempt, so a
    cancelled context means `fn` is not called at all. The wait between
    attempts is not interruptible; a cancellation during it is observed
    before the next attempt.

    Args:
        ctx: Cancellation context
        policy: Retry policy
        fn: The attempt function
        on_retry: Optional callback(attempt, exception, wait) called before each retry

    Returns:
        The return value of the first successful attempt

    Raises:
        ContextCancelledError: the context ended before an attempt
        PermanentError: an attempt failed with a non-retriable error
        RetriesExhaustedError: the last attempt failed with a retriable error
    """
    waits = backoff_waits(policy)
    last = max(policy.retries, 0)

    for attempt in range(last + 1):
        err = ctx.err()
        if err is not None:
            raise err
        try:
            return fn(attempt)
        except ContextCancelledError:
            raise
        except Exception as e:
            _classify(policy, attempt, e)
            if attempt >= last:
                raise _exhausted(policy, e) from e
            wait = next(waits)
            _before_sleep(policy, attempt, e, wait, on_retry)
        time.sleep(wait)

    raise RuntimeError("Retry loop exited unexpectedly")


async def async_retry(
    ctx: Context,
    policy: RetryPolicy,
    fn: Callable[[int], Awaitable[T]],
    *,
    on_retry: OnRetry | None = None,
) -> T:
    """
    Async version of `retry`: awaits `fn(attempt)` and `asyncio.sleep`s
    between attempts. Same cancellation and error semantics.
    """
    waits = backoff_waits(policy)
    last = max(policy.retries, 0)

    for attempt in range(last + 1):
        err = ctx.err()
        if err is not None:
            raise err
        try:
            return await fn(attempt)
        except ContextCancelledError:
            raise
        except Exception as e:
            _classify(policy, attempt, e)
            if attempt >= last:
                raise _exhausted(policy, e) from e
            wait = next(waits)
            _before_sleep(policy, attempt, e, wait, on_retry)
        await asyncio.sleep(wait)

    raise RuntimeError("Retry loop exited unexpectedly")


def with_retry(
    policy: RetryPolicy | None = None,
    ctx: Context | None = None,
    on_retry: OnRetry | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator for synchronous functions with retry logic.

    Args:
        policy: Retry policy (default: RetryPolicy())
        ctx: Context checked before each attempt (default: background)
        on_retry: Optional callback(attempt, exception, wait) called before each retry

    Returns:
        Decorated function with retry behavior
    """
    if policy is None:
        policy = RetryPolicy()
    if ctx is None:
        ctx = Context.background()

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return retry(ctx, policy, lambda _: func(*args, **kwargs), on_retry=on_retry)

        return wrapper

    return decorator


def async_with_retry(
    policy: RetryPolicy | None = None,
    ctx: Context | None = None,
    on_retry: OnRetry | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Decorator for async functions with retry logic.

    Args:
        policy: Retry policy (default: RetryPolicy())
        ctx: Context checked before each attempt (default: background)
        on_retry: Optional callback(attempt, exception, wait) called before each retry

    Returns:
        Decorated async function with retry behavior
    """
    if policy is None:
        policy = RetryPolicy()
    if ctx is None:
        ctx = Context.background()

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return await async_retry(
                ctx, policy, lambda _: func(*args, **kwargs), on_retry=on_retry
            )

        return wrapper

    return decorator
