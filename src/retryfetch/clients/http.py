"""
Retriable HTTP GET requests.

`get` performs one attempt and maps its outcome onto the exception
hierarchy: 5xx responses raise RetriableError, so `get` composes with
`retry`. `get_retry` and `fetch_json` do that composition.
"""

import dataclasses
from typing import Any, Callable, Mapping

import httpx

from .base import (
    DEFAULT_TIMEOUT,
    check_response,
    request_kwargs,
    resolve_client,
)
from ..context import Context
from ..exceptions import DecodeError, RequestError
from ..retries import RetryPolicy, async_retry, retry

Query = Mapping[str, Any]


def _transport_error(ctx: Context, url: str, e: Exception) -> Exception:
    # a deadline that expired mid-request is reported as the context's error
    err = ctx.err()
    if err is not None:
        return err
    return RequestError(f"url: {url}, request failed: {e}", url=url, cause=e)


def get(ctx: Context, url: str, query: Query | None = None) -> httpx.Response:
    """
    Send a GET request to `url` with optional query parameters.

    Args:
        ctx: Context; supplies the client and deadline
        url: Target URL
        query: Query parameters, encoded into the query string

    Returns:
        The 2xx response

    Raises:
        RetriableError: 5xx response (retried by `retry` with the default policy)
        HTTPStatusError: any other non-2xx response; the body is in the message
        RequestError: the request failed before a usable response was received
            (transport failure, redirect loop, undecodable content)
        ContextCancelledError: the context ended
    """
    err = ctx.err()
    if err is not None:
        raise err
    client = resolve_client(ctx)
    try:
        response = client.get(url, **request_kwargs(ctx, query))
    except (httpx.RequestError, httpx.InvalidURL) as e:
        raise _transport_error(ctx, url, e) from e
    return check_response(url, response)


async def async_get(ctx: Context, url: str, query: Query | None = None) -> httpx.Response:
    """Async version of `get`, using the context's AsyncClient if present."""
    err = ctx.err()
    if err is not None:
        raise err
    try:
        if ctx.async_client is not None:
            response = await ctx.async_client.get(url, **request_kwargs(ctx, query))
        else:
            async with httpx.AsyncClient(
                timeout=DEFAULT_TIMEOUT, follow_redirects=True
            ) as client:
                response = await client.get(url, **request_kwargs(ctx, query))
    except (httpx.RequestError, httpx.InvalidURL) as e:
        raise _transport_error(ctx, url, e) from e
    return check_response(url, response)


def get_retry(
    ctx: Context,
    url: str,
    query: Query | None = None,
    policy: RetryPolicy | None = None,
) -> httpx.Response:
    """Like `get`, but retries transient failures according to `policy`."""
    if policy is None:
        policy = RetryPolicy()
    return retry(ctx, policy, lambda attempt: get(ctx, url, query))


async def async_get_retry(
    ctx: Context,
    url: str,
    query: Query | None = None,
    policy: RetryPolicy | None = None,
) -> httpx.Response:
    """Like `async_get`, but retries transient failures according to `policy`."""
    if policy is None:
        policy = RetryPolicy()
    return await async_retry(ctx, policy, lambda attempt: async_get(ctx, url, query))


def decode_json(url: str, response: httpx.Response, into: Callable[..., Any] | None = None) -> Any:
    """
    Decode the response body as JSON, optionally converting it with `into`.

    A dataclass receives the JSON object's keys that match its fields;
    unknown keys are ignored. Any other callable receives the object as
    keyword arguments, or the decoded value itself when it is not an object.
    """
    try:
        data = response.json()
    except ValueError as e:
        raise DecodeError(
            f"url: {url}, invalid JSON: {e}", url=url, response=response, cause=e
        ) from e
    if into is None:
        return data
    try:
        if dataclasses.is_dataclass(into) and isinstance(data, dict):
            names = {f.name for f in dataclasses.fields(into) if f.init}
            return into(**{k: v for k, v in data.items() if k in names})
        if isinstance(data, dict):
            return into(**data)
        return into(data)
    except (TypeError, ValueError) as e:
        raise DecodeError(
            f"url: {url}, cannot convert JSON to {getattr(into, '__name__', into)}: {e}",
            url=url,
            response=response,
            cause=e,
        ) from e


def fetch_json(
    ctx: Context,
    url: str,
    into: Callable[..., Any] | None = None,
    query: Query | None = None,
    policy: RetryPolicy | None = None,
) -> Any:
    """
    Fetch a JSON blob from `url` with retries and decode it.

    Decode failures raise DecodeError and are not retried.
    """
    response = get_retry(ctx, url, query, policy)
    return decode_json(url, response, into)


async def async_fetch_json(
    ctx: Context,
    url: str,
    into: Callable[..., Any] | None = None,
    query: Query | None = None,
    policy: RetryPolicy | None = None,
) -> Any:
    """Async version of `fetch_json`."""
    response = await async_get_retry(ctx, url, query, policy)
    return decode_json(url, response, into)
