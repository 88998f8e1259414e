"""
Transport selection and response classification shared by the sync and
async request functions.
"""

import logging
import threading

import httpx

from ..context import Context
from ..exceptions import HTTPStatusError, RetriableError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

_default_client: httpx.Client | None = None
_default_client_lock = threading.Lock()


def default_client() -> httpx.Client:
    """Process-wide client used when the context does not supply one."""
    global _default_client
    with _default_client_lock:
        if _default_client is None:
            _default_client = httpx.Client(timeout=DEFAULT_TIMEOUT, follow_redirects=True)
        return _default_client


def resolve_client(ctx: Context) -> httpx.Client:
    """Tests will supply a client in ctx; everything else uses the default."""
    return ctx.client or default_client()


def request_kwargs(ctx: Context, query) -> dict:
    """Keyword arguments for a GET carrying `query` and the context deadline."""
    kwargs = {}
    if query is not None:
        kwargs["params"] = query
    remaining = ctx.remaining()
    if remaining is not None:
        kwargs["timeout"] = remaining
    return kwargs


def response_ok(response: httpx.Response) -> bool:
    """True if the response is successful (code 2xx)."""
    return 200 <= response.status_code <= 299


def response_retriable(response: httpx.Response) -> bool:
    """True if an unsuccessful response can be retried. Normally, these are 5xx codes."""
    return 500 <= response.status_code <= 599


def check_response(url: str, response: httpx.Response) -> httpx.Response:
    """
    Convert a response into the request outcome.

    Returns the response for 2xx, raises RetriableError for 5xx and
    HTTPStatusError otherwise. Both errors carry the response.
    """
    logger.debug(f"GET {url} -> {response.status_code}")
    if response_ok(response):
        return response
    status = f"{response.status_code} {response.reason_phrase}".strip()
    if response_retriable(response):
        raise RetriableError(
            f"url: {url}, response code {status}",
            url=url,
            response=response,
        )
    # the body of the response may have additional info, add it to the error.
    body = response.text
    raise HTTPStatusError(
        f"url: {url}, response code {status}, body: {body}",
        body=body,
        url=url,
        response=response,
    )
