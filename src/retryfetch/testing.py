"""
In-process fake HTTP server for tests.

The server answers with the status code and body from the matching
sequence, and then repeats the last one in the sequence. Requests never
leave the process: clients are wired to an `httpx.MockTransport`.

Example:
    >>> from retryfetch import Context, RetryPolicy, get_retry
    >>> server = FakeServer()
    >>> server.response_status = [500, 200]
    >>> ctx = Context.background().with_client(server.client())
    >>> get_retry(ctx, server.url, policy=RetryPolicy(min_wait=0.001)).status_code
    200
"""

import threading

import httpx


class FakeServer:
    """
    Scripted responses keyed by URL path.

    Attributes:
        response_status: Default status code sequence
        response_body: Default response body sequence
        response_status_map: URL path -> status code sequence
        response_body_map: URL path -> response body sequence
        request_path: Path of the last request received
        request_query: Query of the last request received
        requests: Every request received, in order
    """

    def __init__(self, url: str = "http://testserver"):
        self.url = url.rstrip("/")
        self.response_status: list[int] = [200]
        self.response_body: list[str] = [""]
        self.response_status_map: dict[str, list[int]] = {}
        self.response_body_map: dict[str, list[str]] = {}
        self.request_path: str | None = None
        self.request_query: dict[str, str] | None = None
        self.requests: list[httpx.Request] = []
        self._lock = threading.Lock()
        self._clients: list[httpx.Client] = []
        self._async_clients: list[httpx.AsyncClient] = []

    @staticmethod
    def _advance(seq: list, default):
        """Head of `seq` and the sequence to use next time."""
        head = seq[0] if seq else default
        return head, seq[1:] if len(seq) > 1 else seq

    def handle(self, request: httpx.Request) -> httpx.Response:
        """Transport handler: answer `request` from the scripted sequences."""
        path = request.url.path
        with self._lock:
            if path in self.response_status_map:
                status, self.response_status_map[path] = self._advance(
                    self.response_status_map[path], 200
                )
            else:
                status, self.response_status = self._advance(self.response_status, 200)
            if path in self.response_body_map:
                body, self.response_body_map[path] = self._advance(
                    self.response_body_map[path], ""
                )
            else:
                body, self.response_body = self._advance(self.response_body, "")
            self.request_path = path
            self.request_query = dict(request.url.params)
            self.requests.append(request)
        return httpx.Response(status, text=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self) -> httpx.Client:
        """Sync client wired to this server, to be put in a Context."""
        client = httpx.Client(transport=self.transport())
        self._clients.append(client)
        return client

    def async_client(self) -> httpx.AsyncClient:
        """
        Async client wired to this server, to be put in a Context.

        Closed by `aclose()` or on leaving `async with server`; the sync
        `with server` block only closes sync clients.
        """
        client = httpx.AsyncClient(transport=self.transport())
        self._async_clients.append(client)
        return client

    def close(self) -> None:
        """Close the sync clients handed out by this server."""
        for client in self._clients:
            client.close()
        self._clients.clear()

    async def aclose(self) -> None:
        """Close every client handed out by this server."""
        self.close()
        for client in self._async_clients:
            await client.aclose()
        self._async_clients.clear()

    def __enter__(self) -> "FakeServer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    async def __aenter__(self) -> "FakeServer":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
