"""Callback-style HTTP transport.

The exchange pipelines talk to the network through anything that has a
``send(method, url, options, on_complete)`` method (see :class:`Transport`).
The contract is:

* ``send`` returns immediately and never calls ``on_complete`` itself;
* ``on_complete`` is called exactly once with a :class:`TransportResponse`;
* a request that produced no HTTP answer (timeout, refused connection)
  completes with ``status=None`` and an ``error`` message.

:class:`HttpxTransport` is the default implementation, built on
:class:`httpx.AsyncClient`.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol

import httpx

from oauth_async.output import debug, warning


@dataclass
class RequestOptions:
    """Per-request settings passed to :meth:`Transport.send`."""

    headers: dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    timeout: float = 10.0
    auth: Optional[tuple[str, str]] = None


@dataclass
class TransportResponse:
    """What the transport hands to ``on_complete``."""

    status: Optional[int]
    body: str = ""
    error: Optional[str] = None


OnComplete = Callable[[TransportResponse], None]


class Transport(Protocol):
    def send(
        self,
        method: str,
        url: str,
        options: RequestOptions,
        on_complete: OnComplete,
    ) -> None: ...


class HttpxTransport:
    """Run requests as asyncio tasks on :class:`httpx.AsyncClient`.

    Args:
        client: A caller-owned client to reuse.  When ``None``, every
            request opens (and closes) its own short-lived client.
        verify_ssl: TLS verification for the short-lived clients.

    Example::

        async with httpx.AsyncClient() as http:
            transport = HttpxTransport(http)
            result = await fetch_token(config, params, transport=transport)
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        verify_ssl: bool = True,
    ) -> None:
        self._client = client
        self._verify_ssl = verify_ssl
        self._pending: set[asyncio.Task[TransportResponse]] = set()

    def send(
        self,
        method: str,
        url: str,
        options: RequestOptions,
        on_complete: OnComplete,
    ) -> None:
        """Schedule the request and return; *on_complete* fires from the task's done callback."""
        task = asyncio.get_running_loop().create_task(
            self._perform(method, url, options)
        )
        self._pending.add(task)

        def _finished(t: asyncio.Task[TransportResponse]) -> None:
            self._pending.discard(t)
            if t.cancelled():
                on_complete(TransportResponse(status=None, error="Request cancelled"))
                return
            exc = t.exception()
            if exc is not None:
                warning(f"{method} {url} failed unexpectedly: {exc!r}")
                on_complete(
                    TransportResponse(status=None, error=f"{type(exc).__name__}: {exc}")
                )
                return
            on_complete(t.result())

        task.add_done_callback(_finished)

    async def drain(self) -> None:
        """Wait until every scheduled request has completed."""
        while self._pending:
            await asyncio.wait(set(self._pending))

    async def _perform(
        self,
        method: str,
        url: str,
        options: RequestOptions,
    ) -> TransportResponse:
        try:
            if self._client is not None:
                response = await self._request(self._client, method, url, options)
            else:
                async with httpx.AsyncClient(verify=self._verify_ssl) as client:
                    response = await self._request(client, method, url, options)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            debug(f"{method} {url} -> transport error: {exc!r}")
            return TransportResponse(status=None, error=str(exc) or type(exc).__name__)

        debug(f"{method} {url} -> HTTP {response.status_code}")
        return TransportResponse(status=response.status_code, body=response.text)

    @staticmethod
    async def _request(
        client: httpx.AsyncClient,
        method: str,
        url: str,
        options: RequestOptions,
    ) -> httpx.Response:
        kwargs: dict[str, Any] = {
            "headers": options.headers,
            "timeout": options.timeout,
        }
        if options.body is not None:
            kwargs["content"] = options.body
        if options.auth is not None:
            kwargs["auth"] = options.auth
        return await client.request(method, url, **kwargs)
