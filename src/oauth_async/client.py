"""Client bound to one :class:`~oauth_async.models.ClientConfig`.

:class:`OAuthClient` owns a single :class:`httpx.AsyncClient` for its
lifetime, so several exchanges share one connection pool.  Each call still
gets its own descriptor and completion slot; nothing mutable is shared
between exchanges.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

import httpx

from oauth_async.authorization import build_authorization_url
from oauth_async.exchange import fetch_token, get_user_info
from oauth_async.models import ClientConfig, ExchangeResult, RequestConfig
from oauth_async.slot import CompletionSlot
from oauth_async.transport import HttpxTransport, Transport


class OAuthClient:
    """Asynchronous OAuth2 client for one authorization server.

    Must be used as an async context manager.

    Args:
        config: Client identity and endpoints.
        request_config: Timeout and TLS settings.
        transport: Optional transport to use instead of an owned
            :class:`~oauth_async.transport.HttpxTransport`.

    Example::

        async with OAuthClient(config) as client:
            url = client.authorization_url({"redirect_uri": cb, "state": state})
            ...
            result = await client.fetch_token({"code": code, "redirect_uri": cb})
    """

    def __init__(
        self,
        config: ClientConfig,
        request_config: Optional[RequestConfig] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        self._config = config
        self._request_config = request_config or RequestConfig()
        self._transport: Optional[Transport] = transport
        self._owned: Optional[HttpxTransport] = None
        self._http: Optional[httpx.AsyncClient] = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> OAuthClient:
        if self._transport is None:
            self._http = httpx.AsyncClient(
                timeout=self._request_config.timeout,
                verify=self._request_config.verify_ssl,
                follow_redirects=True,
            )
            self._owned = HttpxTransport(self._http)
            self._transport = self._owned
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._owned is not None:
            await self._owned.drain()
            self._transport = None
            self._owned = None
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def authorization_url(self, params: Optional[Mapping[str, Any]] = None) -> str:
        """Build the authorization redirect URL for this client."""
        return build_authorization_url(self._config, params)

    def fetch_token(self, params: Optional[Mapping[str, Any]] = None) -> CompletionSlot:
        """Start a token exchange; see :func:`oauth_async.exchange.fetch_token`."""
        return fetch_token(
            self._config,
            params,
            transport=self._require_transport(),
            timeout=self._request_config.timeout,
        )

    def get_user_info(self, url: Optional[str], token: str) -> CompletionSlot:
        """Start a bearer-token GET; see :func:`oauth_async.exchange.get_user_info`."""
        return get_user_info(
            url,
            token,
            transport=self._require_transport(),
            timeout=self._request_config.timeout,
        )

    async def token(self, params: Optional[Mapping[str, Any]] = None) -> ExchangeResult:
        """Fetch a token and wait for the result."""
        return await self.fetch_token(params)

    def _require_transport(self) -> Transport:
        assert self._transport is not None, "Client not initialised -- use as async context manager"
        return self._transport
