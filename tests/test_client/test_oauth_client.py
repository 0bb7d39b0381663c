"""Tests for oauth_async.client -- OAuthClient."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest

from oauth_async.client import OAuthClient
from oauth_async.exceptions import InvalidArgumentError
from oauth_async.models import ClientConfig, Failure, RequestConfig, Success


def _config(**overrides: Any) -> ClientConfig:
    values: dict[str, Any] = {
        "client_id": "c1",
        "client_secret": "s1",
        "authorization_url": "https://auth.example.com/authorize",
        "token_url": "https://auth.example.com/token",
    }
    values.update(overrides)
    return ClientConfig(**values)


# ---------------------------------------------------------------------------
# Context manager
# ---------------------------------------------------------------------------


class TestContextManager:
    def test_enter_creates_and_exit_closes_http_client(self) -> None:
        async def scenario() -> tuple[bool, bool, bool]:
            client = OAuthClient(_config())
            before = client._http is None
            async with client:
                inside = isinstance(client._http, httpx.AsyncClient)
            return before, inside, client._http is None

        assert asyncio.run(scenario()) == (True, True, True)

    def test_owned_client_uses_request_config_timeout(self) -> None:
        async def scenario() -> float:
            async with OAuthClient(_config(), RequestConfig(timeout=3)) as client:
                assert client._http is not None
                return client._http.timeout.connect

        assert asyncio.run(scenario()) == 3

    def test_injected_transport_skips_http_client(self, make_transport) -> None:
        transport = make_transport()

        async def scenario() -> bool:
            async with OAuthClient(_config(), transport=transport) as client:
                return client._http is None

        assert asyncio.run(scenario()) is True


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


class TestOperations:
    def test_authorization_url(self) -> None:
        client = OAuthClient(_config())
        url = client.authorization_url({"redirect_uri": "http://cb", "state": "s"})
        assert url == (
            "https://auth.example.com/authorize?client_id=c1&response_type=code"
            "&redirect_uri=http%3A%2F%2Fcb&state=s"
        )

    def test_token(self, make_transport) -> None:
        transport = make_transport(body='{"access_token":"t","token_type":"Bearer"}')

        async def scenario() -> Any:
            async with OAuthClient(_config(), transport=transport) as client:
                return await client.token({"code": "abc"})

        assert asyncio.run(scenario()) == Success(
            response={"access_token": "t", "token_type": "Bearer"}
        )
        sent = transport.calls[0]
        assert sent.url == "https://auth.example.com/token"
        assert sent.options.auth == ("c1", "s1")

    def test_timeout_from_request_config(self, make_transport) -> None:
        transport = make_transport()

        async def scenario() -> None:
            async with OAuthClient(_config(), RequestConfig(timeout=4), transport=transport) as client:
                await client.fetch_token()

        asyncio.run(scenario())
        assert transport.calls[0].options.timeout == 4

    def test_get_user_info(self, make_transport) -> None:
        transport = make_transport(status=401)

        async def scenario() -> Any:
            async with OAuthClient(_config(), transport=transport) as client:
                return await client.get_user_info("https://api.example.com/me", "tok")

        assert asyncio.run(scenario()) == Failure(status_code=401)

    def test_missing_token_url(self, make_transport) -> None:
        transport = make_transport()

        async def scenario() -> None:
            async with OAuthClient(_config(token_url=None), transport=transport) as client:
                client.fetch_token({"code": "abc"})

        with pytest.raises(InvalidArgumentError):
            asyncio.run(scenario())
        assert transport.calls == []

    def test_owned_transport_round_trip(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"access_token": "pooled"})

        original = httpx.AsyncClient

        def _mock_client(**kwargs: Any) -> httpx.AsyncClient:
            return original(transport=httpx.MockTransport(handler), **kwargs)

        monkeypatch.setattr("oauth_async.client.httpx.AsyncClient", _mock_client)

        async def scenario() -> Any:
            async with OAuthClient(_config()) as client:
                return await client.token()

        assert asyncio.run(scenario()) == Success(response={"access_token": "pooled"})
