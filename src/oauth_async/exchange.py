"""Asynchronous token exchange and resource fetch pipelines.

Both pipelines return a :class:`~oauth_async.slot.CompletionSlot` right
away and fill it from the transport's completion callback:

* :func:`fetch_token` / :func:`post` / :func:`request` -- ``POST`` a token
  request (:rfc:`6749` section 4) to the token endpoint.
* :func:`get_user_info` -- ``GET`` a protected resource with a bearer token.

A 200 answer becomes :class:`~oauth_async.models.Success` with the JSON
body's keys normalized.  Anything else becomes
:class:`~oauth_async.models.Failure` carrying the status code; the body is
not parsed.  Only a missing URL is raised, synchronously and before any
request is sent.

Example::

    async def main():
        config = ClientConfig(client_id="c1", client_secret="s1",
                              token_url="https://auth.example.com/token")
        result = await fetch_token(config, {"scope": "read"})
        if result.success:
            print(result.response["access_token"])
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Optional, Union

from oauth_async.exceptions import InvalidArgumentError, MalformedResponseError
from oauth_async.grants import token_request
from oauth_async.keys import normalize_keys, normalize_params
from oauth_async.models import ClientConfig, Failure, RequestDescriptor, Success
from oauth_async.output import debug
from oauth_async.query import generate_query_string
from oauth_async.slot import CompletionSlot
from oauth_async.transport import (
    HttpxTransport,
    RequestOptions,
    Transport,
    TransportResponse,
)

DEFAULT_TIMEOUT = 10.0

# Status reported when the transport produced no HTTP answer at all.
TRANSPORT_FAILURE_STATUS = 400

_TOKEN_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "Cache-Control": "no-cache",
    "charset": "utf-8",
}

_ACCEPT_TYPES = {"json": "application/json"}


def check_url(url: Optional[str]) -> None:
    """Raise :class:`~oauth_async.exceptions.InvalidArgumentError` if *url* is missing."""
    if url is None or (isinstance(url, str) and not url.strip()):
        raise InvalidArgumentError("Host URL cannot be empty")


def _complete(slot: CompletionSlot, method: str, url: str, response: TransportResponse) -> None:
    """Turn a transport response into the slot's single value."""
    if response.status != 200:
        status = response.status if response.status is not None else TRANSPORT_FAILURE_STATUS
        debug(f"{method} {url} failed with status {status}")
        slot.deliver(Failure(status_code=status, error=response.error))
        return

    try:
        decoded = json.loads(response.body)
    except (json.JSONDecodeError, TypeError) as exc:
        slot.fail(MalformedResponseError(f"{method} {url} returned a body that is not JSON: {exc}"))
        return

    if not isinstance(decoded, Mapping):
        slot.fail(
            MalformedResponseError(
                f"{method} {url} returned JSON {type(decoded).__name__}, expected an object"
            )
        )
        return

    slot.deliver(Success(response=normalize_keys(decoded)))


def request(
    url: str,
    descriptor: RequestDescriptor,
    *,
    transport: Optional[Transport] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> CompletionSlot:
    """POST *descriptor* to *url* and return the slot its result lands in.

    The client credentials travel twice: as an HTTP basic-auth header and
    as ``client_id``/``client_secret`` form fields.  Authorization servers
    differ in which one they read.  A credential that is ``None`` is left
    out of both.
    """
    client_id, client_secret = descriptor.basic_auth
    credentials = {
        k: v
        for k, v in (("client_id", client_id), ("client_secret", client_secret))
        if v is not None
    }

    headers = dict(_TOKEN_HEADERS)
    accept = _ACCEPT_TYPES.get(descriptor.accept)
    if accept:
        headers["Accept"] = accept

    options = RequestOptions(
        headers=headers,
        body=generate_query_string({**descriptor.form_body, **credentials}),
        timeout=timeout,
        auth=(client_id, client_secret)
        if client_id is not None and client_secret is not None
        else None,
    )

    slot = CompletionSlot()
    debug(f"POST {url} (grant_type={descriptor.form_body.get('grant_type')})")
    (transport or HttpxTransport()).send(
        "POST",
        url,
        options,
        lambda response: _complete(slot, "POST", url, response),
    )
    return slot


def post(
    url: Optional[str],
    descriptor: Optional[RequestDescriptor] = None,
    *,
    transport: Optional[Transport] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> CompletionSlot:
    """Like :func:`request`, but checks *url* first.

    Raises:
        InvalidArgumentError: If *url* is ``None`` or empty.
    """
    check_url(url)
    return request(
        url,  # type: ignore[arg-type]
        descriptor or RequestDescriptor(),
        transport=transport,
        timeout=timeout,
    )


def fetch_token(
    target: Union[ClientConfig, str, None],
    params: Optional[Mapping[str, Any]] = None,
    *,
    transport: Optional[Transport] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> CompletionSlot:
    """Fetch a token from an authorization server.

    Args:
        target: A :class:`~oauth_async.models.ClientConfig` (its
            ``token_url`` is used and its credentials fill in for params
            that omit them) or the token endpoint URL itself.
        params: Grant parameters; see :func:`oauth_async.grants.token_request`.
        transport: Transport to send through.  Defaults to a fresh
            :class:`~oauth_async.transport.HttpxTransport`.
        timeout: Request timeout in seconds.

    Returns:
        A slot that resolves to :class:`~oauth_async.models.Success` or
        :class:`~oauth_async.models.Failure`.

    Raises:
        InvalidArgumentError: If there is no token URL, or the params name
            an unknown grant type.
    """
    if isinstance(target, ClientConfig):
        defaults = {
            k: v
            for k, v in (("client_id", target.client_id), ("client_secret", target.client_secret))
            if v is not None
        }
        return fetch_token(
            target.token_url,
            {**defaults, **normalize_params(params)},
            transport=transport,
            timeout=timeout,
        )

    check_url(target)
    return post(target, token_request(params or {}), transport=transport, timeout=timeout)


def get_user_info(
    url: Optional[str],
    token: str,
    *,
    transport: Optional[Transport] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> CompletionSlot:
    """GET a protected resource (typically a user-info endpoint) with a bearer token.

    Failures carry the status code, the same as :func:`fetch_token`.

    Raises:
        InvalidArgumentError: If *url* is ``None`` or empty.
    """
    check_url(url)
    options = RequestOptions(
        headers={"Authorization": f"Bearer {token}"},
        timeout=timeout,
    )

    slot = CompletionSlot()
    debug(f"GET {url}")
    (transport or HttpxTransport()).send(
        "GET",
        url,  # type: ignore[arg-type]
        options,
        lambda response: _complete(slot, "GET", url, response),  # type: ignore[arg-type]
    )
    return slot
