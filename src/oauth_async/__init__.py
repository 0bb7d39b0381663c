"""oauth_async -- asynchronous OAuth 2.0 client.

Builds authorization redirect URLs, turns grant parameters into
protocol-correct token requests, and performs the token exchange without
blocking the caller: every exchange returns a single-use completion slot
that resolves to :class:`~oauth_async.models.Success` or
:class:`~oauth_async.models.Failure`.

Typical use::

    from oauth_async import ClientConfig, build_authorization_url, fetch_token

    config = ClientConfig(client_id="c1", client_secret="s1",
                          authorization_url="https://auth.example.com/authorize",
                          token_url="https://auth.example.com/token")

    url = build_authorization_url(config, {"redirect_uri": cb, "state": state})
    ...
    result = await fetch_token(config, {"code": code, "redirect_uri": cb})

Modules:
    query: form/query encoding and URL query composition.
    authorization: authorization redirect URLs.
    grants: grant-type selection and token request descriptors.
    exchange: the token and resource fetch pipelines.
    slot: the single-slot completion channel.
    transport: callback-style transport over httpx.
    client: :class:`OAuthClient`, a pooled client bound to one config.
    app: the ``oauth-async`` command line.
"""

__version__ = "0.1.0"

from oauth_async.authorization import build_authorization_url, create_authorization_url
from oauth_async.client import OAuthClient
from oauth_async.exceptions import (
    ConfigError,
    InvalidArgumentError,
    MalformedResponseError,
    MalformedUrlError,
    OAuthAsyncError,
    SlotConsumedError,
)
from oauth_async.exchange import fetch_token, get_user_info, post, request
from oauth_async.grants import grant_type, token_request
from oauth_async.keys import normalize_keys
from oauth_async.models import (
    ClientConfig,
    ExchangeResult,
    Failure,
    GrantType,
    RequestDescriptor,
    Success,
)
from oauth_async.query import assoc_query_params, generate_query_string
from oauth_async.slot import CompletionSlot
from oauth_async.transport import HttpxTransport, RequestOptions, TransportResponse

__all__ = [
    "ClientConfig",
    "CompletionSlot",
    "ConfigError",
    "ExchangeResult",
    "Failure",
    "GrantType",
    "HttpxTransport",
    "InvalidArgumentError",
    "MalformedResponseError",
    "MalformedUrlError",
    "OAuthAsyncError",
    "OAuthClient",
    "RequestDescriptor",
    "RequestOptions",
    "SlotConsumedError",
    "Success",
    "TransportResponse",
    "assoc_query_params",
    "build_authorization_url",
    "create_authorization_url",
    "fetch_token",
    "generate_query_string",
    "get_user_info",
    "grant_type",
    "normalize_keys",
    "post",
    "request",
    "token_request",
]
