"""Token request construction, one builder per OAuth2 grant type.

:func:`grant_type` decides which grant a params mapping describes and
:func:`token_request` hands the params to the matching builder.  Each
builder is a strict allow-list: only the fields the grant defines reach the
form body, whatever else the caller passed in.

Provider-specific flows bypass the table.  Put a callable under the
``service`` key and it is called with the (normalized) params; it must
return a :class:`~oauth_async.models.RequestDescriptor`.

Example::

    descriptor = token_request({
        "code": "abc",
        "client_id": "c1",
        "client_secret": "s1",
        "redirect_uri": "http://cb",
    })
    descriptor.form_body
    # {'code': 'abc', 'redirect_uri': 'http://cb', 'grant_type': 'authorization_code'}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Union

from oauth_async.exceptions import InvalidArgumentError
from oauth_async.keys import normalize_params
from oauth_async.models import GrantType, RequestDescriptor

ServiceStrategy = Callable[[dict[str, Any]], RequestDescriptor]


def _parse_grant_type(value: Any) -> GrantType:
    if isinstance(value, GrantType):
        return value
    text = str(value).replace("_", "-")
    try:
        return GrantType(text)
    except ValueError:
        raise InvalidArgumentError(f"Unknown grant type: {value!r}") from None


def grant_type(params: Mapping[str, Any]) -> Union[GrantType, ServiceStrategy]:
    """Return the grant a params mapping asks for.

    First match wins: ``service``, then an explicit ``grant_type``, then the
    presence of ``code``, ``refresh_token`` or ``username``.  Presence means
    "not ``None``": ``{"code": ""}`` still selects the authorization code
    grant and the server gets to reject the empty code.  With none of
    those the client credentials grant is used.

    Raises:
        InvalidArgumentError: If ``service`` is not callable or
            ``grant_type`` names an unknown grant.
    """
    params = normalize_params(params)
    if params.get("service") is not None:
        service = params["service"]
        if not callable(service):
            raise InvalidArgumentError(
                f"'service' must be a callable returning a RequestDescriptor, got {service!r}"
            )
        return service
    if params.get("grant_type") is not None:
        return _parse_grant_type(params["grant_type"])
    if params.get("code") is not None:
        return GrantType.AUTHORIZATION_CODE
    if params.get("refresh_token") is not None:
        return GrantType.REFRESH_TOKEN
    if params.get("username") is not None:
        return GrantType.PASSWORD
    return GrantType.CLIENT_CREDENTIALS


def _select(params: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any]:
    return {k: params[k] for k in keys if params.get(k) is not None}


def _descriptor(params: dict[str, Any], grant: GrantType, fields: tuple[str, ...]) -> RequestDescriptor:
    form_body = _select(params, fields)
    form_body["grant_type"] = grant.wire_value
    return RequestDescriptor(
        form_body=form_body,
        basic_auth=(params.get("client_id"), params.get("client_secret")),
    )


# http://tools.ietf.org/html/rfc6749#section-4.1.3
def _authorization_code(params: dict[str, Any]) -> RequestDescriptor:
    return _descriptor(params, GrantType.AUTHORIZATION_CODE, ("code", "scope", "redirect_uri"))


# http://tools.ietf.org/html/rfc6749#section-4.4.2
def _client_credentials(params: dict[str, Any]) -> RequestDescriptor:
    return _descriptor(params, GrantType.CLIENT_CREDENTIALS, ("scope",))


# http://tools.ietf.org/html/rfc6749#section-4.3.2
def _password(params: dict[str, Any]) -> RequestDescriptor:
    return _descriptor(params, GrantType.PASSWORD, ("username", "password", "scope"))


# http://tools.ietf.org/html/rfc6749#section-6
def _refresh_token(params: dict[str, Any]) -> RequestDescriptor:
    return _descriptor(params, GrantType.REFRESH_TOKEN, ("scope", "refresh_token"))


_BUILDERS: dict[GrantType, Callable[[dict[str, Any]], RequestDescriptor]] = {
    GrantType.AUTHORIZATION_CODE: _authorization_code,
    GrantType.CLIENT_CREDENTIALS: _client_credentials,
    GrantType.PASSWORD: _password,
    GrantType.REFRESH_TOKEN: _refresh_token,
}


def token_request(params: Mapping[str, Any]) -> RequestDescriptor:
    """Build the request descriptor for the grant *params* describe.

    Missing optional fields are simply absent from the form body.  Missing
    required fields (``code`` for the authorization code grant, say) are
    not checked here; the authorization server reports them.

    Raises:
        InvalidArgumentError: On an unknown grant type, or when a
            ``service`` strategy returns something other than a
            :class:`~oauth_async.models.RequestDescriptor`.
    """
    params = normalize_params(params)
    grant = grant_type(params)

    if isinstance(grant, GrantType):
        return _BUILDERS[grant](params)

    descriptor = grant(params)
    if not isinstance(descriptor, RequestDescriptor):
        raise InvalidArgumentError(
            f"Service strategy returned {type(descriptor).__name__}, expected RequestDescriptor"
        )
    return descriptor
