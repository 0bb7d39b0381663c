"""Authorization redirect URL construction (:rfc:`6749` section 4.1.1).

:func:`create_authorization_url` takes every piece explicitly;
:func:`build_authorization_url` is the convenience form that accepts either
a :class:`~oauth_async.models.ClientConfig` or a bare endpoint URL plus a
params mapping.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any, Optional, Union

from oauth_async.exceptions import InvalidArgumentError
from oauth_async.keys import normalize_params
from oauth_async.models import ClientConfig
from oauth_async.query import assoc_query_params

# Keys consumed by the builder itself; everything else is passed through.
_CONTROL_KEYS = (
    "client_id",
    "authorization_url",
    "response_type",
    "redirect_uri",
    "scope",
    "state",
)


def _scope_string(scope: Any) -> Optional[str]:
    if scope is None:
        return None
    if isinstance(scope, enum.Enum):
        return str(scope.value)
    if isinstance(scope, (list, tuple, set, frozenset)):
        return " ".join(str(s.value if isinstance(s, enum.Enum) else s) for s in scope)
    return str(scope)


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list, tuple)) and len(value) == 0:
        return False
    return True


def create_authorization_url(
    authorization_url: str,
    client_id: Optional[str],
    response_type: Optional[str],
    redirect_uri: Optional[str],
    params: Optional[Mapping[str, Any]] = None,
) -> str:
    """Return the URL a user agent is redirected to for authorization.

    Args:
        authorization_url: The authorization endpoint.
        client_id: The registered client identifier.
        response_type: Defaults to ``"code"`` when ``None``.
        redirect_uri: Where the server sends the user back to.
        params: Extra parameters.  ``scope`` and ``state`` are picked out;
            anything else is appended after the canonical keys.

    Returns:
        The endpoint URL with the query merged in.  Keys whose value is
        ``None`` or empty are left out entirely.

    Raises:
        MalformedUrlError: If *authorization_url* is not an absolute URL.
    """
    extra = normalize_params(params)
    if isinstance(response_type, enum.Enum):
        response_type = response_type.value

    query: dict[str, Any] = {
        "client_id": client_id,
        "response_type": response_type or "code",
        "redirect_uri": redirect_uri,
        "scope": _scope_string(extra.get("scope")),
        "state": extra.get("state"),
    }
    for key, value in extra.items():
        if key not in _CONTROL_KEYS:
            query[key] = value

    return assoc_query_params(
        authorization_url,
        {k: v for k, v in query.items() if _is_present(v)},
    )


def build_authorization_url(
    target: Union[ClientConfig, str],
    params: Optional[Mapping[str, Any]] = None,
) -> str:
    """Build an authorization URL from a client config or a bare endpoint.

    With a :class:`~oauth_async.models.ClientConfig`, the endpoint and
    ``client_id`` come from the config (params may override ``client_id``).
    With a string, it is the endpoint and ``client_id``, ``response_type``
    and ``redirect_uri`` are read from *params*.

    Raises:
        InvalidArgumentError: If no authorization endpoint is known.
    """
    merged = normalize_params(params)

    if isinstance(target, ClientConfig):
        if target.client_id is not None:
            merged = {"client_id": target.client_id, **merged}
        return build_authorization_url(target.authorization_url, merged)

    if not target:
        raise InvalidArgumentError("Authorization URL cannot be empty")

    return create_authorization_url(
        str(target),
        merged.get("client_id"),
        merged.get("response_type"),
        merged.get("redirect_uri"),
        {
            k: v
            for k, v in merged.items()
            if k not in ("client_id", "response_type", "redirect_uri")
        },
    )
