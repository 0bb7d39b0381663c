"""Symbolic key normalization.

Decoded response bodies are keyed by *symbolic keys*: plain snake_case
strings.  Callers may spell the reserved params the hyphenated way
(``client-id``, ``refresh-token``); :func:`normalize_params` folds those
onto the snake_case form so lookups only ever need one spelling.  Any other
param key reaches the wire exactly as given.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

# Params the library reads itself; only these accept a hyphenated spelling.
RESERVED_KEYS = frozenset(
    {
        "client_id",
        "client_secret",
        "redirect_uri",
        "refresh_token",
        "grant_type",
        "response_type",
        "authorization_url",
        "token_url",
    }
)


def symbolic_key(key: Any) -> str:
    """Return the snake_case string form of *key*."""
    return str(key).replace("-", "_")


def normalize_keys(value: Any) -> Any:
    """Recursively rebuild *value* with every mapping key made symbolic.

    Lists and tuples are walked (and come back as lists); scalars are
    returned unchanged.

    Example::

        >>> normalize_keys({"access-token": "t", "extra": [{"a-b": 1}]})
        {'access_token': 't', 'extra': [{'a_b': 1}]}
    """
    if isinstance(value, Mapping):
        return {symbolic_key(k): normalize_keys(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_keys(item) for item in value]
    return value


def _param_key(key: Any) -> Any:
    symbolic = symbolic_key(key)
    return symbolic if symbolic in RESERVED_KEYS else key


def normalize_params(params: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a shallow copy of *params* with the reserved keys made symbolic.

    ``client-id`` becomes ``client_id`` and so on for :data:`RESERVED_KEYS`;
    provider-specific keys such as ``x-custom`` are kept verbatim.  Values
    are left alone: a scope list stays a list and a ``service`` strategy
    stays callable.
    """
    if not params:
        return {}
    return {_param_key(k): v for k, v in params.items()}
