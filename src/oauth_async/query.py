"""Form/query encoding and query-string composition.

:func:`generate_query_string` turns a params mapping into an
``application/x-www-form-urlencoded`` string, repeating the key for
sequence values (``scope=a&scope=b``).

:func:`assoc_query_params` appends such a string to the query of an
existing URL.  The path, the existing raw query and the raw fragment are
copied through untouched: re-encoding them would double-encode ``%xx``
escapes or reorder data the caller put there on purpose.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote_plus, urlsplit

from oauth_async.exceptions import MalformedUrlError


def _render(value: Any) -> str:
    """Turn a key or value into the string that gets percent-encoded."""
    if value is None:
        return ""
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)


def url_encode(unencoded: Any) -> str:
    """Return the UTF-8 percent-encoded form of *unencoded* (space as ``+``)."""
    return quote_plus(_render(unencoded), safe="", encoding="utf-8")


def generate_query_string(params: Mapping[str, Any]) -> str:
    """Encode *params* as ``key=value`` pairs joined with ``&``.

    Args:
        params: Mapping of key to a value or a list/tuple of values.  Pairs
            follow the mapping's iteration order.

    Returns:
        The encoded string; ``""`` for an empty mapping.
    """
    pairs: list[str] = []
    for key, value in params.items():
        values = value if isinstance(value, (list, tuple)) else [value]
        encoded_key = url_encode(key)
        for item in values:
            pairs.append(f"{encoded_key}={url_encode(item)}")
    return "&".join(pairs)


def assoc_query_params(url: str, params: Mapping[str, Any]) -> str:
    """Add *params* to the query section of *url*.

    Existing query parameters are kept as they are, duplicates included.

    Args:
        url: An absolute URL (scheme and authority required).
        params: Parameters to append, encoded with :func:`generate_query_string`.

    Returns:
        The reassembled URL.

    Raises:
        MalformedUrlError: If *url* is not a valid absolute URL.

    Example::

        >>> assoc_query_params("http://x.com/a?x=1#frag", {"y": 2})
        'http://x.com/a?x=1&y=2#frag'
    """
    if not isinstance(url, str) or not url:
        raise MalformedUrlError(f"Not an absolute URL: {url!r}")
    if any(ch.isspace() for ch in url):
        raise MalformedUrlError(f"URL contains whitespace: {url!r}")

    try:
        parts = urlsplit(url)
        parts.port  # validates the port component
    except ValueError as exc:
        raise MalformedUrlError(f"Cannot parse URL {url!r}: {exc}") from exc

    if not parts.scheme or not parts.netloc:
        raise MalformedUrlError(f"Not an absolute URL: {url!r}")

    new_query = generate_query_string(params)
    if parts.query and new_query:
        query = f"{parts.query}&{new_query}"
    else:
        query = parts.query or new_query

    result = f"{parts.scheme}://{parts.netloc}{parts.path}?{query}"
    if parts.fragment:
        result += f"#{parts.fragment}"
    return result
