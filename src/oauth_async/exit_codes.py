"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~oauth_async.exceptions.OAuthAsyncError` subclass, or
by the CLI when an exchange comes back as a
:class:`~oauth_async.models.Failure`.

Example::

    $ oauth-async token --code abc
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the token endpoint answered 401
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments (missing URL, malformed URL, unknown grant)."""

EXIT_AUTH_FAILURE = 3
"""The authorization server or resource server rejected the credentials (HTTP 401/403)."""

EXIT_SERVER_ERROR = 5
"""The remote endpoint answered with any other non-200 status, or an unusable body."""
