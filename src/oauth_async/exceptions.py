"""Exception hierarchy for oauth_async.

All exceptions inherit from :class:`OAuthAsyncError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`oauth_async.exit_codes`.

Only argument problems are raised synchronously.  Remote failures (any
non-200 answer) are never raised: they are delivered as
:class:`~oauth_async.models.Failure` values through the completion slot.

Subclass hierarchy::

    OAuthAsyncError (exit 1)
    +-- InvalidArgumentError    (exit 2)
    +-- MalformedUrlError       (exit 2)
    +-- MalformedResponseError  (exit 5)
    +-- SlotConsumedError       (exit 1)
    +-- ConfigError             (exit 1)
"""

from oauth_async.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SERVER_ERROR,
)


class OAuthAsyncError(Exception):
    """Base exception for all oauth_async errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidArgumentError(OAuthAsyncError):
    """Raised before any I/O when a required argument (e.g. the endpoint URL) is missing or unusable."""

    exit_code = EXIT_INVALID_USAGE


class MalformedUrlError(OAuthAsyncError):
    """Raised when a URL is not a syntactically valid absolute URL."""

    exit_code = EXIT_INVALID_USAGE


class MalformedResponseError(OAuthAsyncError):
    """Raised when a 200 response body is not a JSON object.

    Delivered through the completion slot, so it surfaces when the slot is
    awaited rather than on the transport's thread.
    """

    exit_code = EXIT_SERVER_ERROR


class SlotConsumedError(OAuthAsyncError):
    """Raised when a completion slot is read a second time."""

    exit_code = EXIT_GENERIC_FAILURE


class ConfigError(OAuthAsyncError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
