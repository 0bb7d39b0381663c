"""Canonical Pydantic models shared across all oauth_async modules.

The models fall into two groups:

**Protocol models** -- built fresh for each call and never persisted:
    :class:`ClientConfig`, :class:`GrantType`, :class:`RequestDescriptor`,
    :class:`Success`, :class:`Failure` (together :data:`ExchangeResult`).

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`OutputConfig`, :class:`Profile` and
    :class:`GlobalConfig`.

Params themselves stay plain mappings; reserved keys are snake_case, see
:func:`oauth_async.keys.normalize_params`.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Protocol models ---


class ClientConfig(BaseModel):
    """Client identity and endpoints for one authorization server.

    Every field is optional: callers may bundle what they know here and pass
    the rest as params on each call.

    Example::

        ClientConfig(
            client_id="c1",
            client_secret="s1",
            authorization_url="https://auth.example.com/authorize",
            token_url="https://auth.example.com/token",
        )
    """

    model_config = ConfigDict(frozen=True)

    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    authorization_url: Optional[str] = None
    token_url: Optional[str] = None


class GrantType(str, enum.Enum):
    """OAuth2 grant types with a built-in request builder.

    Provider-specific flows are not listed here; they are supplied as a
    strategy callable under the ``service`` params key.
    """

    AUTHORIZATION_CODE = "authorization-code"
    CLIENT_CREDENTIALS = "client-credentials"
    PASSWORD = "password"
    REFRESH_TOKEN = "refresh-token"

    @property
    def wire_value(self) -> str:
        """The literal sent as ``grant_type`` in the form body."""
        return self.value.replace("-", "_")


class RequestDescriptor(BaseModel):
    """Everything needed to issue a token request except the URL and timeout."""

    model_config = ConfigDict(frozen=True)

    accept: str = "json"
    response_format: str = "json"
    form_body: dict[str, Any] = Field(default_factory=dict)
    basic_auth: tuple[Optional[str], Optional[str]] = (None, None)


class Success(BaseModel):
    """A 200 answer whose JSON body decoded to an object."""

    success: Literal[True] = True
    response: dict[str, Any]


class Failure(BaseModel):
    """Any non-200 answer, or a transport error that produced no answer at all."""

    success: Literal[False] = False
    status_code: int
    error: Optional[str] = None


ExchangeResult = Union[Success, Failure]


# --- Configuration models ---


class RequestConfig(BaseModel):
    """HTTP request settings for a profile."""

    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class OutputConfig(BaseModel):
    """Output preferences."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class Profile(BaseModel):
    """A named authorization server registration.

    The client secret is never stored directly; ``client_secret_source``
    points at where to read it (``env:VAR``, ``file:/path`` or ``prompt``).

    See Also:
        :func:`~oauth_async.config.load_profile`: Deserialise a profile by name.
        :func:`~oauth_async.config.save_profile`: Persist a profile to disk.
    """

    name: str
    client_id: Optional[str] = None
    client_secret_source: Optional[str] = Field(
        default=None,
        description="Credential source: env:VAR, file:/path, prompt",
    )
    authorization_url: Optional[str] = None
    token_url: Optional[str] = None
    userinfo_url: Optional[str] = None
    redirect_uri: Optional[str] = None
    scopes: list[str] = Field(default_factory=list)
    request: RequestConfig = Field(default_factory=RequestConfig)


class GlobalConfig(BaseModel):
    """Top-level user configuration stored as ``config.json``.

    Loaded by :func:`~oauth_async.config.load_global_config` and persisted by
    :func:`~oauth_async.config.save_global_config`.
    """

    default_profile: Optional[str] = None
    auto_select_single_profile: bool = True
    output: OutputConfig = Field(default_factory=OutputConfig)
