"""Exchange commands -- authorization URLs, tokens, and user info.

Top-level commands that drive the library against the active profile:

* ``oauth-async authorize-url`` -- print the URL to send a user agent to.
* ``oauth-async token`` -- run a token exchange and print the response.
* ``oauth-async userinfo`` -- GET a protected resource with a bearer token.

A non-200 answer exits with ``EXIT_AUTH_FAILURE`` (401/403) or
``EXIT_SERVER_ERROR`` (anything else).
"""

from __future__ import annotations

import asyncio
from typing import Any, List, Optional

import typer

from oauth_async.client import OAuthClient
from oauth_async.exit_codes import EXIT_AUTH_FAILURE, EXIT_SERVER_ERROR
from oauth_async.models import ClientConfig, ExchangeResult, RequestConfig
from oauth_async.output import error, format_response, print_data


def _open_client(config: ClientConfig, request_config: RequestConfig) -> OAuthClient:
    return OAuthClient(config, request_config)


def _profile_name(ctx: typer.Context) -> Optional[str]:
    return ctx.obj.get("profile") if ctx.obj else None


def _emit(result: ExchangeResult) -> None:
    """Print a successful response, or report the failure and exit."""
    if result.success:
        format_response(result.response)
        return

    message = f"HTTP {result.status_code}"
    if result.error:
        message = f"{message}: {result.error}"
    error(message)
    code = EXIT_AUTH_FAILURE if result.status_code in (401, 403) else EXIT_SERVER_ERROR
    raise typer.Exit(code=code)


def authorize_url_command(
    ctx: typer.Context,
    redirect_uri: Optional[str] = typer.Option(
        None, "--redirect-uri", help="Overrides the profile's redirect URI."
    ),
    scope: Optional[List[str]] = typer.Option(
        None, "--scope", help="Scope to request (repeatable). Defaults to the profile's scopes."
    ),
    state: Optional[str] = typer.Option(None, "--state", help="Opaque state value."),
    response_type: Optional[str] = typer.Option(
        None, "--response-type", help="Defaults to 'code'."
    ),
) -> None:
    """Print the authorization URL for the active profile."""
    from oauth_async.authorization import build_authorization_url
    from oauth_async.config import resolve_profile

    profile = resolve_profile(_profile_name(ctx))
    config = ClientConfig(
        client_id=profile.client_id,
        authorization_url=profile.authorization_url,
    )

    params: dict[str, Any] = {
        "redirect_uri": redirect_uri or profile.redirect_uri,
        "scope": list(scope) if scope else profile.scopes,
        "state": state,
        "response_type": response_type,
    }
    print_data(build_authorization_url(config, params))


async def _fetch_token(
    config: ClientConfig,
    request_config: RequestConfig,
    params: dict[str, Any],
) -> ExchangeResult:
    async with _open_client(config, request_config) as client:
        return await client.fetch_token(params)


def token_command(
    ctx: typer.Context,
    code: Optional[str] = typer.Option(None, "--code", help="Authorization code."),
    username: Optional[str] = typer.Option(None, "--username", help="Resource owner username."),
    password: Optional[str] = typer.Option(None, "--password", help="Resource owner password."),
    refresh_token: Optional[str] = typer.Option(
        None, "--refresh-token", help="Refresh token to exchange."
    ),
    grant_type: Optional[str] = typer.Option(
        None,
        "--grant-type",
        help="Force a grant: authorization_code, client_credentials, password, refresh_token.",
    ),
    scope: Optional[List[str]] = typer.Option(
        None, "--scope", help="Scope to request (repeatable). Defaults to the profile's scopes."
    ),
    redirect_uri: Optional[str] = typer.Option(
        None, "--redirect-uri", help="Overrides the profile's redirect URI."
    ),
) -> None:
    """Exchange a grant for a token at the active profile's token endpoint.

    The grant is picked from what you pass: ``--code`` selects the
    authorization code grant, ``--refresh-token`` the refresh grant,
    ``--username`` the password grant, and nothing at all the client
    credentials grant.

    Example::

        oauth-async token --code abc123
        oauth-async token --scope read --scope write
    """
    from oauth_async.config import client_config_for, resolve_profile

    profile = resolve_profile(_profile_name(ctx))
    config = client_config_for(profile)

    scopes = list(scope) if scope else profile.scopes
    candidates: dict[str, Any] = {
        "grant_type": grant_type,
        "code": code,
        "username": username,
        "password": password,
        "refresh_token": refresh_token,
        "redirect_uri": redirect_uri or profile.redirect_uri,
        "scope": " ".join(scopes) if scopes else None,
    }
    params = {k: v for k, v in candidates.items() if v is not None}

    _emit(asyncio.run(_fetch_token(config, profile.request, params)))


async def _fetch_user_info(
    config: ClientConfig,
    request_config: RequestConfig,
    url: Optional[str],
    token: str,
) -> ExchangeResult:
    async with _open_client(config, request_config) as client:
        return await client.get_user_info(url, token)


def userinfo_command(
    ctx: typer.Context,
    url: Optional[str] = typer.Argument(
        None, help="Resource URL. Defaults to the profile's userinfo URL."
    ),
    token: str = typer.Option(..., "--token", "-t", help="Bearer access token."),
) -> None:
    """GET a protected resource with a bearer token and print the JSON body."""
    from oauth_async.config import resolve_profile

    profile = resolve_profile(_profile_name(ctx))
    config = ClientConfig(client_id=profile.client_id)
    _emit(asyncio.run(_fetch_user_info(config, profile.request, url or profile.userinfo_url, token)))
