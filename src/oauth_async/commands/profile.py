"""Profile commands -- manage authorization server registrations.

Provides the ``oauth-async profile`` sub-command group.  A profile stores a
client id, the endpoints, a redirect URI, default scopes, and *where* to
read the client secret from (never the secret itself).

Typical workflow::

    oauth-async profile add github --client-id abc \\
        --client-secret-source env:GITHUB_SECRET \\
        --authorization-url https://github.com/login/oauth/authorize \\
        --token-url https://github.com/login/oauth/access_token
    oauth-async profile use github
    oauth-async profile show github
"""

from __future__ import annotations

from typing import List, Optional

import typer

from oauth_async.output import error, format_response, info, success


profile_app = typer.Typer(no_args_is_help=True)


@profile_app.command("add")
def profile_add(
    name: str = typer.Argument(help="Profile name."),
    client_id: Optional[str] = typer.Option(None, "--client-id", help="Registered client id."),
    client_secret_source: Optional[str] = typer.Option(
        None,
        "--client-secret-source",
        help="Where to read the client secret: env:VAR, file:/path, prompt.",
    ),
    authorization_url: Optional[str] = typer.Option(
        None, "--authorization-url", help="Authorization endpoint."
    ),
    token_url: Optional[str] = typer.Option(None, "--token-url", help="Token endpoint."),
    userinfo_url: Optional[str] = typer.Option(
        None, "--userinfo-url", help="User-info (or other protected resource) endpoint."
    ),
    redirect_uri: Optional[str] = typer.Option(None, "--redirect-uri", help="Redirect URI."),
    scope: Optional[List[str]] = typer.Option(
        None, "--scope", help="Default scope (repeatable)."
    ),
    timeout: float = typer.Option(10.0, "--timeout", help="Request timeout in seconds."),
    overwrite: bool = typer.Option(
        False, "--overwrite", help="Replace an existing profile of the same name."
    ),
) -> None:
    """Create (or replace) a profile.

    Example::

        oauth-async profile add local --client-id c1 --token-url http://localhost/token
    """
    from oauth_async.config import profile_exists, save_profile
    from oauth_async.models import Profile, RequestConfig

    if profile_exists(name) and not overwrite:
        error(f"Profile '{name}' already exists (use --overwrite to replace it)")
        raise typer.Exit(code=2)

    profile = Profile(
        name=name,
        client_id=client_id,
        client_secret_source=client_secret_source,
        authorization_url=authorization_url,
        token_url=token_url,
        userinfo_url=userinfo_url,
        redirect_uri=redirect_uri,
        scopes=list(scope or []),
        request=RequestConfig(timeout=timeout),
    )
    save_profile(profile)
    success(f"Saved profile '{name}'")


@profile_app.command("list")
def profile_list() -> None:
    """List all profiles, marking the default one."""
    from oauth_async.config import list_profiles, load_global_config

    names = list_profiles()
    if not names:
        info("No profiles configured.")
        return

    default = load_global_config().default_profile
    for name in names:
        marker = "*" if name == default else " "
        typer.echo(f"{marker} {name}")


@profile_app.command("show")
def profile_show(
    name: str = typer.Argument(help="Profile name."),
) -> None:
    """Show a profile's settings."""
    from oauth_async.config import load_profile
    from oauth_async.exceptions import ConfigError

    try:
        profile = load_profile(name)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    format_response(profile.model_dump(mode="json"))


@profile_app.command("use")
def profile_use(
    name: str = typer.Argument(help="Profile to make the default."),
) -> None:
    """Make a profile the default."""
    from oauth_async.config import load_global_config, profile_exists, save_global_config

    if not profile_exists(name):
        error(f"Profile '{name}' not found")
        raise typer.Exit(code=2)

    config = load_global_config()
    config.default_profile = name
    save_global_config(config)
    success(f"Default profile set to '{name}'")


@profile_app.command("remove")
def profile_remove(
    name: str = typer.Argument(help="Profile name."),
) -> None:
    """Delete a profile (and clear it as the default)."""
    from oauth_async.config import (
        delete_profile,
        load_global_config,
        save_global_config,
    )
    from oauth_async.exceptions import ConfigError

    try:
        delete_profile(name)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    config = load_global_config()
    if config.default_profile == name:
        config.default_profile = None
        save_global_config(config)
    success(f"Removed profile '{name}'")
