"""Typer application and CLI entry point for oauth-async.

This module wires together the top-level Typer application and registers
the built-in commands (``authorize-url``, ``token``, ``userinfo`` and the
``profile`` group).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.  :class:`~oauth_async.exceptions.OAuthAsyncError`
instances exit with their ``exit_code``; anything else is written to a
crash log under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from oauth_async import __version__
from oauth_async.commands.exchange import (
    authorize_url_command,
    token_command,
    userinfo_command,
)
from oauth_async.commands.profile import profile_app
from oauth_async.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="oauth-async",
    help="OAuth 2.0 client: authorization URLs, token exchange, and user info.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("authorize-url")(authorize_url_command)
app.command("token")(token_command)
app.command("userinfo")(userinfo_command)
app.add_typer(profile_app, name="profile", help="Profile management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"oauth-async {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~oauth_async.output.OutputManager` from the
    CLI flags and stores the profile override in ``ctx.obj``.
    """
    from oauth_async.config import load_global_config
    from oauth_async.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        try:
            fmt = OutputFormat(load_global_config().output.format)
        except ValueError:
            fmt = OutputFormat.AUTO

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from oauth_async.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``oauth-async`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from oauth_async.exceptions import OAuthAsyncError
        from oauth_async.output import error

        if isinstance(exc, OAuthAsyncError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
