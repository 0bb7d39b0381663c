"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for the ``oauth-async``
command line:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.oauth-async/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_data_dir`, :func:`get_profiles_dir`.
* **Global config** -- A single :class:`~oauth_async.models.GlobalConfig`
  JSON file storing defaults.
* **Profiles** -- One JSON file per authorization server registration, each
  deserialised into a :class:`~oauth_async.models.Profile`.
* **Precedence resolution** -- :func:`resolve_profile` picks the active
  profile from the CLI flag, the ``OAUTH_ASYNC_PROFILE`` environment
  variable, and the global default.
* **Credential resolution** -- :func:`resolve_credential` reads the client
  secret from an env var, a file, or an interactive prompt.

The library API (:mod:`oauth_async.exchange` and friends) never reads any of
this; it takes its inputs as arguments.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from oauth_async.exceptions import ConfigError
from oauth_async.models import ClientConfig, GlobalConfig, Profile

_APP_NAME = "oauth-async"
_CONFIG_FILENAME = "config.json"
_PROFILE_ENV_VAR = "OAUTH_ASYNC_PROFILE"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/oauth-async/`` (default
    ``~/.config/oauth-async/``).  On macOS/Windows: ``~/.oauth-async/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/oauth-async/`` (default
    ``~/.local/share/oauth-async/``).  On macOS/Windows: ``~/.oauth-async/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_profiles_dir() -> Path:
    """Return the profiles directory (``<config_dir>/profiles/``), creating it if necessary."""
    path = get_config_dir() / "profiles"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems.  On any failure the
    temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration, or defaults if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Profiles ---


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Return all profile names, sorted alphabetically."""
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def load_profile(name: str) -> Profile:
    """Load and validate a profile from disk.

    Raises:
        ConfigError: If the profile file does not exist, contains invalid
            JSON, or fails Pydantic validation.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Profile.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid profile '{name}' at {path}: {exc}") from exc


def save_profile(profile: Profile) -> None:
    """Persist a profile atomically, overwriting any existing one of the same name."""
    data = profile.model_dump(mode="json")
    _atomic_write(_profile_path(profile.name), json.dumps(data, indent=2) + "\n")


def delete_profile(name: str) -> None:
    """Delete a profile.

    Raises:
        ConfigError: If the profile does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found")
    path.unlink()


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


# --- Precedence resolution ---


def resolve_profile(cli_profile: Optional[str] = None) -> Profile:
    """Resolve the active profile.

    Precedence (high to low):
        1. ``cli_profile`` (the ``--profile`` flag)
        2. ``OAUTH_ASYNC_PROFILE``
        3. ``default_profile`` in the global config
        4. The only existing profile, when exactly one exists and
           ``auto_select_single_profile`` is enabled

    Raises:
        ConfigError: If no profile can be selected or it cannot be loaded.
    """
    global_cfg = load_global_config()

    name: Optional[str] = global_cfg.default_profile
    env_profile = os.environ.get(_PROFILE_ENV_VAR)
    if env_profile:
        name = env_profile
    if cli_profile is not None:
        name = cli_profile

    if name is None and global_cfg.auto_select_single_profile:
        profiles = list_profiles()
        if len(profiles) == 1:
            name = profiles[0]

    if name is None:
        raise ConfigError(
            "No profile selected. Use --profile, set "
            f"{_PROFILE_ENV_VAR}, or run 'oauth-async profile add'."
        )
    return load_profile(name)


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts the user (requires a TTY)

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Client secret: ")

    raise ConfigError(f"Unknown credential source format: {source}")


def client_config_for(profile: Profile) -> ClientConfig:
    """Build the :class:`~oauth_async.models.ClientConfig` a profile describes.

    The client secret is resolved from ``client_secret_source`` at call time.
    """
    secret = (
        resolve_credential(profile.client_secret_source)
        if profile.client_secret_source
        else None
    )
    return ClientConfig(
        client_id=profile.client_id,
        client_secret=secret,
        authorization_url=profile.authorization_url,
        token_url=profile.token_url,
    )
