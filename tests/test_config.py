"""Tests for oauth_async.config -- XDG paths, atomic writes, profiles, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from oauth_async.config import (
    _atomic_write,
    client_config_for,
    delete_profile,
    get_config_dir,
    get_data_dir,
    get_profiles_dir,
    list_profiles,
    load_global_config,
    load_profile,
    profile_exists,
    resolve_credential,
    resolve_profile,
    save_global_config,
    save_profile,
)
from oauth_async.exceptions import ConfigError
from oauth_async.models import ClientConfig, GlobalConfig, Profile, RequestConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _make_profile(name: str = "test", **overrides: Any) -> Profile:
    values: dict[str, Any] = {
        "name": name,
        "client_id": "c1",
        "token_url": "https://auth.example.com/token",
    }
    values.update(overrides)
    return Profile(**values)


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestPaths:
    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("oauth_async.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "oauth-async"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("oauth_async.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "custom"))

        assert get_config_dir() == tmp_path / "custom" / "oauth-async"

    def test_data_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("oauth_async.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

        assert get_data_dir() == tmp_path / "data" / "oauth-async"

    def test_fallback_dirs(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("oauth_async.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".oauth-async"
        assert get_data_dir() == tmp_path / ".oauth-async" / "logs"

    def test_profiles_dir(self, isolated_config: Path) -> None:
        assert get_profiles_dir() == isolated_config / "config" / "oauth-async" / "profiles"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "out.json"
        _atomic_write(target, '{"a": 1}')
        assert target.read_text(encoding="utf-8") == '{"a": 1}'

    def test_failure_leaves_no_temp_file(self, tmp_path: Path) -> None:
        target = tmp_path / "out.json"
        with patch("oauth_async.config.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                _atomic_write(target, "data")
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config.default_profile is None
        assert config.auto_select_single_profile is True

    def test_round_trip(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(default_profile="github"))
        assert load_global_config().default_profile == "github"

    def test_invalid_json(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


class TestProfiles:
    def test_save_and_load(self, isolated_config: Path) -> None:
        profile = _make_profile(scopes=["read", "write"], request=RequestConfig(timeout=5))
        save_profile(profile)

        loaded = load_profile("test")
        assert loaded == profile
        assert profile_exists("test")

    def test_list_sorted(self, isolated_config: Path) -> None:
        for name in ("zeta", "alpha", "mid"):
            save_profile(_make_profile(name))
        assert list_profiles() == ["alpha", "mid", "zeta"]

    def test_load_missing(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_profile("nope")

    def test_load_invalid(self, isolated_config: Path) -> None:
        _write_json(get_profiles_dir() / "bad.json", {"scopes": "not-a-list"})
        with pytest.raises(ConfigError, match="Invalid profile 'bad'"):
            load_profile("bad")

    def test_delete(self, isolated_config: Path) -> None:
        save_profile(_make_profile())
        delete_profile("test")
        assert not profile_exists("test")

    def test_delete_missing(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            delete_profile("nope")


# ---------------------------------------------------------------------------
# Profile precedence
# ---------------------------------------------------------------------------


class TestResolveProfile:
    @pytest.fixture(autouse=True)
    def _profiles(self, isolated_config: Path) -> None:
        for name in ("cli", "env", "default"):
            save_profile(_make_profile(name))
        save_global_config(GlobalConfig(default_profile="default"))

    def test_cli_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OAUTH_ASYNC_PROFILE", "env")
        assert resolve_profile("cli").name == "cli"

    def test_env_over_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OAUTH_ASYNC_PROFILE", "env")
        assert resolve_profile().name == "env"

    def test_default(self) -> None:
        assert resolve_profile().name == "default"

    def test_unknown_cli_profile(self) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_profile("missing")


class TestResolveProfileAutoSelect:
    def test_single_profile_selected(self, isolated_config: Path) -> None:
        save_profile(_make_profile("only"))
        assert resolve_profile().name == "only"

    def test_auto_select_disabled(self, isolated_config: Path) -> None:
        save_profile(_make_profile("only"))
        save_global_config(GlobalConfig(auto_select_single_profile=False))
        with pytest.raises(ConfigError, match="No profile selected"):
            resolve_profile()

    def test_ambiguous(self, isolated_config: Path) -> None:
        save_profile(_make_profile("a"))
        save_profile(_make_profile("b"))
        with pytest.raises(ConfigError, match="No profile selected"):
            resolve_profile()

    def test_none_configured(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_profile()


# ---------------------------------------------------------------------------
# Credential sources
# ---------------------------------------------------------------------------


class TestResolveCredential:
    def test_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_SECRET", "s3cret")
        assert resolve_credential("env:MY_SECRET") == "s3cret"

    def test_env_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MY_SECRET", raising=False)
        with pytest.raises(ConfigError, match="MY_SECRET"):
            resolve_credential("env:MY_SECRET")

    def test_file(self, tmp_path: Path) -> None:
        secret = tmp_path / "secret.txt"
        secret.write_text("  from-file\n", encoding="utf-8")
        assert resolve_credential(f"file:{secret}") == "from-file"

    def test_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'absent'}")

    def test_prompt_without_tty(self) -> None:
        with patch("oauth_async.config.sys.stdin") as stdin:
            stdin.isatty.return_value = False
            with pytest.raises(ConfigError, match="not a TTY"):
                resolve_credential("prompt")

    def test_prompt_with_tty(self) -> None:
        with patch("oauth_async.config.sys.stdin") as stdin, patch(
            "oauth_async.config.getpass.getpass", return_value="typed"
        ):
            stdin.isatty.return_value = True
            assert resolve_credential("prompt") == "typed"

    def test_unknown_format(self) -> None:
        with pytest.raises(ConfigError, match="Unknown credential source"):
            resolve_credential("vault:thing")


class TestClientConfigFor:
    def test_resolves_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GH_SECRET", "s1")
        profile = _make_profile(
            client_secret_source="env:GH_SECRET",
            authorization_url="https://auth.example.com/authorize",
        )
        assert client_config_for(profile) == ClientConfig(
            client_id="c1",
            client_secret="s1",
            authorization_url="https://auth.example.com/authorize",
            token_url="https://auth.example.com/token",
        )

    def test_without_secret_source(self) -> None:
        assert client_config_for(_make_profile()).client_secret is None
