"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from philanthrohub.config import (
    ConfigError,
    ConfigManager,
    HubConfig,
    assign_path,
    env_overrides_from,
    flatten_for_env,
    resolve_with_precedence,
)


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager()


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".philanthrohub" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "PhilanthroHub configuration file" in text
    assert "Last updated:" in text

    config = manager.load(include_env=False)
    assert config == HubConfig()


def test_resolve_with_precedence_respects_order(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.save({"api": {"base_url": "http://file.example"}, "cache": {"stale_time_seconds": 120}})

    env = {
        "PHILANTHROHUB__API__BASE_URL": "http://env.example",
        "PHILANTHROHUB__SERVER__SEED": "false",
    }
    cli = {"api.base_url": "http://cli.example"}

    config = manager.load(cli_overrides=cli, env_overrides=env)

    assert config.cache.stale_time_seconds == pytest.approx(120)
    assert config.server.seed is False
    # CLI overrides take precedence over environment
    assert config.api.base_url == "http://cli.example"


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


def test_flatten_for_env_round_trips_defaults() -> None:
    flat = flatten_for_env(HubConfig())

    assert flat["PHILANTHROHUB__CACHE__REFETCH_INTERVAL_SECONDS"] == "30.0"
    assert flat["PHILANTHROHUB__SERVER__SEED"] == "true"
    assert resolve_with_precedence(
        defaults=HubConfig(), env_overrides=env_overrides_from(flat)
    ) == HubConfig()


def test_env_overrides_ignore_foreign_variables() -> None:
    overrides = env_overrides_from({"PATH": "/usr/bin", "PHILANTHROHUB__LOGGING__LEVEL": "DEBUG"})

    assert overrides == {"logging": {"level": "DEBUG"}}


def test_assign_path_rejects_non_mapping_segment() -> None:
    target = {"api": "http://flat"}

    with pytest.raises(ConfigError):
        assign_path(target, ["api", "base_url"], "http://nested")


def test_resolve_with_precedence_invalid_value_raises() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=HubConfig(),
            file_overrides={"server": {"port": "not-an-int"}},
        )


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(defaults=HubConfig(), file_overrides={"cache": {"ttl": 5}})
