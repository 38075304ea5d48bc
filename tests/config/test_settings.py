"""Tests for settings configuration utilities."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from plexcord.config.settings import (
    LogLevel,
    PlexCordConfig,
    find_yaml_config_file,
)

ENV_VARS = (
    "APP_URL",
    "HOST",
    "PORT",
    "REDIS_URL",
    "REDIS_KEY_PREFIX",
    "IMAGE_TTL",
    "THUMBNAIL_SIZE",
    "DISCORD_ID",
    "DISCORD_TOKEN",
    "NOTIFIER_USERNAME",
    "RICH_NOTIFICATIONS",
    "GEOIP_URL",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run every test in an empty directory with no configuration variables set."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PLEXCORD_DATA_PATH", str(tmp_path))
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_find_yaml_config_file_prefers_data_path(tmp_path: Path) -> None:
    """Test that find_yaml_config_file looks in PLEXCORD_DATA_PATH."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text("port: 12000", encoding="utf-8")

    assert find_yaml_config_file() == config_file.resolve()


def test_find_yaml_config_file_accepts_yml_extension(tmp_path: Path) -> None:
    """Test that a config.yml file is found as well."""
    config_file = tmp_path / "config.yml"
    config_file.write_text("port: 12000", encoding="utf-8")

    assert find_yaml_config_file() == config_file.resolve()


def test_find_yaml_config_file_defaults_to_yaml(tmp_path: Path) -> None:
    """Test that the default location is returned when no file exists."""
    assert find_yaml_config_file() == tmp_path.resolve() / "config.yaml"


def test_config_defaults() -> None:
    """Test the default configuration values."""
    config = PlexCordConfig()

    assert config.app_url == "http://localhost:11000"
    assert config.port == 11000
    assert config.redis_url == "redis://localhost:6379/0"
    assert config.redis_key_prefix == ""
    assert config.image_ttl == 604800
    assert config.thumbnail_size == 75
    assert config.notifier_username == "Plex"
    assert config.rich_notifications is False
    assert config.log_level == LogLevel.INFO
    assert not config.discord_enabled


def test_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that environment variables override the defaults."""
    monkeypatch.setenv("APP_URL", "https://plexcord.example.com/")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("DISCORD_ID", "123")
    monkeypatch.setenv("DISCORD_TOKEN", "secret-token")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = PlexCordConfig()

    assert config.app_url == "https://plexcord.example.com"
    assert config.port == 8080
    assert config.discord_enabled
    assert config.discord_token is not None
    assert config.discord_token.get_secret_value() == "secret-token"
    assert config.log_level == LogLevel.DEBUG


def test_config_reads_yaml_file(tmp_path: Path) -> None:
    """Test that values are loaded from the YAML file in the data path."""
    (tmp_path / "config.yaml").write_text(
        "redis_url: redis://cache:6379/1\nrich_notifications: true\n",
        encoding="utf-8",
    )

    config = PlexCordConfig()

    assert config.redis_url == "redis://cache:6379/1"
    assert config.rich_notifications is True


def test_environment_overrides_yaml(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test that environment variables take precedence over the YAML file."""
    (tmp_path / "config.yaml").write_text("port: 12000\n", encoding="utf-8")
    monkeypatch.setenv("PORT", "13000")

    assert PlexCordConfig().port == 13000


def test_discord_requires_both_credentials() -> None:
    """Test that Discord is only enabled with both an ID and a token."""
    assert not PlexCordConfig(discord_id="123").discord_enabled
    assert not PlexCordConfig(discord_token="secret").discord_enabled
    assert PlexCordConfig(discord_id="123", discord_token="secret").discord_enabled


def test_config_str_masks_secrets() -> None:
    """Test that the string representation never contains the webhook token."""
    config = PlexCordConfig(discord_id="123", discord_token="super-secret")

    rendered = str(config)

    assert "super-secret" not in rendered
    assert "discord_token: **********" in rendered
    assert "discord_id: 123" in rendered


def test_config_rejects_invalid_values() -> None:
    """Test that out-of-range values fail validation."""
    with pytest.raises(ValidationError):
        PlexCordConfig(image_ttl=0)
    with pytest.raises(ValidationError):
        PlexCordConfig(thumbnail_size=-5)


def test_data_path_follows_environment(tmp_path: Path) -> None:
    """Test that the data path is read from PLEXCORD_DATA_PATH."""
    assert PlexCordConfig().data_path == tmp_path.resolve()
