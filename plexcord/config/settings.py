"""PlexCord Configuration Settings."""

import os
from enum import StrEnum
from functools import cached_property, lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from plexcord.utils.logging import _get_logger

__all__ = ["LogLevel", "PlexCordConfig", "find_yaml_config_file", "get_config"]

_log = _get_logger(__name__)


def find_yaml_config_file() -> Path:
    """Find the YAML configuration file in the data path.

    Returns:
        Path: The path to an existing YAML configuration file or the default location.
    """
    data_path = Path(os.getenv("PLEXCORD_DATA_PATH", "./data")).resolve()

    for ext in ("yaml", "yml"):
        yaml_file = data_path / f"config.{ext}"
        if yaml_file.exists():
            _log.debug(f"Using YAML config file: {yaml_file.resolve()}")
            return yaml_file.resolve()
    return data_path / "config.yaml"


class BaseStrEnum(StrEnum):
    """Base class for string-based enumerations with a custom __repr__ method.

    Provides case-insensitive lookup functionality and consistent string
    representation for enumeration values.
    """

    @classmethod
    def _missing_(cls, value: object) -> "BaseStrEnum | None":
        """Handle case-insensitive lookup for enum values.

        Args:
            value: The value to look up in the enumeration

        Returns:
            BaseStrEnum | None: The matching enum member if found, None otherwise
        """
        value = value.lower() if isinstance(value, str) else value
        for member in cls:
            if member.lower() == value:
                return member
        return None

    def __repr__(self) -> str:
        """Return the string value of the enum member."""
        return self.value

    def __str__(self) -> str:
        """Return the string representation of the enum member."""
        return repr(self)


class LogLevel(BaseStrEnum):
    """Enumeration of available logging levels.

    Note: SUCCESS is a custom level used by this application.
    """

    DEBUG = "DEBUG"  # Detailed information for debugging
    INFO = "INFO"  # General information about program execution
    SUCCESS = "SUCCESS"  # Successful operations (custom level)
    WARNING = "WARNING"  # Potential problems or issues
    ERROR = "ERROR"  # Error that prevented an operation
    CRITICAL = "CRITICAL"  # Error that prevents further program execution


class PlexCordConfig(BaseSettings):
    """Configuration manager for the PlexCord application.

    Values are read from init arguments, environment variables (``APP_URL``,
    ``REDIS_URL``, ``PORT``, ``DISCORD_ID``, ``DISCORD_TOKEN``, ...), an optional
    ``.env`` file and finally a YAML file in the data path, in that order of
    precedence.
    """

    # Web
    app_url: str = Field(
        default="http://localhost:11000",
        description="Public base URL used to build thumbnail links",
    )
    host: str = Field(default="0.0.0.0", description="Host for the web server")
    port: int = Field(default=11000, description="Port for the web server")

    # Image cache
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Connection URL of the Redis image cache",
    )
    redis_key_prefix: str = Field(
        default="",
        description="Namespace prepended to every cache key in Redis",
    )
    image_ttl: int = Field(
        default=7 * 24 * 60 * 60,
        ge=1,
        description="Lifetime of a cached thumbnail in seconds",
    )
    thumbnail_size: int = Field(
        default=75, ge=1, description="Edge length of the square thumbnail in pixels"
    )

    # Discord
    discord_id: str | None = Field(default=None, description="Discord webhook ID")
    discord_token: SecretStr | None = Field(
        default=None, description="Discord webhook token"
    )
    notifier_username: str = Field(
        default="Plex", description="Display name used for posted notifications"
    )
    rich_notifications: bool = Field(
        default=False,
        description="Attach colour, subtitle and thumbnail fields to notifications",
    )

    # Location lookup
    geoip_url: str = Field(
        default="https://freegeoip.app/json",
        description="Base URL of a freegeoip-compatible location service",
    )

    log_level: LogLevel = Field(
        default=LogLevel.INFO, description="Logging level for the application"
    )

    @field_validator("app_url", "geoip_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Normalize base URLs so paths can be appended with a single slash."""
        return value.rstrip("/")

    @cached_property
    def data_path(self) -> Path:
        """Get the data path for PlexCord.

        Returns:
            Path: The data path resolved from the environment or default location.
        """
        return Path(os.getenv("PLEXCORD_DATA_PATH", "./data")).resolve()

    @property
    def discord_enabled(self) -> bool:
        """Whether both halves of the Discord webhook credentials are configured."""
        return bool(self.discord_id) and bool(
            self.discord_token and self.discord_token.get_secret_value()
        )

    def __str__(self) -> str:
        """Creates a human-readable representation of the configuration.

        Returns:
            str: Comma-separated list of key-value pairs with secrets masked.
        """
        secrets = ("discord_token",)
        return ", ".join(
            f"{key}: **********" if key in secrets else f"{key}: {getattr(self, key)}"
            for key in self.__class__.model_fields
        )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of configuration sources."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=find_yaml_config_file()),
        )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache(maxsize=1)
def get_config() -> PlexCordConfig:
    """Get the singleton instance of PlexCordConfig.

    Returns:
        PlexCordConfig: The singleton configuration instance.
    """
    return PlexCordConfig()
