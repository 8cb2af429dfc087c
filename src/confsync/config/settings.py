"""
confsync Configuration Management

Main configuration manager with hierarchical loading:
1. Default Values (code)
2. Built-in environment overrides
3. Environment-specific files (config/environments/)
4. Pydantic settings (.env file and aliased environment variables)
5. Environment variables in SECTION_KEY form
"""

import os
from functools import lru_cache
from typing import Any, get_args

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from confsync.config.constants import DEFAULT_CONFIG
from confsync.config.environments import detect_environment, get_environment_config
from confsync.utils.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Main configuration class using Pydantic for validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # App settings
    environment: str | None = Field(default=None, alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="CONFSYNC_DEBUG")
    log_level: str = Field(default="INFO", alias="CONFSYNC_LOG_LEVEL")
    log_json: bool = Field(default=False, alias="CONFSYNC_LOG_JSON")

    # AppConfig identifiers
    application_id: str | None = Field(default=None, alias="APPCONFIG_APPLICATION_ID")
    environment_id: str | None = Field(default=None, alias="APPCONFIG_ENVIRONMENT_ID")
    region: str | None = Field(default=None, alias="AWS_REGION")

    # Synchronization
    config_prefix: str = Field(default="", alias="CONFIG_PREFIX")
    poll_interval_seconds: float = Field(default=30.0, alias="CONFSYNC_POLL_INTERVAL_SECONDS")
    discovery_interval_seconds: float = Field(default=120.0, alias="CONFSYNC_DISCOVERY_INTERVAL_SECONDS")
    purge_on_delete: bool = Field(default=False, alias="CONFSYNC_PURGE_ON_DELETE")

    # HTTP front-end
    api_host: str = Field(default="127.0.0.1", alias="CONFSYNC_API_HOST")
    api_port: int = Field(default=3000, alias="PORT")


# Dotted configuration keys backed by a Settings field
SETTINGS_KEYS: dict[str, str] = {
    "app.environment": "environment",
    "app.debug": "debug",
    "app.log_level": "log_level",
    "app.log_json": "log_json",
    "appconfig.application_id": "application_id",
    "appconfig.environment_id": "environment_id",
    "appconfig.region": "region",
    "sync.config_prefix": "config_prefix",
    "sync.poll_interval_seconds": "poll_interval_seconds",
    "sync.discovery_interval_seconds": "discovery_interval_seconds",
    "sync.purge_on_delete": "purge_on_delete",
    "api.host": "api_host",
    "api.port": "api_port",
}

REQUIRED_KEYS = (
    "appconfig.application_id",
    "appconfig.environment_id",
    "appconfig.region",
)


class ConfigManager:
    """Configuration manager with hierarchical loading."""

    def __init__(self, settings: Settings | None = None, config_dir: str = "config/environments"):
        self.settings = settings or Settings()
        self.config_dir = config_dir
        self.environment = self.settings.environment or detect_environment()
        self._environment_config: dict[str, Any] = {}

    async def initialize(self) -> None:
        """Initialize configuration manager."""
        await self._load_environment_config()
        self._validate_configuration()

    async def _load_environment_config(self) -> None:
        """Load environment-specific YAML configuration."""
        config_path = os.path.join(self.config_dir, f"{self.environment}.yml")

        if os.path.exists(config_path):
            try:
                with open(config_path, encoding='utf-8') as f:
                    self._environment_config = yaml.safe_load(f) or {}

            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(
                    f"Failed to load environment config {config_path}: {e}"
                ) from e

    def _is_string_key(self, key: str) -> bool:
        """Check whether a key is declared as text and must not be coerced."""
        field_name = SETTINGS_KEYS.get(key)
        if field_name:
            annotation = Settings.model_fields[field_name].annotation
            return annotation is str or str in get_args(annotation)
        return isinstance(self._get_nested_value(DEFAULT_CONFIG, key), str)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate Python type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            # Try int first
            if '.' not in value:
                return int(value)
            # Then float
            return float(value)
        except ValueError:
            # Return as string
            return value

    def _validate_configuration(self) -> None:
        """Validate critical configuration settings."""
        missing = [key for key in REQUIRED_KEYS if not self.get(key)]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {missing}",
                config_key=missing[0],
            )

        for key in ("sync.poll_interval_seconds", "sync.discovery_interval_seconds"):
            value = self.get(key, 0)
            if not isinstance(value, (int, float)) or value <= 0:
                raise ConfigurationError(f"Invalid {key} value: {value!r}", config_key=key)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with fallback hierarchy."""
        # 1. Check environment variables
        env_key = key.upper().replace(".", "_")
        env_value = os.getenv(env_key)
        if env_value is not None:
            if self._is_string_key(key):
                return env_value
            return self._parse_value(env_value)

        # 2. Check explicitly provided Pydantic settings
        settings_key = SETTINGS_KEYS.get(key)
        if settings_key and settings_key in self.settings.model_fields_set:
            return getattr(self.settings, settings_key)

        # 3. Check environment-specific config file
        value = self._get_nested_value(self._environment_config, key)
        if value is not None:
            return value

        # 4. Check built-in environment overrides
        value = self._get_nested_value(get_environment_config(self.environment), key)
        if value is not None:
            return value

        # 5. Check default config
        value = self._get_nested_value(DEFAULT_CONFIG, key)
        if value is not None:
            return value

        # 6. Return provided default
        return default

    def _get_nested_value(self, data: dict[str, Any], key: str) -> Any:
        """Get nested dictionary value using dot notation."""
        keys = key.split('.')
        current = data

        for k in keys:
            if isinstance(current, dict) and k in current:
                current = current[k]
            else:
                return None

        return current


# Global configuration instance
_config_manager: ConfigManager | None = None


@lru_cache
def get_config() -> ConfigManager:
    """Get global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
