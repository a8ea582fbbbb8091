"""
Configuration Management System for famfin

This module provides a centralized configuration system that supports a 3-tier
precedence hierarchy: environment → user → system defaults.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config" / "settings"


class ValidationLevel(Enum):
    """Configuration validation strictness levels"""
    STRICT = "strict"      # Fail fast on validation errors
    LENIENT = "lenient"    # Log warnings, use defaults


class ApiConfig(BaseModel):
    """Remote REST API Configuration"""
    model_config = ConfigDict(extra='forbid')

    base_url: str = Field(default="http://172.20.10.3:5000/api", description="API root, without trailing slash")
    timeout: Optional[float] = Field(default=None, ge=0.1, le=600.0, description="Request timeout (seconds), None waits forever")
    user_agent: str = Field(default="famfin-client/0.1", description="User-Agent header")


class StorageConfig(BaseModel):
    """Device-local key-value storage"""
    model_config = ConfigDict(extra='forbid')

    db_path: str = Field(default="data/storage/famfin.duckdb", description="DuckDB file, ':memory:' for volatile")
    token_key: str = Field(default="userToken", description="Key of the persisted bearer token")
    user_key: str = Field(default="userData", description="Key of the persisted user JSON")


class UIConfig(BaseModel):
    """UI Configuration"""
    model_config = ConfigDict(extra='forbid')

    web_mode: bool = Field(default=False, description="Serve through the browser instead of a desktop window")
    port: int = Field(default=8550, ge=1024, le=65535, description="Web server port")

    theme_mode: str = Field(default="light", description="UI theme mode")
    primary_color: str = Field(default="#144272", description="Primary UI color")

    locale: str = Field(default="id-ID", description="Display locale")
    currency: str = Field(default="IDR", description="Display currency")
    default_period_months: int = Field(default=6, ge=1, le=12, description="Dashboard chart period")


class LoggingConfig(BaseModel):
    """Logging Configuration"""
    model_config = ConfigDict(extra='forbid')

    level: str = Field(default="DEBUG", description="File log level")
    console_level: str = Field(default="WARNING", description="Terminal log level")
    log_dir: str = Field(default="data/logs", description="Directory for rotating log files")
    file_name: str = Field(default="famfin.log")
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)
    backup_count: int = Field(default=5, ge=0, le=50)


class SystemConfig(BaseModel):
    """Complete system configuration"""
    model_config = ConfigDict(extra='forbid')

    api: ApiConfig = Field(default_factory=ApiConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Metadata
    schema_version: int = Field(default=1, description="Configuration schema version")


# FAMFIN_<SECTION>_<FIELD> → (section, field, converter)
ENV_MAP = {
    'FAMFIN_API_BASE_URL': ('api', 'base_url', str),
    'FAMFIN_API_TIMEOUT': ('api', 'timeout', float),
    'FAMFIN_STORAGE_DB_PATH': ('storage', 'db_path', str),
    'FAMFIN_UI_WEB_MODE': ('ui', 'web_mode', bool),
    'FAMFIN_UI_PORT': ('ui', 'port', int),
    'FAMFIN_UI_THEME_MODE': ('ui', 'theme_mode', str),
    'FAMFIN_UI_DEFAULT_PERIOD_MONTHS': ('ui', 'default_period_months', int),
    'FAMFIN_LOGGING_LEVEL': ('logging', 'level', str),
    'FAMFIN_LOGGING_LOG_DIR': ('logging', 'log_dir', str),
}


class ConfigManager:
    """Centralized configuration manager with 3-tier precedence hierarchy"""

    def __init__(self, config_dir: Optional[Path] = None, env_file: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self._system_config: Optional[SystemConfig] = None
        self._user_config: Optional[Dict[str, Any]] = None

        if env_file is not None:
            load_dotenv(dotenv_path=env_file)

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file"""
        if not file_path.exists():
            return {}

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.warning(f"Failed to load {file_path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring {file_path}: top level must be a mapping")
            return {}
        return data

    def _save_yaml_file(self, file_path: Path, data: Dict[str, Any]) -> bool:
        """Save configuration to YAML file"""
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
            return True
        except OSError as e:
            logger.error(f"Failed to save {file_path}: {e}")
            return False

    def _load_system_defaults(self) -> SystemConfig:
        """Load system default configuration"""
        if self._system_config is None:
            defaults_dict = self._load_yaml_file(self.config_dir / "defaults.yaml")

            try:
                self._system_config = SystemConfig(**defaults_dict)
            except ValidationError as e:
                logger.warning(f"System defaults validation failed: {e}")
                self._system_config = SystemConfig()

        return self._system_config

    def _load_user_config(self) -> Dict[str, Any]:
        """Load user-level configuration"""
        if self._user_config is None:
            self._user_config = self._load_yaml_file(self.config_dir / "user.yaml")

        return self._user_config

    def _merge_configs(self) -> Dict[str, Any]:
        """Merge configurations with precedence: env → user → system"""
        merged = self._load_system_defaults().model_dump()
        self._deep_merge(merged, self._load_user_config())
        self._deep_merge(merged, self._get_env_overrides())
        return merged

    def _deep_merge(self, base: Dict[str, Any], updates: Dict[str, Any]) -> None:
        """Deep merge configuration dictionaries"""
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _get_env_overrides(self) -> Dict[str, Any]:
        """Extract configuration overrides from environment variables"""
        overrides: Dict[str, Any] = {}
        for env_key, (section, config_key, convert) in ENV_MAP.items():
            value = os.getenv(env_key)
            if value is None:
                continue

            if convert is bool:
                converted: Any = value.lower() in ('true', '1', 'yes', 'on')
            else:
                try:
                    converted = convert(value)
                except ValueError:
                    logger.warning(f"Ignoring {env_key}={value!r}: expected {convert.__name__}")
                    continue

            overrides.setdefault(section, {})[config_key] = converted

        return overrides

    def get_config(self, validation_level: ValidationLevel = ValidationLevel.STRICT) -> SystemConfig:
        """Get merged configuration with validation"""
        merged_config = self._merge_configs()

        try:
            return SystemConfig(**merged_config)
        except ValidationError as e:
            if validation_level == ValidationLevel.STRICT:
                raise ValueError(f"Configuration validation failed: {e}") from e
            logger.warning(f"Configuration validation failed, using defaults: {e}")
            return SystemConfig()

    def save_user_config(self, config_updates: Dict[str, Any]) -> bool:
        """Save user-level configuration updates"""
        user_path = self.config_dir / "user.yaml"

        existing_config = self._load_yaml_file(user_path)
        self._deep_merge(existing_config, config_updates)

        success = self._save_yaml_file(user_path, existing_config)
        if success:
            # Clear cached user config to force reload
            self._user_config = None

        return success

    def reload_config(self) -> None:
        """Clear cached configurations and reload from files"""
        self._system_config = None
        self._user_config = None


# Global instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """Get global configuration manager instance"""
    global _config_manager
    if _config_manager is None or config_dir is not None:
        _config_manager = ConfigManager(config_dir)
    return _config_manager


def get_config(validation_level: ValidationLevel = ValidationLevel.STRICT) -> SystemConfig:
    """Get current system configuration"""
    return get_config_manager().get_config(validation_level)


def reset_config() -> None:
    """Drop the global manager. Primarily used for testing."""
    global _config_manager
    _config_manager = None
