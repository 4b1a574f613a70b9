"""
Configuration Management System for INFRA-DRISHTI

This module provides a centralized configuration system that supports a 4-tier
precedence hierarchy: environment → project → user → system defaults.
"""

import logging
import os
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config" / "settings"


class ValidationLevel(Enum):
    """Configuration validation strictness levels"""
    STRICT = "strict"      # Fail fast on validation errors
    LENIENT = "lenient"    # Log warnings, use defaults


class TelemetryDefaults(BaseModel):
    """Placeholder telemetry for discovered assets"""
    model_config = ConfigDict(extra='forbid')

    stress: float = 10
    strain: float = 50
    load_capacity: float = 100000
    vibration_frequency: float = 4.5


class AssetDefaults(BaseModel):
    """Placeholder attributes stamped onto every discovered asset.

    These are visually distinguishable defaults, not measured data.
    """
    model_config = ConfigDict(extra='forbid')

    name: str = Field(default="Discovered Infra", description="Name used when a chunk has no title")
    type: str = Field(default="Road", description="Asset category for discovered assets")
    coordinates: Tuple[float, float] = Field(default=(20.5937, 78.9629), description="Country-level centroid (India)")
    risk_score: float = 25
    age: float = 5
    load_factor: float = 7.5
    climate_impact: float = 6.0
    last_maintenance: date = date(2023, 12, 1)
    description: str = "AI-grounded infrastructure discovery via Google Maps."
    zone: str = "Pan-India"
    telemetry: TelemetryDefaults = Field(default_factory=TelemetryDefaults)


class DiscoveryConfig(BaseModel):
    """Discovery provider and merge configuration"""
    model_config = ConfigDict(extra='forbid')

    provider: str = Field(default="gemini", description="Discovery provider type")
    model: str = Field(default="gemini-3-flash-preview", description="Generative model name")
    api_key: Optional[str] = Field(default=None, description="Provider API key")
    base_url: Optional[str] = Field(default=None, description="Override the provider base URL")

    timeout: float = Field(default=60.0, ge=1.0, le=600.0, description="HTTP timeout (seconds)")
    max_retries: int = Field(default=2, ge=0, le=10, description="Retries on rate limit / server errors")
    retry_delay: float = Field(default=2.0, ge=0.0, le=60.0, description="Initial retry delay (seconds)")

    prompt_template: str = Field(default="discovery", description="Prompt template name")
    dedupe_by_location: bool = Field(default=False, description="Drop discoveries matching an existing name + rounded location")
    dedupe_precision: int = Field(default=3, ge=0, le=6, description="Decimal places used for the location key")

    defaults: AssetDefaults = Field(default_factory=AssetDefaults)


class DatabaseConfig(BaseModel):
    """Database Configuration"""
    model_config = ConfigDict(extra='forbid')

    db_path: str = Field(default="data/db/drishti.duckdb", description="Database file path")


class UIConfig(BaseModel):
    """UI state configuration"""
    model_config = ConfigDict(extra='forbid')

    default_view: str = Field(default="home", description="View active at startup")
    theme_key: str = Field(default="theme", description="Preference key for the persisted theme")
    os_dark_mode: Optional[bool] = Field(default=None, description="Override for the OS dark-mode probe")
    seed_assets_path: Optional[str] = Field(default=None, description="YAML file with bootstrap assets")


class LoggingConfig(BaseModel):
    """Logging configuration"""
    model_config = ConfigDict(extra='forbid')

    level: str = Field(default="DEBUG", description="File log level")
    log_dir: str = Field(default="data/logs", description="Directory for rotating log files")
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)
    backup_count: int = Field(default=5, ge=0, le=50)


class SystemConfig(BaseModel):
    """Complete system configuration"""
    model_config = ConfigDict(extra='forbid')

    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Metadata
    schema_version: int = Field(default=1, description="Configuration schema version")


# Environment variable -> (section, key)
ENV_MAP: Dict[str, Tuple[str, str]] = {
    'DISCOVERY_PROVIDER': ('discovery', 'provider'),
    'GEMINI_API_KEY': ('discovery', 'api_key'),
    'GEMINI_MODEL': ('discovery', 'model'),
    'GEMINI_BASE_URL': ('discovery', 'base_url'),
    'DISCOVERY_TIMEOUT': ('discovery', 'timeout'),
    'DISCOVERY_MAX_RETRIES': ('discovery', 'max_retries'),
    'DISCOVERY_RETRY_DELAY': ('discovery', 'retry_delay'),
    'DISCOVERY_DEDUPE': ('discovery', 'dedupe_by_location'),
    'DRISHTI_DB_PATH': ('database', 'db_path'),
    'DRISHTI_DEFAULT_VIEW': ('ui', 'default_view'),
    'DRISHTI_OS_DARK_MODE': ('ui', 'os_dark_mode'),
    'DRISHTI_SEED_ASSETS': ('ui', 'seed_assets_path'),
    'LOG_LEVEL': ('logging', 'level'),
    'LOG_DIR': ('logging', 'log_dir'),
}

_INT_KEYS = {'max_retries'}
_FLOAT_KEYS = {'timeout', 'retry_delay'}
_BOOL_KEYS = {'dedupe_by_location', 'os_dark_mode'}


class ConfigManager:
    """Centralized configuration manager with 4-tier precedence hierarchy"""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self._system_config: Optional[SystemConfig] = None
        self._user_config: Optional[Dict[str, Any]] = None
        self._project_config: Optional[Dict[str, Any]] = None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file"""
        if not file_path.exists():
            return {}

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.warning(f"Failed to load {file_path}: {e}")
            return {}

    def _save_yaml_file(self, file_path: Path, data: Dict[str, Any]) -> bool:
        """Save configuration to YAML file"""
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
            return True
        except (OSError, yaml.YAMLError) as e:
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

    def _load_project_config(self) -> Dict[str, Any]:
        """Load project-specific configuration"""
        if self._project_config is None:
            self._project_config = self._load_yaml_file(self.config_dir / "project.yaml")
        return self._project_config

    def _merge_configs(self) -> Dict[str, Any]:
        """Merge configurations with precedence: env → project → user → system"""
        merged = self._load_system_defaults().model_dump()

        self._deep_merge(merged, self._load_user_config())
        self._deep_merge(merged, self._load_project_config())
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
        for env_key, (section, config_key) in ENV_MAP.items():
            value = os.getenv(env_key)
            if value is None:
                continue

            if config_key in _INT_KEYS:
                try:
                    converted: Any = int(value)
                except ValueError:
                    logger.warning(f"Ignoring non-integer {env_key}={value!r}")
                    continue
            elif config_key in _FLOAT_KEYS:
                try:
                    converted = float(value)
                except ValueError:
                    logger.warning(f"Ignoring non-numeric {env_key}={value!r}")
                    continue
            elif config_key in _BOOL_KEYS:
                converted = value.lower() in ('true', '1', 'yes', 'on')
            else:
                converted = value

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

    def save_project_config(self, config_updates: Dict[str, Any]) -> bool:
        """Save project-specific configuration updates"""
        project_path = self.config_dir / "project.yaml"

        existing_config = self._load_yaml_file(project_path)
        self._deep_merge(existing_config, config_updates)

        success = self._save_yaml_file(project_path, existing_config)
        if success:
            # Force reload on next access
            self._project_config = None

        return success


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
