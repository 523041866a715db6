"""
Configuration Management System for the Backoffice console

This module provides a centralized configuration system that supports a 4-tier
precedence hierarchy: environment → project → user → system defaults.
"""

import copy
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Literal, Mapping, Optional, Tuple

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_DIR = Path(__file__).resolve().parent.parent / "config" / "settings"


class ValidationLevel(Enum):
    """Configuration validation strictness levels"""
    STRICT = "strict"      # Fail fast on validation errors
    LENIENT = "lenient"    # Log warnings, use defaults


class ApiConfig(BaseModel):
    """Backend REST API Configuration"""
    model_config = ConfigDict(extra='forbid')

    base_url: str = Field(default="http://localhost:8000/api", description="API root including the /api prefix")
    timeout: float = Field(default=15.0, ge=1.0, le=300.0, description="Request timeout (seconds)")


class AuthConfig(BaseModel):
    """Operator authentication Configuration"""
    model_config = ConfigDict(extra='forbid')

    mode: Literal["static", "backend"] = Field(default="static", description="Credential check strategy")
    # Demo credential pair for the static verifier; not a security mechanism
    demo_username: str = Field(default="admin")
    demo_password: str = Field(default="admin123")
    login_path: str = Field(default="/auth/login", description="Backend login endpoint for mode=backend")


class StorageConfig(BaseModel):
    """Durable local storage Configuration"""
    model_config = ConfigDict(extra='forbid')

    path: str = Field(default="data/session/local_storage.json", description="Session storage file")
    token_key: str = Field(default="admin_token")
    user_key: str = Field(default="admin_user")


class AnnouncementsConfig(BaseModel):
    """Announcements resource Configuration"""
    model_config = ConfigDict(extra='forbid')

    use_fixtures: bool = Field(default=False, description="Serve announcements from in-memory seed data")


class UIConfig(BaseModel):
    """UI Configuration"""
    model_config = ConfigDict(extra='forbid')

    page_title: str = Field(default="Admin Dashboard")
    layout: Literal["wide", "centered"] = Field(default="wide")
    activity_feed_size: int = Field(default=20, ge=1, le=500, description="Recent activity entries kept in memory")


class LoggingConfig(BaseModel):
    """Logging Configuration"""
    model_config = ConfigDict(extra='forbid')

    level: str = Field(default="DEBUG", description="File log level")
    file: str = Field(default="data/logs/backoffice.log")
    console_level: str = Field(default="WARNING")


class SystemConfig(BaseModel):
    """Complete system configuration"""
    model_config = ConfigDict(extra='forbid')

    api: ApiConfig = Field(default_factory=ApiConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    announcements: AnnouncementsConfig = Field(default_factory=AnnouncementsConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Metadata
    schema_version: int = Field(default=1, description="Configuration schema version")


def _parse_flag(raw: str) -> bool:
    return raw.strip().lower() in ('true', '1', 'yes', 'on')


# env var -> (section, key, parser). Later entries win, so the legacy
# REACT_APP_API_URL alias must stay ahead of BACKOFFICE_API_URL.
ENV_OVERRIDES: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    'REACT_APP_API_URL': ('api', 'base_url', str),
    'BACKOFFICE_API_URL': ('api', 'base_url', str),
    'BACKOFFICE_API_TIMEOUT': ('api', 'timeout', float),
    'BACKOFFICE_AUTH_MODE': ('auth', 'mode', str),
    'BACKOFFICE_STORAGE_PATH': ('storage', 'path', str),
    'BACKOFFICE_ANNOUNCEMENT_FIXTURES': ('announcements', 'use_fixtures', _parse_flag),
    'LOG_LEVEL': ('logging', 'level', str),
    'LOG_FILE': ('logging', 'file', str),
}

# File layers, lowest precedence first. Environment overrides sit on top.
FILE_LAYERS = ("defaults.yaml", "user.yaml", "project.yaml")


def deep_merge(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``updates`` into ``base`` in place; nested sections merge key by key."""
    for key, value in updates.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            deep_merge(current, value)
        else:
            base[key] = value
    return base


def read_env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect ``ENV_OVERRIDES`` present in ``environ`` as a nested section dict.

    Values the parser rejects are logged and skipped.
    """
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}
    for name, (section, key, parse) in ENV_OVERRIDES.items():
        raw = environ.get(name)
        if raw is None:
            continue
        try:
            value = parse(raw)
        except ValueError:
            logger.warning(f"Ignoring {name}={raw!r}: not a valid {key}")
            continue
        overrides.setdefault(section, {})[key] = value
    return overrides


class ConfigManager:
    """Layered configuration: environment over project.yaml over user.yaml over defaults.yaml.

    File layers are read once per manager and cached.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_SETTINGS_DIR
        self._layers: Dict[str, Dict[str, Any]] = {}

    def _read_layer(self, filename: str) -> Dict[str, Any]:
        if filename not in self._layers:
            path = self.config_dir / filename
            data: Any = {}
            if path.exists():
                try:
                    data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
                except yaml.YAMLError as e:
                    logger.warning(f"Skipping unreadable config layer {path}: {e}")
            if not isinstance(data, dict):
                logger.warning(f"Skipping config layer {path}: top level is not a mapping")
                data = {}
            self._layers[filename] = data
        return self._layers[filename]

    def merged(self) -> Dict[str, Any]:
        """Raw merged settings before validation."""
        merged = SystemConfig().model_dump()
        for filename in FILE_LAYERS:
            deep_merge(merged, copy.deepcopy(self._read_layer(filename)))
        return deep_merge(merged, read_env_overrides())

    def get_config(self, validation_level: ValidationLevel = ValidationLevel.STRICT) -> SystemConfig:
        """Validate the merged settings.

        STRICT raises ``ValueError`` on invalid settings; LENIENT logs and
        returns model defaults.
        """
        try:
            return SystemConfig.model_validate(self.merged())
        except ValidationError as e:
            if validation_level is ValidationLevel.STRICT:
                raise ValueError(f"Configuration validation failed: {e}") from e
            logger.warning(f"Configuration validation failed, falling back to defaults: {e}")
            return SystemConfig()


_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """Process-wide manager; ``.env`` is loaded when it is (re)created."""
    global _config_manager
    if _config_manager is None or config_dir is not None:
        load_dotenv()
        _config_manager = ConfigManager(config_dir)
    return _config_manager


def get_config(validation_level: ValidationLevel = ValidationLevel.STRICT) -> SystemConfig:
    return get_config_manager().get_config(validation_level)
