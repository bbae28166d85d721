"""cap-manager configuration.

This module provides loading, validation, and typed access to configuration
values merged from defaults, the user and project TOML files, environment
variables, and CLI overrides.

Example:
    >>> from cap_manager.config import Config
    >>> config = Config.load()
    >>> config.server.port
    3005
"""

from cap_manager.exceptions import ConfigError, ConfigLoadError, ConfigValidationError

from ._defaults import DEFAULT_CONFIG
from ._discovery import (
    PROJECT_CONFIG_NAME,
    discover_sources,
    get_project_config_path,
    get_user_config_path,
)
from ._load import safe_load_config
from ._loader import deep_merge, parse_env_vars, parse_string_value, read_toml_file, set_nested_key
from ._models import (
    Config,
    ConfigSchema,
    ConfigSource,
    ConfigSourceName,
    LogFormat,
    LoggingConfig,
    LogLevel,
    ServerConfig,
    StoreConfig,
)
from ._validation import ConfigIssue, validate_config

__all__ = [
    "DEFAULT_CONFIG",
    "PROJECT_CONFIG_NAME",
    "Config",
    "ConfigError",
    "ConfigIssue",
    "ConfigLoadError",
    "ConfigSchema",
    "ConfigSource",
    "ConfigSourceName",
    "ConfigValidationError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ServerConfig",
    "StoreConfig",
    "deep_merge",
    "discover_sources",
    "get_project_config_path",
    "get_user_config_path",
    "parse_env_vars",
    "parse_string_value",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
    "validate_config",
]
