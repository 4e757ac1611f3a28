"""Configuration loading and validation."""

from .loader import ConfigError, load_app_config, resolve_config_path, validate_app_config_file
from .models import (
    AppConfig,
    ApprovalConfig,
    DatabaseConfig,
    LoggingConfig,
    PaginationConfig,
)

__all__ = [
    # Config models
    "AppConfig",
    "ApprovalConfig",
    "DatabaseConfig",
    "LoggingConfig",
    "PaginationConfig",
    # Loaders
    "ConfigError",
    "load_app_config",
    "resolve_config_path",
    "validate_app_config_file",
]
