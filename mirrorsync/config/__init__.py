"""
mirrorsync Configuration Module

This module handles configuration loading, validation, and management for
mirrorsync. It supports YAML-based configuration with environment variable
overrides and validates everything through pydantic models.

Author: mirrorsync Project
License: MIT
"""

from .intervals import parse_interval
from .schema import Config, LoggingConfig, RetryConfig, SyncConfig
from .config_loader import ConfigLoader, load_config

__all__ = [
    'Config', 'LoggingConfig', 'RetryConfig', 'SyncConfig',
    'ConfigLoader', 'load_config', 'parse_interval'
]
