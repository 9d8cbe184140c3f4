"""
Configuration Loader

Reads config.yaml, layers environment variables (and a .env file) on top
and validates the result into a Config object.

Author: mirrorsync Project
License: MIT
"""

import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv

from .schema import Config

DEFAULT_CONFIG_PATH = "config.yaml"
CONFIG_SECTIONS = ("logging", "sync", "retry")


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# env var -> (section, key, converter)
ENV_OVERRIDES: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    "MIRRORSYNC_LOG_LEVEL": ("logging", "log_level", str.upper),
    "MIRRORSYNC_LOG_FILE": ("logging", "log_file_path", str),
    "MIRRORSYNC_JSON_LOGS": ("logging", "json_format", _as_bool),
    "SYNC_SOURCE": ("sync", "source", str),
    "SYNC_DESTINATION": ("sync", "destination", str),
    "SYNC_INTERVAL": ("sync", "interval", str),
    "SYNC_RETRY_COUNT": ("retry", "retry_count", int),
    "SYNC_RETRY_DELAY": ("retry", "retry_delay", float),
}


class ConfigLoader:
    """
    Loads mirrorsync configuration.

    Precedence, lowest first: built-in defaults, YAML file, environment.
    Command-line options are applied on top by the CLI.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: YAML file to read. Defaults to $MIRRORSYNC_CONFIG or ./config.yaml
        """
        load_dotenv()

        self.config_path = config_path or os.getenv("MIRRORSYNC_CONFIG", DEFAULT_CONFIG_PATH)
        self._config: Optional[Config] = None

    def load(self) -> Config:
        """
        Load, merge and validate.

        Raises:
            ValueError: Unparseable YAML, or values failing validation
        """
        data = self._read_file()
        self._apply_environment(data)

        self._config = Config(**data)
        return self._config

    def _read_file(self) -> Dict[str, Any]:
        path = Path(self.config_path)
        if not path.exists():
            return self._create_default_config()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML config {path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")

        # An empty "logging:" key parses as None
        for section in CONFIG_SECTIONS:
            value = data.get(section)
            if value is None:
                data[section] = {}
            elif not isinstance(value, dict):
                raise ValueError(f"Config section '{section}' must be a mapping: {path}")
        return data

    def _create_default_config(self) -> Dict[str, Any]:
        """Sections used when no config file exists; field defaults fill in the rest."""
        return {section: {} for section in CONFIG_SECTIONS}

    def _apply_environment(self, data: Dict[str, Any]) -> None:
        """Overwrite file values with any set environment variables."""
        for name, (section, key, convert) in ENV_OVERRIDES.items():
            raw = os.getenv(name)
            if not raw:
                continue
            try:
                value = convert(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {name}: {raw!r}") from e
            data.setdefault(section, {})[key] = value

        # Naming a log file implies wanting one
        if os.getenv("MIRRORSYNC_LOG_FILE"):
            data["logging"]["log_to_file"] = True

    def save(self, config: Config, path: Optional[str] = None) -> None:
        """
        Write a configuration back out as YAML.

        Args:
            config: Configuration to write
            path: Target file (defaults to the loader's path)
        """
        target = Path(path or self.config_path)
        target.parent.mkdir(parents=True, exist_ok=True)

        with open(target, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config.dict(), f, default_flow_style=False, sort_keys=False)

    def reload(self) -> Config:
        return self.load()

    @property
    def config(self) -> Optional[Config]:
        """Last loaded configuration, if any."""
        return self._config


def load_config(config_path: Optional[str] = None) -> Config:
    """Shortcut for ConfigLoader(config_path).load()."""
    return ConfigLoader(config_path).load()
