"""Load and validate actionkit settings from YAML."""

from __future__ import annotations

import copy
import logging
import os
import threading
from pathlib import Path
from typing import Any

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import InterpolationResolutionError

from actionkit.constants import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_FILE,
    DEFAULT_CONNECTION_NAME,
    PACKAGE_LOGGER_NAME,
    SUGGESTION_MAX_DISTANCE,
)

logger = logging.getLogger(__name__)

BUILT_IN_DEFAULTS: dict[str, dict[str, Any]] = {
    "events": {
        "suggestion_distance": SUGGESTION_MAX_DISTANCE,
    },
    "stubs": {
        "strict": False,
    },
    "logs": {
        "logger": "",
        "level": "DEBUG",
        "ignore": [PACKAGE_LOGGER_NAME],
    },
    "queries": {
        "default_connection": DEFAULT_CONNECTION_NAME,
    },
}

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class ConfigLoader:
    """Load YAML configuration and merge it over the built-in defaults."""

    def __init__(self) -> None:
        self.BUILT_IN_DEFAULTS = copy.deepcopy(BUILT_IN_DEFAULTS)

    def load_config(self, config_path: str | None = None) -> dict[str, Any]:
        """Load configuration from a YAML file.

        Parameters
        ----------
        config_path : str | None
            Path to YAML config file. If None, checks the ACTIONKIT_CONFIG env
            var, then falls back to actionkit.yaml

        Returns
        -------
        dict[str, Any]
            Parsed configuration with all variable interpolations resolved,
            or an empty dict when the file does not exist

        Raises
        ------
        ValueError
            If the file is not valid YAML or interpolation fails
        RuntimeError
            If the file exists but cannot be read
        """
        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE)

        config_file = Path(config_path)

        if not config_file.exists():
            return {}

        try:
            cfg = OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            logger.error("Failed to parse YAML config file %s: %s", config_file, e)
            raise ValueError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            logger.error("Failed to read config file %s: %s", config_file, e)
            raise RuntimeError(f"Failed to read config file {config_file}: {e}") from e

        if cfg is None:
            return {}

        try:
            config = OmegaConf.to_container(cfg, resolve=True, throw_on_missing=True)
        except InterpolationResolutionError as e:
            logger.error("Failed to resolve configuration variables: %s", e)
            raise ValueError(f"Configuration variable resolution error: {e}") from e

        if not isinstance(config, dict):
            raise ValueError(f"Configuration in {config_file} must be a mapping")

        return config

    def merge(self, config: dict[str, Any]) -> dict[str, Any]:
        """Merge loaded configuration over the built-in defaults.

        Parameters
        ----------
        config : dict[str, Any]
            Configuration as returned by ``load_config``

        Returns
        -------
        dict[str, Any]
            Built-in defaults with every known section overridden key by key
        """
        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)

        for section, values in config.items():
            if section not in merged:
                logger.warning("Ignoring unknown configuration section '%s'", section)
                continue

            if not isinstance(values, dict):
                raise ValueError(f"{section} must be a mapping")

            for key, value in values.items():
                merged[section][key] = value

        return merged

    def validate_config(self, config: dict[str, Any]) -> None:
        """Validate merged configuration.

        Parameters
        ----------
        config : dict[str, Any]
            Configuration to validate

        Raises
        ------
        ValueError
            If configuration is invalid
        """
        distance = config["events"]["suggestion_distance"]
        if not isinstance(distance, int) or isinstance(distance, bool) or distance < 0:
            raise ValueError("events.suggestion_distance must be a non-negative integer")

        if not isinstance(config["stubs"]["strict"], bool):
            raise ValueError("stubs.strict must be a boolean")

        self._validate_logs(config["logs"])

        if not isinstance(config["queries"]["default_connection"], str):
            raise ValueError("queries.default_connection must be a string")

    def _validate_logs(self, logs: dict[str, Any]) -> None:
        if not isinstance(logs["logger"], str):
            raise ValueError("logs.logger must be a string")

        level = logs["level"]
        if not isinstance(level, str) or level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Invalid logs.level '{level}'. Must be one of {list(_LOG_LEVELS)}")

        if not isinstance(logs["ignore"], list):
            raise ValueError("logs.ignore must be a list")

        for item in logs["ignore"]:
            if not isinstance(item, str):
                raise ValueError("logs.ignore entries must be strings")

    def load_settings(self, config_path: str | None = None) -> dict[str, Any]:
        """Load, merge and validate configuration in one step."""
        settings = self.merge(self.load_config(config_path))
        self.validate_config(settings)
        return settings


_settings: dict[str, Any] | None = None
_settings_lock = threading.Lock()


def get_settings() -> dict[str, Any]:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    with _settings_lock:
        if _settings is None:
            _settings = ConfigLoader().load_settings()
        return _settings


def reset_settings() -> None:
    """Forget cached settings so the next lookup reloads them."""
    global _settings
    with _settings_lock:
        _settings = None
