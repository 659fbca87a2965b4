"""
Configuration loader for LifeQuest widget
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Maximum config file size (1MB should be plenty for YAML configs)
MAX_CONFIG_SIZE = 1024 * 1024

DEFAULT_CONFIG: Dict[str, Any] = {
    "app": {
        "scheme": "lifequest",
        "channel": "com.example.life_quests/deep_link",
    },
    "widget": {
        "refresh_uri": "lifequest://refresh",
        "ids": [1],
        "size": [320, 160],
    },
    "state": {
        "path": "~/.lifequest/state.yaml",
    },
    "host": {
        "output_dir": "~/.lifequest/widgets",
    },
    "styles": {
        "normal": {
            "font": "DejaVu Sans",
            "font_size": 22,
            "text_color": "#FFFFFF",
            "accent_color": "#4CAF50",
            "background_color": "#1E1E2E",
        },
        "level_up": {
            "font": "DejaVu Sans",
            "font_size": 22,
            "text_color": "#1E1E2E",
            "accent_color": "#8B5A00",
            "background_color": "#FFC107",
        },
    },
}


class ConfigLoader:
    """Loads and validates YAML configuration files"""

    def load(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Validated configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If config file is invalid or too large (a ValueError)
            PermissionError: If config file is not readable
        """
        resolved_path = Path(config_path).expanduser().resolve()

        self._validate_config_path(resolved_path)

        if not resolved_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {resolved_path}")

        file_size = resolved_path.stat().st_size
        if file_size > MAX_CONFIG_SIZE:
            raise ConfigurationError(
                f"Configuration file too large: {file_size} bytes "
                f"(maximum {MAX_CONFIG_SIZE} bytes)"
            )

        try:
            with open(resolved_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")
        except PermissionError as e:
            raise PermissionError(f"Cannot read configuration file: {e}")

        # An empty file means "all defaults"
        if config is None:
            config = {}

        self._validate(config)
        config = self._apply_defaults(config)

        logger.info(f"Loaded configuration from {resolved_path}")
        return config

    def default_config(self) -> Dict[str, Any]:
        """Return a fresh copy of the built-in configuration."""
        return copy.deepcopy(DEFAULT_CONFIG)

    def load_or_default(self, config_path: Optional[str]) -> Dict[str, Any]:
        """Load ``config_path`` if given, otherwise return the defaults."""
        if not config_path:
            logger.debug("No configuration file given, using defaults")
            return self.default_config()
        return self.load(config_path)

    def _validate_config_path(self, config_path: Path) -> None:
        """
        Validate that the configuration file path is safe to load.

        Args:
            config_path: Resolved absolute path to config file

        Raises:
            ConfigurationError: If path is not safe to load
        """
        if config_path.is_dir():
            raise ConfigurationError(f"Path is a directory, not a file: {config_path}")

        if config_path.suffix.lower() not in [".yaml", ".yml"]:
            logger.warning(
                f"Configuration file has unexpected extension: {config_path.suffix}. "
                f"Expected .yaml or .yml"
            )

        logger.debug(f"Configuration path validated: {config_path}")

    def _validate(self, config: Dict[str, Any]) -> None:
        """Validate configuration structure"""
        if not isinstance(config, dict):
            raise ConfigurationError("Configuration must be a dictionary")

        for section in DEFAULT_CONFIG:
            if section in config and not isinstance(config[section], dict):
                raise ConfigurationError(f"'{section}' must be a dictionary")

        scheme = config.get("app", {}).get("scheme")
        if scheme is not None and (not isinstance(scheme, str) or not scheme):
            raise ConfigurationError("'app.scheme' must be a non-empty string")

        widget = config.get("widget", {})
        if "ids" in widget:
            ids = widget["ids"]
            if not isinstance(ids, list) or not all(
                isinstance(i, int) and not isinstance(i, bool) for i in ids
            ):
                raise ConfigurationError("'widget.ids' must be a list of integers")

        if "size" in widget:
            size = widget["size"]
            if (
                not isinstance(size, list)
                or len(size) != 2
                or not all(isinstance(v, int) and v > 0 for v in size)
            ):
                raise ConfigurationError("'widget.size' must be [width, height] in pixels")

        for style_name, style in config.get("styles", {}).items():
            if not isinstance(style, dict):
                raise ConfigurationError(f"Style '{style_name}' must be a dictionary")

    def _apply_defaults(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply default values to configuration"""
        for section, defaults in DEFAULT_CONFIG.items():
            if section not in config:
                config[section] = {}
            for key, value in defaults.items():
                if key not in config[section]:
                    config[section][key] = copy.deepcopy(value)

        # Partial styles inherit the remaining keys from the built-in style
        for style_name, style_defaults in DEFAULT_CONFIG["styles"].items():
            style = config["styles"][style_name]
            for key, value in style_defaults.items():
                style.setdefault(key, value)

        return config
