"""Configuration loading for the Papla Media tools.

Implements hybrid configuration with precedence:
1. Constructor arguments (highest priority)
2. Environment variables
3. Configuration file (YAML)
4. Defaults (lowest priority)
"""

import logging
import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from papla.base import PaplaConfigurationError

logger = logging.getLogger(__name__)

API_KEY_URL = "https://app.papla.media"


@dataclass(frozen=True)
class ServerConfig:
    """Immutable settings injected into the client and the tools."""

    api_key: str
    output_dir: str
    api_base_url: str


class ConfigLoader:
    """
    Resolves ServerConfig values from multiple sources.

    Configuration precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables
    3. Configuration file
    4. Built-in defaults

    Empty strings and None never override a lower-priority source.
    """

    DEFAULTS = {
        "api_key": None,
        "output_dir": os.path.join(os.path.expanduser("~"), "papla-audio"),
        "api_base_url": "https://papla.media",
    }

    ENV_VAR_MAP = {
        "api_key": "PAPLA_API_KEY",
        "output_dir": "PAPLA_OUTPUT_DIR",
        "api_base_url": "PAPLA_API_BASE_URL",
    }

    CONFIG_FILE_ENV_VAR = "PAPLA_CONFIG_FILE"

    def __init__(
        self,
        config_file: Optional[str] = None,
        **overrides
    ):
        """
        Initialize configuration loader.

        Args:
            config_file: Path to YAML config file (optional; falls back to
                         PAPLA_CONFIG_FILE)
            **overrides: Direct configuration overrides (highest priority)
        """
        self.config_file = config_file or os.environ.get(self.CONFIG_FILE_ENV_VAR) or None
        self.overrides = overrides
        self._config = None

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value with precedence resolution.

        Args:
            key: Configuration key (e.g., 'output_dir')
            default: Default value if not found

        Returns:
            Configuration value with precedence applied
        """
        if self._config is None:
            self._config = self._build_config()

        value = self._config.get(key)
        return value if value is not None else default

    def build(self) -> ServerConfig:
        """
        Produce the final immutable configuration.

        Raises:
            PaplaConfigurationError: If no API key is configured
        """
        api_key = self.get("api_key")
        if not api_key:
            raise PaplaConfigurationError(
                f"{self.ENV_VAR_MAP['api_key']} environment variable is required. "
                f"Get your API key at: {API_KEY_URL}"
            )

        return ServerConfig(
            api_key=api_key,
            output_dir=os.path.expanduser(self.get("output_dir")),
            api_base_url=self.get("api_base_url"),
        )

    def _build_config(self) -> Dict[str, Any]:
        config = dict(self.DEFAULTS)

        if self.config_file:
            config = self._merge(config, self._load_config_file(self.config_file))

        config = self._merge(config, self._load_env_config())
        config = self._merge(config, self.overrides)

        return config

    def _load_config_file(self, config_file: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Missing or unreadable files are ignored with a warning.
        """
        path = Path(config_file)
        if not path.exists():
            logger.warning("Config file %s does not exist, ignoring it", config_file)
            return {}

        try:
            with open(path, 'r') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Failed to load config file %s: %s", config_file, e)
            return {}

        if not isinstance(config, dict):
            if config is not None:
                logger.warning("Config file %s does not contain a mapping, ignoring it", config_file)
            return {}
        return config

    def _load_env_config(self) -> Dict[str, Any]:
        config = {}
        for key, env_var in self.ENV_VAR_MAP.items():
            value = os.environ.get(env_var)
            if value is not None:
                config[key] = value
        return config

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Merge known keys from override into a copy of base, skipping empty values."""
        result = dict(base)
        for key, value in override.items():
            if key not in self.DEFAULTS:
                logger.debug("Ignoring unknown config key %r", key)
                continue
            if value is not None and value != "":
                result[key] = value
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Get the resolved configuration as a dictionary, with the API key masked."""
        if self._config is None:
            self._config = self._build_config()
        result = dict(self._config)
        if result.get("api_key"):
            result["api_key"] = "***"
        return result


def load_config(config_file: Optional[str] = None, **overrides) -> ServerConfig:
    """
    Module-level convenience function to build a ServerConfig.

    Args:
        config_file: Path to YAML configuration file
        **overrides: Configuration overrides

    Returns:
        Resolved ServerConfig

    Raises:
        PaplaConfigurationError: If no API key is configured
    """
    return ConfigLoader(config_file=config_file, **overrides).build()
