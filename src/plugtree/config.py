"""Configuration management for plugtree.

Configuration Discovery Precedence (Highest to Lowest Priority):
===============================================================

1. **PLUGTREE_CONFIG_DIR Environment Variable**
   - Looks for: `${PLUGTREE_CONFIG_DIR}/plugtree.yaml`

2. **Current Working Directory**
   - Looks for: `./plugtree.yaml`

3. **Defaults**
   - No plugins, profiling off

Individual fields can also be set through `PLUGTREE_*` environment
variables (e.g. `PLUGTREE_PROFILE=1`); values in the YAML file win.

Example plugtree.yaml:
---------------------
plugtree:
  profile: true
  plugins:
    - mybundler.plugins.minify
    - mybundler.plugins:source_maps
"""

import logging
import os
import threading
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "plugtree.yaml"


class PlugtreeSettings(BaseSettings):
    """Settings for pluggable execution."""

    model_config = SettingsConfigDict(
        env_prefix="PLUGTREE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Open a profiler event for every pluggable invocation
    profile: bool = False

    # Plugin import paths, run in order when building a context from settings
    plugins: list[str] = Field(default_factory=list)

    # Path the settings were loaded from
    config_path: Path = Field(default_factory=lambda: Path(CONFIG_FILENAME))

    @classmethod
    def from_yaml(cls, yaml_path: Path, **kwargs: Any) -> "PlugtreeSettings":
        """Load settings from the `plugtree` section of a YAML file.

        Args:
            yaml_path: Path to plugtree.yaml
            **kwargs: Additional keyword arguments

        Returns:
            PlugtreeSettings instance (defaults if the file does not exist)

        Raises:
            yaml.YAMLError: If the file is not valid YAML
            pydantic.ValidationError: If a field has the wrong type
        """
        if not yaml_path.exists():
            return cls(config_path=yaml_path, **kwargs)

        with yaml_path.open() as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            logger.warning(f"Invalid config in {yaml_path}: expected a mapping, got {type(data).__name__}")
            data = {}

        section = data.get("plugtree", {}) or {}
        if not isinstance(section, dict):
            logger.warning(f"Invalid plugtree section in {yaml_path}: {type(section).__name__}")
            section = {}

        return cls(**{**section, **kwargs, "config_path": yaml_path})


# Global settings instance
_settings_instance: PlugtreeSettings | None = None
_settings_lock = threading.Lock()


def get_settings() -> PlugtreeSettings:
    """Get the settings instance."""
    global _settings_instance

    if _settings_instance is None:
        with _settings_lock:
            if _settings_instance is None:
                env_config_dir = os.environ.get("PLUGTREE_CONFIG_DIR")
                if env_config_dir:
                    config_path = Path(env_config_dir) / CONFIG_FILENAME
                    logger.info(f"Using config directory from environment: {env_config_dir}")
                else:
                    config_path = Path.cwd() / CONFIG_FILENAME

                if config_path.exists():
                    logger.info(f"Loading plugtree config from: {config_path}")
                else:
                    logger.debug(f"{config_path} not found, using default settings")
                _settings_instance = PlugtreeSettings.from_yaml(config_path)

    return _settings_instance


def set_settings_instance(settings: PlugtreeSettings) -> None:
    """Set the global settings instance (for testing)."""
    global _settings_instance
    _settings_instance = settings


def clear_settings_instance() -> None:
    """Clear the global settings instance (for testing)."""
    global _settings_instance
    _settings_instance = None
