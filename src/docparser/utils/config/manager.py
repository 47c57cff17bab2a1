"""
Main configuration manager for docparser.

This module provides the ConfigManager class that layers built-in defaults,
an optional JSON configuration file and environment variable overrides,
then validates the result against the configuration schema.
"""

import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...exceptions.config_exceptions import ConfigurationError
from .environment import EnvironmentHandler
from .file_operations import FileOperations
from .paths import ConfigPaths
from .schema_validation import SchemaValidator


logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "version": "0.1.0",
    "source_paths": ["."],
    "extraction": {
        "extended_forms": False,
    },
    "logging": {
        "level": "INFO",
        "format": "standard",
    },
}


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``.

    Nested dictionaries are merged key by key; any other value in
    ``override`` replaces the base value outright.
    """
    result = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = deepcopy(value)
    return result


class ConfigManager:
    """
    Configuration manager for docparser.

    Handles loading, validation, and merging of configuration from multiple sources:
    - Built-in defaults
    - The project configuration file (``docparser.config.json``)
    - Environment variables (``DOCPARSER_*``, optionally from ``.env``)
    """

    def __init__(
        self,
        config_file: Optional[str] = None,
        project_root: Optional[Union[str, Path]] = None,
        load_env: bool = True,
    ) -> None:
        """
        Initialize the ConfigManager.

        Args:
            config_file: Path to configuration file. When given explicitly the
                file must exist; the default file is optional.
            project_root: Project root directory (default: current working directory)
            load_env: Whether to load environment variables from .env file
        """
        self.project_root = Path(project_root or os.getcwd()).resolve()
        self.paths = ConfigPaths()
        self.explicit_config = config_file is not None
        self.config_file = config_file or self.paths.DEFAULT_CONFIG_FILE

        self._config: Dict[str, Any] = {}
        self._loaded = False
        self.logger = logger

        self.file_ops = FileOperations(self.project_root, self.paths.ENV_FILE)
        self.schema_validator = SchemaValidator()
        self.env_handler = EnvironmentHandler()

        if load_env:
            self.file_ops.load_environment_variables()

    @property
    def config(self) -> Dict[str, Any]:
        """Get the current configuration. Loads if not already loaded."""
        if not self._loaded:
            self.load_config()
        return deepcopy(self._config)

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._loaded

    @property
    def config_path(self) -> Path:
        return self.file_ops.resolve_path(self.config_file)

    def load_config(
        self,
        force_reload: bool = False,
        validate: bool = True
    ) -> Dict[str, Any]:
        """
        Load configuration from all sources.

        Args:
            force_reload: Force reloading even if already loaded
            validate: Whether to validate configuration against schema

        Returns:
            Loaded configuration dictionary

        Raises:
            ConfigurationFileNotFoundError: If an explicit config file is missing
            ConfigurationValidationError: If validation fails
            EnvironmentVariableError: If an override has an invalid value
            ConfigurationError: If the file cannot be parsed
        """
        if self._loaded and not force_reload:
            self.logger.debug("Configuration already loaded, returning cached version")
            return deepcopy(self._config)

        try:
            merged_config = deepcopy(DEFAULT_CONFIG)

            if self.explicit_config or self.config_path.is_file():
                self.logger.debug(f"Loading configuration file: {self.config_path}")
                file_config = self.file_ops.load_json_file(self.config_path)
                merged_config = merge_configs(merged_config, file_config)
            else:
                self.logger.debug("No configuration file found, using defaults")

            merged_config = self.env_handler.apply_environment_overrides(merged_config)

            if validate:
                self.schema_validator.validate_config(merged_config, str(self.config_path))
        except ConfigurationError as e:
            self.logger.error(f"Configuration loading failed: {e}")
            self._loaded = False
            raise

        self._config = merged_config
        self._loaded = True
        return deepcopy(self._config)

    def reload_config(self) -> Dict[str, Any]:
        """Force reload configuration from all sources."""
        return self.load_config(force_reload=True)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by key using dot notation.

        Args:
            key: Configuration key (supports dot notation like 'logging.level')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        config = self.config
        try:
            for k in key.split('.'):
                config = config[k]
            return config
        except (KeyError, TypeError):
            return default

    def get_source_paths(self) -> List[Path]:
        """Source search directories, resolved against the project root."""
        return [self.file_ops.resolve_path(path) for path in self.get("source_paths", [])]

    def reset(self) -> None:
        """Reset configuration state, forcing reload on next access."""
        self._config = {}
        self._loaded = False
