"""
Environment variable handling for configuration management.

Maps ``DOCPARSER_*`` environment variables onto configuration keys and
converts their string values to the types the configuration expects.
"""

import logging
import os
from copy import deepcopy
from typing import Any, Dict, Mapping, Optional, Tuple

from ...exceptions.config_exceptions import EnvironmentVariableError


logger = logging.getLogger(__name__)

TRUE_VALUES = frozenset({'true', '1', 'yes', 'on', 'enabled'})
FALSE_VALUES = frozenset({'false', '0', 'no', 'off', 'disabled'})


class EnvironmentHandler:
    """Applies environment variable overrides to a configuration dictionary."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """
        Args:
            environ: Variable source, defaults to ``os.environ``
        """
        self.environ = environ if environ is not None else os.environ
        self.logger = logger

    def get_env_mapping(self) -> Dict[str, Tuple[str, str]]:
        """
        Get mapping of environment variables to configuration keys.

        Returns:
            Dictionary mapping variable names to (config key, target type)
        """
        return {
            'DOCPARSER_SOURCE_PATHS': ('source_paths', 'pathlist'),
            'DOCPARSER_EXTENDED_FORMS': ('extraction.extended_forms', 'boolean'),
            'DOCPARSER_LOG_LEVEL': ('logging.level', 'string'),
            'DOCPARSER_LOG_FORMAT': ('logging.format', 'string'),
        }

    def convert_env_value(self, name: str, value: str, target_type: str = 'string') -> Any:
        """
        Convert environment variable string to appropriate Python type.

        Args:
            name: Environment variable name, used in error messages
            value: Environment variable value (always string)
            target_type: Target type ('string', 'boolean', 'pathlist')

        Returns:
            Converted value

        Raises:
            EnvironmentVariableError: If conversion fails
        """
        if target_type == 'boolean':
            lowered = value.strip().lower()
            if lowered in TRUE_VALUES:
                return True
            if lowered in FALSE_VALUES:
                return False
            raise EnvironmentVariableError(
                f"Cannot interpret {name}={value!r} as a boolean",
                name
            )
        if target_type == 'pathlist':
            return [part for part in value.split(os.pathsep) if part]
        return value.strip()

    def apply_environment_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variable overrides to configuration.

        Args:
            config: Base configuration dictionary

        Returns:
            Configuration with environment overrides applied

        Raises:
            EnvironmentVariableError: If a set variable has an invalid value
        """
        result = deepcopy(config)

        for env_var, (config_key, target_type) in self.get_env_mapping().items():
            env_value = self.environ.get(env_var)
            if env_value is None or env_value == '':
                continue
            converted_value = self.convert_env_value(env_var, env_value, target_type)
            self._set_nested_value(result, config_key, converted_value)
            self.logger.debug(f"Applied environment override: {env_var} -> {config_key}")

        return result

    def _set_nested_value(self, config: Dict[str, Any], key_path: str, value: Any) -> None:
        keys = key_path.split('.')
        current = config
        for key in keys[:-1]:
            current = current.setdefault(key, {})
        current[keys[-1]] = value
