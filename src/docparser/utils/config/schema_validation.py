"""
Schema validation for configuration management.

This module holds the configuration JSON schema and validates merged
configuration dictionaries against it with jsonschema.
"""

import logging
from typing import Any, Dict, List, Optional

import jsonschema

from ...exceptions.config_exceptions import ConfigurationValidationError


logger = logging.getLogger(__name__)

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "version": {"type": "string"},
        "source_paths": {
            "type": "array",
            "items": {"type": "string", "minLength": 1},
        },
        "extraction": {
            "type": "object",
            "properties": {
                "extended_forms": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "logging": {
            "type": "object",
            "properties": {
                "level": {
                    "type": "string",
                    "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL",
                             "debug", "info", "warning", "error", "critical"],
                },
                "format": {"type": "string", "enum": ["standard", "json", "detailed"]},
            },
            "additionalProperties": False,
        },
    },
    "required": ["source_paths"],
    "additionalProperties": False,
}


class SchemaValidator:
    """Validates configuration dictionaries against a JSON schema."""

    def __init__(self, schema: Optional[Dict[str, Any]] = None) -> None:
        self.schema = schema or CONFIG_SCHEMA
        self.logger = logger

    def validate_config(
        self,
        config: Dict[str, Any],
        config_file: Optional[str] = None
    ) -> bool:
        """
        Validate configuration against the schema.

        Every violation is reported, not just the first one.

        Args:
            config: Configuration dictionary to validate
            config_file: Configuration file name for error reporting

        Returns:
            True if validation passes

        Raises:
            ConfigurationValidationError: If validation fails
        """
        validator = jsonschema.Draft7Validator(self.schema)
        errors = sorted(validator.iter_errors(config), key=lambda e: [str(p) for p in e.absolute_path])
        if not errors:
            return True

        validation_errors: List[str] = []
        invalid_fields: List[str] = []
        for error in errors:
            validation_errors.append(error.message)
            if error.absolute_path:
                invalid_fields.append(".".join(str(p) for p in error.absolute_path))

        self.logger.debug(f"Configuration failed validation with {len(errors)} error(s)")
        raise ConfigurationValidationError(
            f"Configuration validation failed: {errors[0].message}",
            config_file,
            validation_errors,
            invalid_fields
        )
