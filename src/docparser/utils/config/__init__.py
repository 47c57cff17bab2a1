"""
Configuration management package for docparser.

Layered configuration: built-in defaults, an optional JSON file and
``DOCPARSER_*`` environment overrides, validated with jsonschema.
"""

from .environment import EnvironmentHandler
from .file_operations import FileOperations
from .manager import DEFAULT_CONFIG, ConfigManager, merge_configs
from .paths import ConfigPaths
from .schema_validation import CONFIG_SCHEMA, SchemaValidator

__all__ = [
    "ConfigManager",
    "ConfigPaths",
    "CONFIG_SCHEMA",
    "DEFAULT_CONFIG",
    "EnvironmentHandler",
    "FileOperations",
    "SchemaValidator",
    "merge_configs",
]
