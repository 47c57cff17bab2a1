"""
Configuration file paths and constants for docparser.

This module provides the ConfigPaths dataclass containing default paths
and constants used throughout the configuration system.
"""

from dataclasses import dataclass


@dataclass
class ConfigPaths:
    """Configuration file paths and constants."""

    DEFAULT_CONFIG_FILE: str = "docparser.config.json"
    ENV_FILE: str = ".env"
    ENV_PREFIX: str = "DOCPARSER_"
