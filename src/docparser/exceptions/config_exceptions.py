"""
Configuration-related exceptions for docparser.

Raised while layering defaults, ``docparser.config.json`` and ``DOCPARSER_*``
environment overrides. Each error renders with the offending file and a
numbered list of hints so the CLI can print it as-is.
"""

from typing import Iterable, List, Optional


def _numbered(title: str, lines: Iterable[str]) -> str:
    return f"\n\n{title}:" + "".join(f"\n  {n}. {line}" for n, line in enumerate(lines, 1))


class ConfigurationError(Exception):
    """Base exception for configuration-related errors.

    Attributes:
        config_file: Path of the configuration file involved, if any
        suggestions: Hints shown after the message
    """

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ) -> None:
        super().__init__(message)
        self.config_file = config_file
        self.suggestions = list(suggestions or [])

    def __str__(self) -> str:
        text = self.args[0] if self.args else ""
        if self.config_file:
            text += f" ({self.config_file})"
        if self.suggestions:
            text += _numbered("Suggestions", self.suggestions)
        return text


class ConfigurationFileNotFoundError(ConfigurationError):
    """An explicitly requested configuration file does not exist."""

    def __init__(self, message: str, config_file: Optional[str] = None) -> None:
        super().__init__(message, config_file, [
            "Pass an existing file to --config-path",
            "Omit --config-path to use docparser.config.json or the built-in defaults",
        ])


class ConfigurationValidationError(ConfigurationError):
    """The merged configuration does not satisfy the configuration schema.

    Attributes:
        validation_errors: One message per schema violation
        invalid_fields: Dotted paths of the offending keys
    """

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        validation_errors: Optional[List[str]] = None,
        invalid_fields: Optional[List[str]] = None
    ) -> None:
        self.validation_errors = list(validation_errors or [])
        self.invalid_fields = list(invalid_fields or [])
        hints = ["Known keys: source_paths, extraction.extended_forms, logging.level, logging.format"]
        if self.invalid_fields:
            hints.insert(0, f"Check {', '.join(self.invalid_fields)}")
        super().__init__(message, config_file, hints)

    def __str__(self) -> str:
        text = super().__str__()
        if self.validation_errors:
            text += _numbered("Schema violations", self.validation_errors)
        return text


class EnvironmentVariableError(ConfigurationError):
    """A ``DOCPARSER_*`` override holds a value that cannot be converted."""

    def __init__(self, message: str, variable_name: Optional[str] = None) -> None:
        hints = [f"Fix or unset {variable_name} in the environment or .env"] if variable_name else []
        super().__init__(message, None, hints)
        self.variable_name = variable_name
