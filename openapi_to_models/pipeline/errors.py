"""
Exceptions raised by the generation pipeline.
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for errors that stop a generation run."""

    pass


class SpecStructureError(GenerationError):
    """Raised when the input document cannot be used at all.

    This happens when:
    - The document is neither Swagger 2.0 nor OpenAPI 3
    - The document declares no schemas
    """

    pass


class SchemaGenerationError(GenerationError):
    """Raised in fail-fast mode when a single schema cannot be generated."""

    def __init__(self, schema_name: str, cause: BaseException):
        super().__init__(f"Failed to generate schema '{schema_name}': {cause}")
        self.schema_name = schema_name
        self.cause = cause


class ConfigError(GenerationError):
    """Raised when a configuration file or value is invalid."""

    pass


class UnknownStyleError(ConfigError):
    """Raised when a style name is not present in the style registry."""

    def __init__(self, name: str, available: list[str]):
        super().__init__(f"Unknown generation style '{name}'. Available styles: {', '.join(sorted(available))}")
        self.name = name
        self.available = available
