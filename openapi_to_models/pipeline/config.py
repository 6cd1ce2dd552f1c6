"""
Configuration for the generation pipeline.

Configuration comes from an optional YAML file (``openapi_to_models.yaml`` in
the project directory by default). Keys may be written in snake_case or in
camelCase. Command line options override file values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .lint import LintConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "openapi_to_models.yaml"


class GenerationStyle(str, Enum):
    """Built-in rendering styles."""

    DATACLASS = "dataclass"  # plain @dataclass with from_json/to_json
    DATACLASSES_JSON = "dataclasses_json"  # @dataclass_json annotated dataclass
    PYDANTIC = "pydantic"  # pydantic BaseModel


def _get(d: dict[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    """Read a key written either in snake_case or camelCase."""
    if snake in d:
        return d[snake]
    return d.get(camel, default)


@dataclass
class SchemaOverride:
    """Per-schema customization."""

    # Class name to use instead of the PascalCase schema name
    class_name: str | None = None

    # JSON property name -> Python attribute name
    field_names: dict[str, str] = field(default_factory=dict)

    # Schema primitive type ("string", "integer", ...) -> Python type name
    type_mapping: dict[str, str] = field(default_factory=dict)

    # Emit explicit serialization-key annotations for this schema
    use_json_key: bool | None = None

    @staticmethod
    def from_dict(d: dict[str, Any]) -> SchemaOverride:
        if not isinstance(d, dict):
            raise ConfigError("Schema overrides must be mappings")
        return SchemaOverride(
            class_name=_get(d, "class_name", "className"),
            field_names=dict(_get(d, "field_names", "fieldNames", {}) or {}),
            type_mapping=dict(_get(d, "type_mapping", "typeMapping", {}) or {}),
            use_json_key=_get(d, "use_json_key", "useJsonKey"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.class_name is not None:
            result["className"] = self.class_name
        if self.field_names:
            result["fieldNames"] = dict(self.field_names)
        if self.type_mapping:
            result["typeMapping"] = dict(self.type_mapping)
        if self.use_json_key is not None:
            result["useJsonKey"] = self.use_json_key
        return result


@dataclass
class GeneratorConfig:
    """Configuration options for a generation run."""

    # Name of the rendering style in the style registry
    style: str = GenerationStyle.DATACLASS.value

    # Directory receiving the generated modules
    output_dir: str = "models"

    # Directory scanned for existing artifacts; holds the cache file
    project_dir: str = "."

    # Emit serialization-key annotations for every field
    use_json_key: bool = False

    # Emit docstrings and field comments from description/example
    generate_docs: bool = True

    # Only regenerate schemas whose fragment changed since the last run
    changed_only: bool = False

    # Abort the run on the first failing schema
    fail_fast: bool = True

    # Check that written modules parse as Python
    validate_before_write: bool = True

    lint: LintConfig = field(default_factory=LintConfig)

    schema_overrides: dict[str, SchemaOverride] = field(default_factory=dict)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> GeneratorConfig:
        """Create a config from a dictionary."""
        if not isinstance(d, dict):
            raise ConfigError("Configuration must be a mapping")
        config = GeneratorConfig()

        style = _get(d, "style", "defaultStyle")
        if style is not None:
            config.style = str(style.value if isinstance(style, Enum) else style)

        for snake, camel in (
            ("output_dir", "outputDir"),
            ("project_dir", "projectDir"),
        ):
            value = _get(d, snake, camel)
            if value is not None:
                setattr(config, snake, str(value))

        for snake, camel in (
            ("use_json_key", "useJsonKey"),
            ("generate_docs", "generateDocs"),
            ("changed_only", "changedOnly"),
            ("fail_fast", "failFast"),
            ("validate_before_write", "validateBeforeWrite"),
        ):
            value = _get(d, snake, camel)
            if value is not None:
                setattr(config, snake, bool(value))

        if "lint" in d:
            config.lint = LintConfig.from_dict(d["lint"])

        overrides = _get(d, "schema_overrides", "schemas", {}) or {}
        if not isinstance(overrides, dict):
            raise ConfigError("The 'schemas' section must be a mapping of schema name to overrides")
        config.schema_overrides = {name: SchemaOverride.from_dict(o or {}) for name, o in overrides.items()}
        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a dictionary."""
        return {
            "style": self.style,
            "output_dir": self.output_dir,
            "project_dir": self.project_dir,
            "use_json_key": self.use_json_key,
            "generate_docs": self.generate_docs,
            "changed_only": self.changed_only,
            "fail_fast": self.fail_fast,
            "validate_before_write": self.validate_before_write,
            "lint": self.lint.to_dict(),
            "schemas": {name: o.to_dict() for name, o in self.schema_overrides.items()},
        }

    def override_for(self, schema_name: str) -> SchemaOverride | None:
        return self.schema_overrides.get(schema_name)

    def use_json_key_for(self, schema_name: str) -> bool:
        """Per-schema setting wins over the run-wide one."""
        override = self.override_for(schema_name)
        if override is not None and override.use_json_key is not None:
            return override.use_json_key
        return self.use_json_key


def load_config(config_path: str | Path | None = None, project_dir: str | Path = ".") -> GeneratorConfig:
    """
    Load the configuration file.

    Args:
        config_path: Explicit configuration file; must exist when given
        project_dir: Directory searched for the default configuration file

    Returns:
        The parsed configuration, or defaults when no file is found

    Raises:
        ConfigError: If the file is missing (explicit path) or invalid
    """
    if config_path is None:
        path = Path(project_dir) / DEFAULT_CONFIG_FILE
        if not path.exists():
            logger.debug("No configuration file at %s, using defaults", path)
            return GeneratorConfig(project_dir=str(project_dir))
    else:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse configuration file {path}: {e}") from e

    logger.info("Loaded configuration from %s", path)
    config = GeneratorConfig.from_dict(data)
    if _get(data, "project_dir", "projectDir") is None:
        config.project_dir = str(project_dir)
    return config
