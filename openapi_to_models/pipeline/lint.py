"""
Advisory lint rules run over the schemas before generation.

Findings never stop generation. They are logged and recorded on the
generation context so the run report can summarize them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from .errors import ConfigError

if TYPE_CHECKING:
    from .context import GenerationContext

logger = logging.getLogger(__name__)


class LintSeverity(str, Enum):
    """Severity of a lint rule."""

    OFF = "off"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def parse(cls, value: str) -> LintSeverity:
        """Parse a severity, accepting "warn" as an alias of "warning"."""
        normalized = str(value).strip().lower()
        if normalized == "warn":
            return cls.WARNING
        try:
            return cls(normalized)
        except ValueError as e:
            raise ConfigError(f"Unknown lint severity: {value} (expected: off, warning, error)") from e


class LintRuleId(str, Enum):
    """Identifiers of the lint rules."""

    MISSING_TYPE = "missing_type"  # property with neither type nor $ref
    SUSPICIOUS_ID_FIELD = "suspicious_id_field"  # id-like property neither required nor nullable
    MISSING_REF_TARGET = "missing_ref_target"  # $ref that resolves to nothing
    TYPE_INCONSISTENCY = "type_inconsistency"  # format that does not fit the type
    EMPTY_OBJECT = "empty_object"  # no properties and no additionalProperties
    ARRAY_WITHOUT_ITEMS = "array_without_items"
    EMPTY_ENUM = "empty_enum"

    @classmethod
    def parse(cls, value: str) -> LintRuleId:
        """Parse a rule id written with underscores or hyphens."""
        normalized = str(value).strip().lower().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError as e:
            raise ConfigError(f"Unknown lint rule: {value}") from e


DEFAULT_SEVERITIES: dict[LintRuleId, LintSeverity] = {
    rule: (LintSeverity.ERROR if rule is LintRuleId.MISSING_REF_TARGET else LintSeverity.WARNING) for rule in LintRuleId
}


@dataclass
class LintConfig:
    """Severity of each lint rule."""

    rules: dict[LintRuleId, LintSeverity] = field(default_factory=lambda: dict(DEFAULT_SEVERITIES))

    @classmethod
    def default(cls) -> LintConfig:
        return cls()

    @classmethod
    def disabled(cls) -> LintConfig:
        return cls(rules={rule: LintSeverity.OFF for rule in LintRuleId})

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> LintConfig:
        """Build a lint configuration from its YAML form.

        Accepted shape::

            enabled: true
            rules:
              missing_type: warning
              suspicious-id-field: off
              missing_ref_target:
                severity: error

        Args:
            d: The "lint" section of the configuration file

        Returns:
            LintConfig with defaults for rules that are not mentioned

        Raises:
            ConfigError: If a rule id or severity is unknown
        """
        if not d:
            return cls.default()
        if not isinstance(d, dict):
            raise ConfigError("The 'lint' section must be a mapping")
        if d.get("enabled") is False:
            return cls.disabled()

        config = cls.default()
        for rule_name, value in (d.get("rules") or {}).items():
            rule = LintRuleId.parse(rule_name)
            if isinstance(value, dict):
                value = value.get("severity", DEFAULT_SEVERITIES[rule].value)
            # YAML reads a bare `off` as False
            if value is False:
                value = "off"
            config.rules[rule] = LintSeverity.parse(value)
        return config

    def to_dict(self) -> dict[str, Any]:
        return {"rules": {rule.value: severity.value for rule, severity in self.rules.items()}}

    def severity_of(self, rule: LintRuleId) -> LintSeverity:
        return self.rules.get(rule, DEFAULT_SEVERITIES[rule])

    def is_enabled(self, rule: LintRuleId) -> bool:
        return self.severity_of(rule) is not LintSeverity.OFF


@dataclass
class Diagnostic:
    """A warning or error collected during a run."""

    severity: LintSeverity
    message: str
    rule: LintRuleId | None = None
    schema_name: str | None = None


class SchemaLinter:
    """Runs the lint rules over the schemas of a document."""

    ID_SUFFIXES = ("_id", "Id")
    INTEGER_FORMATS = {"int32", "int64"}
    NUMBER_FORMATS = {"float", "double"}
    TYPED_KEYS = ("type", "$ref", "enum", "allOf", "oneOf", "anyOf")

    def __init__(self, context: GenerationContext, config: LintConfig):
        self.context = context
        self.config = config

    def run(self, schemas: dict[str, Any]) -> None:
        """Check every schema, then look for dangling references."""
        self.validate_schemas(schemas)
        self.check_missing_refs(schemas)

    def validate_schemas(self, schemas: dict[str, Any]) -> None:
        for schema_name, schema in schemas.items():
            schema = schema if isinstance(schema, dict) else {}
            if "enum" in schema:
                if not schema["enum"]:
                    self.report(LintRuleId.EMPTY_ENUM, f'Enum "{schema_name}" has no values.', schema_name)
                else:
                    continue

            is_object = schema.get("type", "object") == "object" and "$ref" not in schema
            if is_object and not any(key in schema for key in ("allOf", "oneOf", "anyOf")):
                additional = schema.get("additionalProperties")
                if not schema.get("properties") and (additional is None or additional is False):
                    self.report(
                        LintRuleId.EMPTY_OBJECT,
                        f'Schema "{schema_name}" is an empty object (no properties and no additionalProperties).',
                        schema_name,
                    )

            required = schema.get("required") or []
            for prop_name, prop_schema in (schema.get("properties") or {}).items():
                self._check_property(
                    schema_name, prop_name, prop_schema if isinstance(prop_schema, dict) else {}, prop_name in required
                )

    def _check_property(self, schema_name: str, prop_name: str, prop: dict[str, Any], is_required: bool) -> None:
        if not any(key in prop for key in self.TYPED_KEYS):
            self.report(
                LintRuleId.MISSING_TYPE,
                f'Field "{prop_name}" in schema "{schema_name}" has no type and no $ref; it will be typed as Any.',
                schema_name,
            )

        if prop_name == "id" or prop_name.endswith(self.ID_SUFFIXES):
            if not prop.get("nullable", False) and not is_required:
                self.report(
                    LintRuleId.SUSPICIOUS_ID_FIELD,
                    f'Field "{prop_name}" in schema "{schema_name}" looks like an identifier '
                    "but is neither required nor nullable.",
                    schema_name,
                )

        prop_type = prop.get("type")
        prop_format = prop.get("format")
        if prop_type == "integer" and prop_format is not None and prop_format not in self.INTEGER_FORMATS:
            self.report(
                LintRuleId.TYPE_INCONSISTENCY,
                f'Field "{prop_name}" in schema "{schema_name}" is an integer with format "{prop_format}" '
                "(only int32 or int64 are expected).",
                schema_name,
            )
        if prop_type == "number" and prop_format is not None and prop_format not in self.NUMBER_FORMATS:
            self.report(
                LintRuleId.TYPE_INCONSISTENCY,
                f'Field "{prop_name}" in schema "{schema_name}" is a number with format "{prop_format}" '
                "(only float or double are expected).",
                schema_name,
            )

        if prop_type == "array" and "items" not in prop:
            self.report(
                LintRuleId.ARRAY_WITHOUT_ITEMS,
                f'Field "{prop_name}" in schema "{schema_name}" is an array without items; it will be typed as list[Any].',
                schema_name,
            )

    def check_missing_refs(self, schemas: dict[str, Any]) -> None:
        """Report every $ref that cannot be resolved, once per reference."""
        if not self.config.is_enabled(LintRuleId.MISSING_REF_TARGET):
            return
        reported: set[str] = set()
        for schema_name, schema in schemas.items():
            self._check_refs(schema or {}, schema_name, reported)

    def _check_refs(self, fragment: Any, schema_name: str, reported: set[str]) -> None:
        if not isinstance(fragment, dict):
            return
        ref = fragment.get("$ref")
        if isinstance(ref, str) and ref not in reported and self.context.resolver.resolve(ref, schema_name) is None:
            reported.add(ref)
            self.report(
                LintRuleId.MISSING_REF_TARGET,
                f'No schema found for reference "{ref}" (in schema "{schema_name}").',
                schema_name,
            )

        for prop in (fragment.get("properties") or {}).values():
            self._check_refs(prop, schema_name, reported)
        self._check_refs(fragment.get("items"), schema_name, reported)
        self._check_refs(fragment.get("additionalProperties"), schema_name, reported)
        for key in ("allOf", "oneOf", "anyOf"):
            for item in fragment.get(key) or []:
                self._check_refs(item, schema_name, reported)

    def report(self, rule: LintRuleId, message: str, schema_name: str | None = None) -> None:
        """Record a finding at the configured severity; disabled rules are ignored."""
        severity = self.config.severity_of(rule)
        if severity is LintSeverity.OFF:
            return
        self.context.add_diagnostic(Diagnostic(severity, f"[{rule.value}] {message}", rule, schema_name))
