"""
Per-run generation context.

Holds everything the components share during one run: the document and
its schemas, the reference resolver, the class-name registry and the
collected diagnostics. A new context is created for every run and passed
explicitly to the components that need it.
"""

from __future__ import annotations

import logging
from typing import Any

from ..utils import to_pascal_case
from .analyzer.ir_nodes import EnumDef
from .analyzer.reference_resolver import ReferenceResolver
from .config import GeneratorConfig
from .lint import Diagnostic, LintSeverity
from .loader import SpecVersion, extract_schemas, schema_ref_prefix
from .schema_ast import SchemaParser

logger = logging.getLogger(__name__)


class GenerationContext:
    """Shared state of one generation run."""

    def __init__(self, document: dict[str, Any], version: SpecVersion, config: GeneratorConfig | None = None):
        self.document = document
        self.version = version
        self.config = config or GeneratorConfig()
        self.schemas: dict[str, Any] = extract_schemas(document, version)
        self.resolver = ReferenceResolver(document, version)
        self.parser = SchemaParser()
        self.diagnostics: list[Diagnostic] = []

        # schema name -> class name, for every named schema
        self.class_names: dict[str, str] = {}
        # Every class name handed out so far (named schemas and inline enums)
        self.registered_names: set[str] = set()
        # (owner class, property path) -> synthesized inline enum
        self._inline_enums: dict[tuple[str, str], EnumDef] = {}
        # owner class -> inline enums in registration order
        self._inline_enums_by_owner: dict[str, list[EnumDef]] = {}

        for name in self.schemas:
            override = self.config.override_for(name)
            class_name = override.class_name if override and override.class_name else to_pascal_case(name)
            self.class_names[name] = class_name
            self.registered_names.add(class_name)

    def class_name_for(self, schema_name: str) -> str:
        return self.class_names.get(schema_name) or to_pascal_case(schema_name)

    def schema_name_for_ref(self, ref: str) -> str | None:
        """Name of the named schema a reference points at, if it is one."""
        prefix = schema_ref_prefix(self.version)
        if not ref.startswith(prefix):
            return None
        name = self.resolver.ref_name(ref)
        if "/" in ref[len(prefix) :] or name not in self.schemas:
            return None
        return name

    def class_name_for_ref(self, ref: str) -> str:
        """Class name for a reference; unresolved references use the PascalCase final segment."""
        schema_name = self.schema_name_for_ref(ref)
        if schema_name is not None:
            return self.class_name_for(schema_name)
        return to_pascal_case(self.resolver.ref_name(ref))

    def ref_for(self, schema_name: str) -> str:
        return self.resolver.ref_for_schema(schema_name)

    def is_enum(self, schema: dict[str, Any] | None) -> bool:
        return isinstance(schema, dict) and bool(schema.get("enum"))

    def unique_name(self, base: str) -> str:
        """Register a class name, adding 1, 2, ... on collision."""
        candidate = base
        counter = 1
        while candidate in self.registered_names:
            candidate = f"{base}{counter}"
            counter += 1
        self.registered_names.add(candidate)
        return candidate

    def inline_enum(self, owner: str, path: str) -> EnumDef | None:
        return self._inline_enums.get((owner, path))

    def register_inline_enum(self, owner: str, path: str, enum_def: EnumDef) -> EnumDef:
        self._inline_enums[(owner, path)] = enum_def
        self._inline_enums_by_owner.setdefault(owner, []).append(enum_def)
        return enum_def

    def inline_enums_for(self, owner: str) -> list[EnumDef]:
        return list(self._inline_enums_by_owner.get(owner, []))

    def add_diagnostic(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if diagnostic.severity is LintSeverity.ERROR:
            logger.error(diagnostic.message)
        else:
            logger.warning(diagnostic.message)

    def warn(self, message: str, schema_name: str | None = None) -> None:
        self.add_diagnostic(Diagnostic(LintSeverity.WARNING, message, schema_name=schema_name))

    def error(self, message: str, schema_name: str | None = None) -> None:
        self.add_diagnostic(Diagnostic(LintSeverity.ERROR, message, schema_name=schema_name))

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is LintSeverity.WARNING]

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is LintSeverity.ERROR]
