"""
Pipeline orchestration.

Runs one generation pass over a loaded document: lint, analyze each
schema, render it with the selected style, merge it into its artifact and
update the incremental cache.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..utils import to_module_name
from .analyzer import EnumDef, ModelDef, SchemaAnalyzer
from .backends import ModelBackend, StyleRegistry
from .cache import GenerationCache
from .config import GeneratorConfig
from .context import GenerationContext
from .errors import SchemaGenerationError, SpecStructureError
from .lint import Diagnostic, SchemaLinter
from .loader import detect_version
from .merger import ArtifactScanner, AtomicWriter, MarkerMerger, read_text

logger = logging.getLogger(__name__)


@dataclass
class SchemaResult:
    """Outcome of one schema."""

    schema_name: str
    action: str  # "created", "updated", "unchanged", "skipped" or "failed"
    path: Path | None = None
    is_enum: bool = False
    error: Exception | None = None

    @property
    def success(self) -> bool:
        return self.action != "failed"


@dataclass
class GenerationResult:
    """Report of a generation run."""

    output_directory: Path
    generated_files: list[Path] = field(default_factory=list)
    schemas_processed: int = 0
    enums_processed: int = 0
    files_created: int = 0
    files_updated: int = 0
    files_unchanged: int = 0
    files_deleted: list[Path] = field(default_factory=list)
    schema_results: list[SchemaResult] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)
    errors: list[Diagnostic] = field(default_factory=list)

    @property
    def failures(self) -> list[SchemaResult]:
        return [r for r in self.schema_results if not r.success]

    @property
    def success(self) -> bool:
        return not self.failures

    def add(self, schema_result: SchemaResult) -> None:
        self.schema_results.append(schema_result)
        if not schema_result.success or schema_result.action == "skipped":
            return
        self.schemas_processed += 1
        if schema_result.is_enum:
            self.enums_processed += 1
        if schema_result.path is not None:
            self.generated_files.append(schema_result.path)
        if schema_result.action == "created":
            self.files_created += 1
        elif schema_result.action == "updated":
            self.files_updated += 1
        elif schema_result.action == "unchanged":
            self.files_unchanged += 1


class PipelineGenerator:
    """Generates one Python module per schema of a document."""

    def __init__(
        self,
        document: dict[str, Any],
        config: GeneratorConfig | None = None,
        registry: StyleRegistry | None = None,
    ):
        """
        Initialize the generator.

        Args:
            document: The loaded Swagger 2.0 / OpenAPI 3 document
            config: Generation configuration
            registry: Available styles; the built-in ones by default
        """
        self.document = document
        self.config = config or GeneratorConfig()
        self.registry = registry or StyleRegistry.default()
        self.context = GenerationContext(document, detect_version(document), self.config)
        self.analyzer = SchemaAnalyzer(self.context)
        self.backend: ModelBackend = self.registry.create(self.config.style, self.config)
        self.merger = MarkerMerger()
        self.writer = AtomicWriter()
        self.scanner = ArtifactScanner()

    @property
    def output_dir(self) -> Path:
        return Path(self.config.output_dir)

    @property
    def project_dir(self) -> Path:
        return Path(self.config.project_dir)

    def generate(self) -> GenerationResult:
        """
        Run the generation.

        Returns:
            The run report

        Raises:
            SpecStructureError: If the document declares no schemas
            SchemaGenerationError: In fail-fast mode, when a schema fails
        """
        schemas = self.context.schemas
        if not schemas:
            raise SpecStructureError("The document declares no schemas")

        result = GenerationResult(output_directory=self.output_dir)
        cache = GenerationCache.load(self.project_dir)

        if self.config.changed_only:
            to_process = {name: schema for name, schema in schemas.items() if cache.has_changed(name, schema)}
            logger.info("%d of %d schema(s) changed since the last run", len(to_process), len(schemas))
            result.files_deleted = self._delete_removed(cache, set(schemas))
        else:
            # Hashes of removed schemas stay until a changed-only run deletes their modules
            to_process = dict(schemas)

        SchemaLinter(self.context, self.config.lint).run(to_process)

        existing = self.scanner.scan(self.output_dir, self.project_dir)
        ordered = sorted(to_process, key=lambda n: not self.context.is_enum(to_process[n]))

        for name in ordered:
            schema_result = self._generate_schema(name, to_process[name], existing)
            result.add(schema_result)
            if schema_result.success:
                cache.record_hash(name, to_process[name])
                continue

            cache.remove_hash(name)
            logger.error('Error while processing schema "%s": %s', name, schema_result.error)
            if self.config.fail_fast:
                result.warnings = self.context.warnings
                result.errors = self.context.errors
                raise SchemaGenerationError(name, schema_result.error) from schema_result.error

        cache.save()
        result.warnings = self.context.warnings
        result.errors = self.context.errors
        logger.info(
            "Generated %d schema(s) (%d enum(s)): %d created, %d updated, %d unchanged",
            result.schemas_processed,
            result.enums_processed,
            result.files_created,
            result.files_updated,
            result.files_unchanged,
        )
        return result

    def render_schema(self, schema_name: str) -> str | None:
        """Generated region of one schema, without touching the disk."""
        model = self.analyzer.analyze(schema_name, self.context.schemas[schema_name])
        if model is None:
            return None
        return self.backend.render_region(model, self._model_imports(model))

    def _generate_schema(self, name: str, schema: Any, existing: dict[str, Path]) -> SchemaResult:
        try:
            model = self.analyzer.analyze(name, schema)
            if model is None:
                return SchemaResult(name, "skipped")

            module = to_module_name(name)
            region = self.backend.render_region(model, self._model_imports(model))
            path = existing.get(module) or self.output_dir / f"{module}.py"
            previous = read_text(path) if path.exists() else None
            content = self.merger.write(region, previous, self.backend.preamble(), label=str(path))

            if content == previous:
                action = "unchanged"
            else:
                self.writer.write(path, content, validate=self.config.validate_before_write)
                action = "created" if previous is None else "updated"
            logger.debug("%s %s", action.capitalize(), path)
            return SchemaResult(name, action, path, is_enum=isinstance(model, EnumDef))
        except Exception as e:
            return SchemaResult(name, "failed", error=e)

    def _model_imports(self, model: ModelDef) -> dict[str, str]:
        return {to_module_name(dep): self.context.class_name_for(dep) for dep in model.dependencies}

    def _delete_removed(self, cache: GenerationCache, current: set[str]) -> list[Path]:
        """Delete the artifacts of schemas that disappeared from the document and forget their hashes."""
        deleted = []
        for name in sorted(cache.deleted_since(current)):
            cache.remove_hash(name)
            path = self.output_dir / f"{to_module_name(name)}.py"
            if path.exists() and self.merger.has_markers(read_text(path)):
                path.unlink()
                deleted.append(path)
                logger.info('Deleted %s (schema "%s" was removed)', path, name)
        return deleted
