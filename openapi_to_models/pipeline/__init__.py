"""
Pipeline - OpenAPI / Swagger schemas to Python models.

1. Phase 1 (Parser): Classify schema fragments into typed nodes
2. Phase 2 (Analyzer): Resolve references, merge allOf, synthesize unions, build IR
3. Phase 3 (Backend): Render IR with the selected style
4. Phase 4 (Merger): Write the generated region into new or existing modules
5. Phase 5 (Cache): Remember schema hashes for changed-only runs
"""

from __future__ import annotations

from .backends import ModelBackend, StyleRegistry
from .cache import GenerationCache
from .config import GenerationStyle, GeneratorConfig, SchemaOverride, load_config
from .context import GenerationContext
from .errors import (
    ConfigError,
    GenerationError,
    SchemaGenerationError,
    SpecStructureError,
    UnknownStyleError,
)
from .generator import GenerationResult, PipelineGenerator, SchemaResult
from .lint import LintConfig, LintRuleId, LintSeverity
from .merger import AtomicWriter, CodeMergeError, MarkerMerger

__all__ = [
    "PipelineGenerator",
    "GenerationResult",
    "SchemaResult",
    "GenerationContext",
    "GenerationCache",
    "GeneratorConfig",
    "GenerationStyle",
    "SchemaOverride",
    "load_config",
    "LintConfig",
    "LintRuleId",
    "LintSeverity",
    "ModelBackend",
    "StyleRegistry",
    "MarkerMerger",
    "AtomicWriter",
    "CodeMergeError",
    "GenerationError",
    "SpecStructureError",
    "SchemaGenerationError",
    "ConfigError",
    "UnknownStyleError",
]
