"""OpenAPI to Models

Generate Python model modules (dataclasses, dataclasses-json or pydantic)
from the schemas of Swagger 2.0 and OpenAPI 3 documents, with incremental
regeneration and preservation of hand-written code around the generated
region.
"""

__version__ = "1.0.0"

from .pipeline.loader import SpecVersion, detect_version, extract_schemas, load_spec
from .pipeline import (
    GenerationResult,
    GeneratorConfig,
    PipelineGenerator,
    StyleRegistry,
    load_config,
)

__all__ = [
    "PipelineGenerator",
    "GenerationResult",
    "GeneratorConfig",
    "StyleRegistry",
    "SpecVersion",
    "load_config",
    "load_spec",
    "detect_version",
    "extract_schemas",
]
