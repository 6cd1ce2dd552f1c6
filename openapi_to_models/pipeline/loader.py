"""
Loading of Swagger 2.0 / OpenAPI 3 documents.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from .errors import SpecStructureError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


class SpecVersion(Enum):
    """Version family of an API description document."""

    SWAGGER2 = "swagger2"  # schemas under "definitions"
    OPENAPI3 = "openapi3"  # schemas under "components.schemas"


def load_spec(path: str | Path) -> dict[str, Any]:
    """
    Load a JSON or YAML document from disk.

    The format is chosen from the file extension; unknown extensions are
    parsed as YAML, which also accepts JSON.

    Args:
        path: Path of the document

    Returns:
        The loaded document

    Raises:
        FileNotFoundError: If the file does not exist
        SpecStructureError: If the file cannot be parsed or is not a mapping
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        text = f.read()

    try:
        if path.suffix.lower() == ".json":
            document = json.loads(text)
        else:
            document = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SpecStructureError(f"Could not parse {path}: {e}") from e

    if not isinstance(document, dict):
        raise SpecStructureError(f"{path} does not contain an API description object")
    logger.debug("Loaded %s", path)
    return document


def detect_version(document: dict[str, Any]) -> SpecVersion:
    """Detect whether the document is Swagger 2.0 or OpenAPI 3."""
    if "swagger" in document:
        return SpecVersion.SWAGGER2
    if "openapi" in document:
        return SpecVersion.OPENAPI3
    raise SpecStructureError("Unknown document version: expected a 'swagger' or 'openapi' key")


def extract_schemas(document: dict[str, Any], version: SpecVersion) -> dict[str, Any]:
    """Return the named schemas of the document (may be empty)."""
    if version is SpecVersion.SWAGGER2:
        schemas = document.get("definitions")
    else:
        schemas = (document.get("components") or {}).get("schemas")
    if schemas is None:
        return {}
    if not isinstance(schemas, dict):
        raise SpecStructureError("Schemas must be a mapping of name to schema")
    return schemas


def schema_ref_prefix(version: SpecVersion) -> str:
    """Reference prefix of named schemas for the given version."""
    if version is SpecVersion.SWAGGER2:
        return "#/definitions/"
    return "#/components/schemas/"
