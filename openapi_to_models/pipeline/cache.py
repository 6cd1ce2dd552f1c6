"""
Incremental-generation cache.

Stores one content hash per schema so that a run in changed-only mode can
skip schemas whose fragment did not change since the previous run.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CACHE_FILE_NAME = ".openapi_to_models.cache"


def _normalize(value: Any) -> Any:
    """Recursively sort mapping keys so that key order never changes the hash."""
    if isinstance(value, dict):
        return {str(k): _normalize(value[k]) for k in sorted(value, key=str)}
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    return value


def compute_schema_hash(schema: Any) -> str:
    """SHA-256 hex digest of the normalized JSON form of a fragment."""
    encoded = json.dumps(_normalize(schema), sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class GenerationCache:
    """Schema name -> content hash, persisted as JSON in the project directory."""

    def __init__(self, path: Path, schema_hashes: dict[str, str] | None = None):
        self.path = path
        self.schema_hashes: dict[str, str] = dict(schema_hashes or {})

    @classmethod
    def load(cls, project_dir: str | Path) -> GenerationCache:
        """
        Load the cache of a project.

        A missing or unreadable cache file yields an empty cache, which
        makes every schema count as changed.

        Args:
            project_dir: Directory holding the cache file

        Returns:
            The loaded cache
        """
        path = Path(project_dir) / CACHE_FILE_NAME
        if not path.exists():
            return cls(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            hashes = data.get("schemaHashes", {}) if isinstance(data, dict) else {}
            if not isinstance(hashes, dict):
                raise ValueError("schemaHashes is not a mapping")
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable cache file %s: %s", path, e)
            return cls(path)
        return cls(path, {str(k): str(v) for k, v in hashes.items()})

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"schemaHashes": self.schema_hashes}, f, indent=2, sort_keys=True)
            f.write("\n")
        logger.debug("Saved cache with %d schema(s) to %s", len(self.schema_hashes), self.path)

    def has_changed(self, schema_name: str, schema: Any) -> bool:
        """True when the schema is unknown or its hash differs from the cached one."""
        return self.schema_hashes.get(schema_name) != compute_schema_hash(schema)

    def record_hash(self, schema_name: str, schema: Any) -> None:
        self.schema_hashes[schema_name] = compute_schema_hash(schema)

    def remove_hash(self, schema_name: str) -> None:
        self.schema_hashes.pop(schema_name, None)

    @property
    def cached_schemas(self) -> set[str]:
        return set(self.schema_hashes)

    def deleted_since(self, current_names: set[str] | list[str]) -> set[str]:
        """Schemas present in the cache but no longer in the document."""
        return self.cached_schemas - set(current_names)
