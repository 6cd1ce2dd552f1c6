"""
Reference resolver for $ref resolution.

Resolves local JSON-pointer references ("#/components/schemas/User") to
the fragment they point at inside the loaded document.
"""

from __future__ import annotations

import logging
from typing import Any

from ..loader import SpecVersion, schema_ref_prefix

logger = logging.getLogger(__name__)


class ReferenceResolver:
    """Resolves $ref strings against the whole document."""

    def __init__(self, document: dict[str, Any], version: SpecVersion):
        """
        Initialize the resolver.

        Args:
            document: The loaded API description document
            version: Version family, used to build references to named schemas
        """
        self.document = document
        self.version = version

    def resolve(self, ref: str, from_context: str | None = None) -> dict[str, Any] | None:
        """
        Resolve a reference to its target fragment.

        A missing intermediate key or a target that is not a mapping
        resolves to None; the caller decides whether that is an error.

        Args:
            ref: The reference string
            from_context: Name of the schema holding the reference, for logs

        Returns:
            The target fragment, or None when it cannot be found
        """
        if not isinstance(ref, str) or not ref.startswith("#"):
            logger.debug("Unsupported reference %r (in %s)", ref, from_context)
            return None

        node: Any = self.document
        for segment in ref.split("/")[1:]:
            if segment == "":
                continue
            key = segment.replace("~1", "/").replace("~0", "~")
            if not isinstance(node, dict) or key not in node:
                logger.debug("Reference %s not found (in %s)", ref, from_context)
                return None
            node = node[key]

        if not isinstance(node, dict):
            return None
        return node

    @staticmethod
    def ref_name(ref: str) -> str:
        """Final segment of a reference: "#/definitions/User" -> "User"."""
        return ref.rsplit("/", 1)[-1].replace("~1", "/").replace("~0", "~")

    def ref_for_schema(self, name: str) -> str:
        """Canonical reference of a named schema."""
        escaped = name.replace("~", "~0").replace("/", "~1")
        return f"{schema_ref_prefix(self.version)}{escaped}"
