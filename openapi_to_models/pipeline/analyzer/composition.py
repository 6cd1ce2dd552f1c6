"""
allOf composition.

Flattens an allOf list into one synthetic object fragment that is then
processed exactly like an ordinary object schema.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..context import GenerationContext

logger = logging.getLogger(__name__)


class CompositionResolver:
    """Merges allOf fragments into a single object fragment."""

    def __init__(self, context: GenerationContext):
        self.context = context

    def merge_all_of(
        self,
        schema_name: str | None,
        fragments: list[dict[str, Any]],
        description: str | None = None,
        report: bool = True,
    ) -> dict[str, Any]:
        """
        Merge the fragments of an allOf.

        Referenced fragments are resolved and, when they are allOf
        compositions themselves, flattened recursively. The visited set
        covers the active recursion path only: a reference seen twice on
        the same path is a cycle and that branch is skipped with a warning,
        while the same reference reached through two sibling branches is
        merged twice.

        Properties are merged last-write-wins; required lists are
        concatenated without duplicates.

        Args:
            schema_name: Name of the composite schema (seeds the visited set)
            fragments: The allOf entries
            description: Description of the composite schema, carried over
            report: Record cycle, unresolved reference and empty result warnings on
                the context; when False they are only logged at DEBUG level

        Returns:
            A fragment of the form {"type": "object", "properties": ..., "required": [...]}
        """
        properties: dict[str, Any] = {}
        required: list[str] = []
        path: set[str] = {self.context.ref_for(schema_name)} if schema_name else set()

        self._collect(fragments, properties, required, path, schema_name, report)

        if not properties:
            self._warn(f'allOf composition "{schema_name}" has no properties after merging.', schema_name, report)

        merged: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            merged["required"] = required
        if description:
            merged["description"] = description
        return merged

    def _collect(
        self,
        fragments: list[dict[str, Any]],
        properties: dict[str, Any],
        required: list[str],
        path: set[str],
        schema_name: str | None,
        report: bool,
    ) -> None:
        for fragment in fragments:
            if not isinstance(fragment, dict):
                continue

            ref = fragment.get("$ref")
            if isinstance(ref, str):
                if ref in path:
                    self._warn(
                        f'Cyclic allOf reference "{ref}" in schema "{schema_name}"; skipping this branch.',
                        schema_name,
                        report,
                    )
                    continue
                target = self.context.resolver.resolve(ref, schema_name)
                if target is None:
                    self._warn(f'allOf reference "{ref}" in schema "{schema_name}" cannot be resolved.', schema_name, report)
                    continue
                path.add(ref)
                try:
                    self._absorb(target, properties, required, path, schema_name, report)
                finally:
                    path.discard(ref)
            else:
                self._absorb(fragment, properties, required, path, schema_name, report)

    def _absorb(
        self,
        fragment: dict[str, Any],
        properties: dict[str, Any],
        required: list[str],
        path: set[str],
        schema_name: str | None,
        report: bool,
    ) -> None:
        nested = fragment.get("allOf")
        if isinstance(nested, list):
            self._collect(nested, properties, required, path, schema_name, report)

        for name, prop in (fragment.get("properties") or {}).items():
            if name in properties and properties[name] != prop:
                logger.debug('Property "%s" of "%s" redefined in allOf; last definition wins', name, schema_name)
            properties[name] = prop

        for name in fragment.get("required") or []:
            if name not in required:
                required.append(name)

    def _warn(self, message: str, schema_name: str | None, report: bool) -> None:
        if report:
            self.context.warn(message, schema_name)
        else:
            logger.debug(message)
