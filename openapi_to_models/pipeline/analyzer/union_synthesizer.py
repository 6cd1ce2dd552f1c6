"""
oneOf / anyOf synthesis.

Turns a oneOf/anyOf schema into a discriminated union when the variants
can be told apart by a discriminator property, and into an opaque value
otherwise. Synthesis never fails: every fragment shape yields one of the
two descriptors.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ...utils import to_python_identifier
from ..schema_ast import UnionNode
from .composition import CompositionResolver
from .ir_nodes import OpaqueDef, UnionDef, UnionVariant

if TYPE_CHECKING:
    from ..context import GenerationContext

logger = logging.getLogger(__name__)


class UnionSynthesizer:
    """Builds union descriptors for oneOf/anyOf schemas."""

    def __init__(self, context: GenerationContext, composition: CompositionResolver | None = None):
        self.context = context
        self.composition = composition or CompositionResolver(context)

    def synthesize(self, schema_name: str, schema: dict[str, Any] | UnionNode) -> UnionDef | OpaqueDef:
        """
        Build the descriptor of a oneOf/anyOf schema.

        Variants are collected from the explicit discriminator mapping
        first, then inferred from variants whose discriminator property is
        an enum (or const) with exactly one literal. The first variant wins
        when two share a token.

        Args:
            schema_name: Name of the schema
            schema: The raw schema or its parsed node

        Returns:
            UnionDef when at least one variant is usable, OpaqueDef otherwise
        """
        node = schema if isinstance(schema, UnionNode) else self.context.parser.parse(schema)
        class_name = self.context.class_name_for(schema_name)
        if not isinstance(node, UnionNode):
            return OpaqueDef(name=class_name, original_name=schema_name, doc=node.description)

        variants: list[UnionVariant] = []
        if node.discriminator:
            self._add_mapped_variants(schema_name, node, variants)
            self._add_inferred_variants(schema_name, node, variants)

        if variants:
            return UnionDef(
                name=class_name,
                original_name=schema_name,
                doc=node.description,
                dependencies={v.schema_name for v in variants if v.schema_name != schema_name},
                discriminator=node.discriminator or "",
                variants=variants,
                combinator=node.combinator,
            )

        logger.info('No usable discriminator for %s "%s"; generating an opaque value', node.combinator, schema_name)
        return OpaqueDef(
            name=class_name,
            original_name=schema_name,
            doc=node.description,
            combinator=node.combinator,
            possible_types=[self._type_label(v) for v in node.variants],
        )

    def _add_mapped_variants(self, schema_name: str, node: UnionNode, variants: list[UnionVariant]) -> None:
        for token, target in node.mapping.items():
            ref = target if target.startswith("#") else self.context.ref_for(target)
            variant_schema = self.context.schema_name_for_ref(ref)
            if variant_schema is None or self.context.resolver.resolve(ref, schema_name) is None:
                self.context.warn(
                    f'Discriminator mapping "{token}" -> "{target}" of "{schema_name}" cannot be resolved; skipping it.',
                    schema_name,
                )
                continue
            self._add_variant(token, variant_schema, variants, schema_name)

    def _add_inferred_variants(self, schema_name: str, node: UnionNode, variants: list[UnionVariant]) -> None:
        known = {v.schema_name for v in variants}
        for fragment in node.variants:
            ref = fragment.get("$ref")
            if not isinstance(ref, str):
                continue
            variant_schema = self.context.schema_name_for_ref(ref)
            if variant_schema is None or variant_schema in known:
                continue
            target = self.context.resolver.resolve(ref, schema_name)
            if target is None:
                continue
            token = self._discriminator_token(variant_schema, target, node.discriminator or "")
            if token is None:
                logger.debug('Variant "%s" of "%s" has no single discriminator value', variant_schema, schema_name)
                continue
            self._add_variant(token, variant_schema, variants, schema_name)

    def _add_variant(self, token: Any, variant_schema: str, variants: list[UnionVariant], schema_name: str) -> None:
        if any(v.token == token for v in variants):
            logger.debug('Duplicate discriminator value "%s" in "%s"; keeping the first variant', token, schema_name)
            return
        class_name = self.context.class_name_for(variant_schema)
        variants.append(
            UnionVariant(
                token=token,
                class_name=class_name,
                schema_name=variant_schema,
                field_name=to_python_identifier(class_name),
            )
        )

    def _discriminator_token(self, variant_schema: str, target: dict[str, Any], discriminator: str) -> Any:
        fragment = target
        if isinstance(target.get("allOf"), list):
            fragment = self.composition.merge_all_of(variant_schema, target["allOf"], report=False)

        prop = (fragment.get("properties") or {}).get(discriminator)
        if not isinstance(prop, dict):
            return None
        if isinstance(prop.get("$ref"), str):
            prop = self.context.resolver.resolve(prop["$ref"], variant_schema) or {}

        values = prop.get("enum")
        if isinstance(values, list) and len(values) == 1:
            return values[0]
        if "const" in prop:
            return prop["const"]
        return None

    def _type_label(self, fragment: dict[str, Any]) -> str:
        ref = fragment.get("$ref")
        if isinstance(ref, str):
            return self.context.class_name_for_ref(ref)
        return str(fragment.get("type", "Any"))
