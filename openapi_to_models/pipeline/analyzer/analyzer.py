"""
Schema analyzer.

Turns one named schema into the IR descriptor of its artifact.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..config import SchemaOverride
from ..schema_ast import (
    AllOfNode,
    EnumNode,
    MapNode,
    ObjectNode,
    SchemaNode,
    UnionNode,
    UnknownNode,
)
from .composition import CompositionResolver
from .ir_nodes import ClassDef, FieldDef, MapDef, ModelDef
from .type_builder import TypeBuilder, build_enum
from .union_synthesizer import UnionSynthesizer

if TYPE_CHECKING:
    from ..context import GenerationContext

logger = logging.getLogger(__name__)


class SchemaAnalyzer:
    """Builds IR descriptors for named schemas."""

    def __init__(self, context: GenerationContext):
        self.context = context
        self.composition = CompositionResolver(context)
        self.types = TypeBuilder(context)
        self.unions = UnionSynthesizer(context, self.composition)

    def analyze(self, schema_name: str, schema: dict[str, Any] | None) -> ModelDef | None:
        """
        Analyze a named schema.

        Args:
            schema_name: Name of the schema in the document
            schema: The raw schema

        Returns:
            The artifact descriptor, or None for schemas that are plain
            aliases (named primitives and arrays), which are inlined where
            they are referenced
        """
        node = self.context.parser.parse(schema)
        override = self.context.config.override_for(schema_name)
        class_name = self.context.class_name_for(schema_name)

        if isinstance(node, EnumNode):
            return build_enum(class_name, schema_name, node)

        if isinstance(node, UnionNode):
            return self.unions.synthesize(schema_name, node)

        if isinstance(node, AllOfNode):
            merged = self.composition.merge_all_of(schema_name, node.fragments, node.description)
            return self._build_class(schema_name, class_name, self.context.parser.parse(merged), override)

        if isinstance(node, MapNode):
            value_type = self.types.type_for(node.value, class_name, "value", override) if node.value is not None else None
            map_def = MapDef(name=class_name, original_name=schema_name, doc=node.description)
            if value_type is not None:
                map_def.value_type = value_type
            map_def.inline_enums = self.context.inline_enums_for(class_name)
            map_def.dependencies = self._dependencies(schema_name, [map_def.value_type])
            return map_def

        if isinstance(node, (ObjectNode, UnknownNode)):
            return self._build_class(schema_name, class_name, node, override)

        logger.debug('Schema "%s" is an alias of a %s; it is inlined where referenced', schema_name, type(node).__name__)
        return None

    def _build_class(
        self,
        schema_name: str,
        class_name: str,
        node: SchemaNode,
        override: SchemaOverride | None,
    ) -> ClassDef:
        properties = node.properties if isinstance(node, ObjectNode) else {}

        fields: list[FieldDef] = []
        attr_names: set[str] = set()
        for prop_name, prop_schema in properties.items():
            field_def = self.types.field_for(prop_name, prop_schema, class_name, override)
            field_def.attr_name = self._unique_attr(field_def.attr_name, attr_names)
            fields.append(field_def)

        return ClassDef(
            name=class_name,
            original_name=schema_name,
            doc=node.description,
            dependencies=self._dependencies(schema_name, [f.type_ref for f in fields]),
            fields=fields,
            inline_enums=self.context.inline_enums_for(class_name),
            use_json_key=self.context.config.use_json_key_for(schema_name),
        )

    @staticmethod
    def _unique_attr(name: str, taken: set[str]) -> str:
        candidate = name
        counter = 2
        while candidate in taken:
            candidate = f"{name}_{counter}"
            counter += 1
        taken.add(candidate)
        return candidate

    @staticmethod
    def _dependencies(schema_name: str, type_refs: list) -> set[str]:
        """Named schemas referenced by the given types, excluding the schema itself."""
        return {
            t.schema_name
            for type_ref in type_refs
            for t in type_ref.walk()
            if t.schema_name is not None and t.schema_name != schema_name
        }
