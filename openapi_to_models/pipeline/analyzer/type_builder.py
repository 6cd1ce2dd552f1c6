"""
Type and field model builder.

Maps property fragments to TypeRef / FieldDef values. Required-ness is
decided by nullability alone: a field is required unless its fragment is
nullable.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ...utils import to_enum_member_name, to_pascal_case, to_python_identifier
from ..config import SchemaOverride
from ..schema_ast import (
    AllOfNode,
    ArrayNode,
    EnumNode,
    MapNode,
    ObjectNode,
    PrimitiveNode,
    RefNode,
    UnionNode,
    UnknownNode,
)
from .ir_nodes import EnumDef, FieldDef, TypeKind, TypeRef

if TYPE_CHECKING:
    from ..context import GenerationContext

logger = logging.getLogger(__name__)

# Schema primitive type -> Python type name
PRIMITIVE_TYPES = {
    "integer": "int",
    "number": "float",
    "boolean": "bool",
    "string": "str",
}

DATETIME_FORMATS = {
    "date-time": "datetime",
    "date": "date",
}


def any_type(nullable: bool = False) -> TypeRef:
    return TypeRef(kind=TypeKind.ANY, name="Any", is_nullable=nullable)


def build_enum(name: str, original_name: str, node: EnumNode) -> EnumDef:
    """
    Build an enum definition from an enum node.

    Member names come from x-enumNames / x-enum-varnames when present,
    otherwise from the literal values. null literals are dropped and
    duplicate member names get a numeric suffix.
    """
    members: dict[str, Any] = {}
    for index, value in enumerate(node.values):
        if value is None:
            continue
        source = node.member_names[index] if node.member_names else value
        base = to_enum_member_name(source)
        member = base
        counter = 2
        while member in members:
            member = f"{base}_{counter}"
            counter += 1
        members[member] = value
    return EnumDef(
        name=name,
        original_name=original_name,
        doc=node.description,
        value_type=node.value_type,
        members=members,
    )


class TypeBuilder:
    """Builds field and type descriptors for property fragments."""

    def __init__(self, context: GenerationContext):
        self.context = context
        self.parser = context.parser

    def field_for(
        self,
        name: str,
        fragment: dict[str, Any] | None,
        owner: str,
        override: SchemaOverride | None = None,
    ) -> FieldDef:
        """
        Build the descriptor of one property.

        Args:
            name: JSON property name
            fragment: The property fragment
            owner: Class name of the record holding the property
            override: Per-schema overrides of the owner

        Returns:
            FieldDef with is_required == not nullable
        """
        fragment = fragment if isinstance(fragment, dict) else {}
        type_ref = self.type_for(fragment, owner, name, override)
        attr_name = override.field_names.get(name) if override else None
        return FieldDef(
            name=name,
            attr_name=attr_name or to_python_identifier(name),
            type_ref=type_ref,
            is_required=not type_ref.is_nullable,
            description=fragment.get("description"),
            example=fragment.get("example"),
            schema=fragment,
        )

    def type_for(
        self,
        fragment: dict[str, Any] | None,
        owner: str,
        path: str,
        override: SchemaOverride | None = None,
        _aliases: frozenset[str] = frozenset(),
    ) -> TypeRef:
        """
        Resolve the type of a fragment.

        Args:
            fragment: The fragment to type
            owner: Class name used to name inline enumerations
            path: Property path inside the owner, used to name inline enumerations
            override: Per-schema overrides (type mapping)

        Returns:
            The resolved TypeRef
        """
        node = self.parser.parse(fragment)
        nullable = node.is_nullable

        declared = self.parser.type_name(node.raw)
        if override and not isinstance(node, RefNode) and declared in override.type_mapping:
            mapped = override.type_mapping[declared]
            return TypeRef(kind=TypeKind.PRIMITIVE, name=mapped, override_type=mapped, is_nullable=nullable)

        if isinstance(node, RefNode):
            return self._ref_type(node, owner, path, override, _aliases)

        if isinstance(node, EnumNode):
            enum_def = self._inline_enum(node, owner, path)
            return TypeRef(kind=TypeKind.ENUM, name=enum_def.name, is_nullable=nullable)

        if isinstance(node, AllOfNode):
            # allOf wrapping a single $ref is the usual way to describe a reference
            if len(node.fragments) == 1 and "$ref" in node.fragments[0]:
                inner = self.type_for(node.fragments[0], owner, path, override, _aliases)
                inner.is_nullable = inner.is_nullable or nullable
                return inner
            return self._map_of(any_type(), nullable)

        if isinstance(node, UnionNode):
            logger.debug("Inline %s in %s.%s typed as Any", node.combinator, owner, path)
            return any_type(nullable)

        if isinstance(node, ArrayNode):
            item = self.type_for(node.items, owner, f"{path}[]", override, _aliases) if node.items is not None else any_type()
            return TypeRef(kind=TypeKind.ARRAY, name="list", type_args=[item], is_nullable=nullable)

        if isinstance(node, MapNode):
            value = self.type_for(node.value, owner, path, override, _aliases) if node.value is not None else any_type()
            return self._map_of(value, nullable)

        if isinstance(node, ObjectNode):
            if isinstance(node.additional, dict):
                return self._map_of(self.type_for(node.additional, owner, path, override, _aliases), nullable)
            return self._map_of(any_type(), nullable)

        if isinstance(node, PrimitiveNode):
            if node.type_name == "string" and node.format in DATETIME_FORMATS:
                return TypeRef(kind=TypeKind.DATETIME, name=DATETIME_FORMATS[node.format], is_nullable=nullable)
            return TypeRef(kind=TypeKind.PRIMITIVE, name=PRIMITIVE_TYPES[node.type_name], is_nullable=nullable)

        logger.debug("Fragment of %s.%s has no usable type; typed as Any", owner, path)
        return any_type(nullable)

    def _map_of(self, value: TypeRef, nullable: bool) -> TypeRef:
        return TypeRef(kind=TypeKind.MAP, name="dict", type_args=[value], is_nullable=nullable)

    def _ref_type(
        self,
        node: RefNode,
        owner: str,
        path: str,
        override: SchemaOverride | None,
        aliases: frozenset[str],
    ) -> TypeRef:
        ref = node.ref
        nullable = node.is_nullable
        target = self.context.resolver.resolve(ref, owner)
        if target is None:
            # Reported by the missing_ref_target lint rule
            return TypeRef(kind=TypeKind.CLASS, name=self.context.class_name_for_ref(ref), is_nullable=nullable)

        schema_name = self.context.schema_name_for_ref(ref)
        target_node = self.parser.parse(target)

        if schema_name is not None:
            class_name = self.context.class_name_for(schema_name)
            if isinstance(target_node, EnumNode):
                return TypeRef(kind=TypeKind.ENUM, name=class_name, schema_name=schema_name, is_nullable=nullable)
            if isinstance(target_node, UnionNode):
                return TypeRef(kind=TypeKind.UNION, name=class_name, schema_name=schema_name, is_nullable=nullable)
            if isinstance(target_node, MapNode):
                return TypeRef(
                    kind=TypeKind.CLASS,
                    name=class_name,
                    schema_name=schema_name,
                    is_nullable=nullable,
                    custom_codec=True,
                )
            if isinstance(target_node, (ObjectNode, AllOfNode, UnknownNode)):
                return TypeRef(kind=TypeKind.CLASS, name=class_name, schema_name=schema_name, is_nullable=nullable)

        # Aliases (named primitives and arrays) and references into nested
        # fragments are typed like the fragment they point at.
        if ref in aliases:
            logger.debug("Cyclic alias reference %s in %s.%s typed as Any", ref, owner, path)
            return any_type(nullable)
        inner = self.type_for(target, owner, path, override, aliases | {ref})
        inner.is_nullable = inner.is_nullable or nullable
        return inner

    def _inline_enum(self, node: EnumNode, owner: str, path: str) -> EnumDef:
        existing = self.context.inline_enum(owner, path)
        if existing is not None:
            return existing
        base = owner + to_pascal_case(path.replace("[]", ""))
        name = self.context.unique_name(base)
        enum_def = build_enum(name, name, node)
        return self.context.register_inline_enum(owner, path, enum_def)
