"""
Fragment parser.

Classifies a raw schema fragment into one of the node types of
``nodes.py``. Classification is shallow: nested fragments stay raw and are
parsed on demand by the analyzer.
"""

from __future__ import annotations

from typing import Any

from .nodes import (
    AllOfNode,
    ArrayNode,
    EnumNode,
    MapNode,
    ObjectNode,
    PrimitiveNode,
    RefNode,
    SchemaNode,
    UnionNode,
    UnknownNode,
)

ENUM_NAME_EXTENSIONS = ("x-enumNames", "x-enum-varnames")


class SchemaParser:
    """Parses raw fragments into typed nodes."""

    PRIMITIVE_TYPES = {"string", "integer", "number", "boolean"}

    def parse(self, fragment: dict[str, Any] | None) -> SchemaNode:
        """
        Parse a fragment.

        Priority: $ref, non-empty enum, allOf, oneOf/anyOf, array, object,
        primitive. Anything else is an UnknownNode.

        Args:
            fragment: The raw fragment (None is treated as an empty fragment)

        Returns:
            Appropriate SchemaNode subclass
        """
        fragment = fragment if isinstance(fragment, dict) else {}
        common = {
            "raw": fragment,
            "description": fragment.get("description"),
            "example": fragment.get("example"),
            "is_nullable": self.is_nullable(fragment),
        }
        type_name = self.type_name(fragment)

        if isinstance(fragment.get("$ref"), str):
            return RefNode(ref=fragment["$ref"], **common)

        if fragment.get("enum"):
            return self._parse_enum(fragment, type_name, common)

        if isinstance(fragment.get("allOf"), list):
            return AllOfNode(fragments=[f for f in fragment["allOf"] if isinstance(f, dict)], **common)

        for combinator in ("oneOf", "anyOf"):
            if isinstance(fragment.get(combinator), list):
                return self._parse_union(fragment, combinator, common)

        if type_name == "array":
            items = fragment.get("items")
            return ArrayNode(items=items if isinstance(items, dict) else None, **common)

        if type_name == "object" or (type_name is None and ("properties" in fragment or "additionalProperties" in fragment)):
            return self._parse_object(fragment, common)

        if type_name in self.PRIMITIVE_TYPES:
            return PrimitiveNode(type_name=type_name, format=fragment.get("format"), **common)

        return UnknownNode(type_name=type_name, **common)

    @staticmethod
    def type_name(fragment: dict[str, Any]) -> str | None:
        """The declared type; for type lists, the first entry that is not "null"."""
        declared = fragment.get("type")
        if isinstance(declared, list):
            non_null = [t for t in declared if t != "null"]
            return non_null[0] if non_null else None
        return declared

    @staticmethod
    def is_nullable(fragment: dict[str, Any]) -> bool:
        declared = fragment.get("type")
        return bool(
            fragment.get("nullable") is True
            or fragment.get("x-nullable") is True
            or (isinstance(declared, list) and "null" in declared)
        )

    def _parse_enum(self, fragment: dict[str, Any], type_name: str | None, common: dict[str, Any]) -> EnumNode:
        values = list(fragment["enum"])
        if type_name in ("integer", "number"):
            value_type = type_name
        elif values and all(isinstance(v, int) and not isinstance(v, bool) for v in values):
            value_type = "integer"
        else:
            value_type = "string"

        member_names: list[str] = []
        for key in ENUM_NAME_EXTENSIONS:
            names = fragment.get(key)
            if isinstance(names, list) and len(names) == len(values):
                member_names = [str(n) for n in names]
                break
        return EnumNode(values=values, value_type=value_type, member_names=member_names, **common)

    def _parse_union(self, fragment: dict[str, Any], combinator: str, common: dict[str, Any]) -> UnionNode:
        discriminator = fragment.get("discriminator")
        mapping: dict[str, str] = {}
        if isinstance(discriminator, dict):
            mapping = {str(k): v for k, v in (discriminator.get("mapping") or {}).items() if isinstance(v, str)}
            discriminator = discriminator.get("propertyName")
        if not isinstance(discriminator, str) or not discriminator:
            discriminator = None
        return UnionNode(
            combinator=combinator,
            variants=[v for v in fragment[combinator] if isinstance(v, dict)],
            discriminator=discriminator,
            mapping=mapping,
            **common,
        )

    def _parse_object(self, fragment: dict[str, Any], common: dict[str, Any]) -> SchemaNode:
        properties = fragment.get("properties") or {}
        additional = fragment.get("additionalProperties")
        if not properties and additional not in (None, False):
            return MapNode(value=additional if isinstance(additional, dict) else None, **common)
        return ObjectNode(
            properties={name: (p if isinstance(p, dict) else {}) for name, p in properties.items()},
            required=[r for r in fragment.get("required") or [] if isinstance(r, str)],
            additional=additional,
            **common,
        )
