"""
Typed view over schema fragments.

Each node wraps the raw fragment it was parsed from and exposes the parts
that matter for its shape. Raw fragments are never modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SchemaNode:
    """Base class for all fragment nodes."""

    # The raw fragment this node was parsed from
    raw: dict[str, Any] = field(default_factory=dict)

    description: str | None = None
    example: Any = None

    # nullable: true, x-nullable: true, or "null" in a type list
    is_nullable: bool = False


@dataclass
class RefNode(SchemaNode):
    """A $ref to another fragment."""

    ref: str = ""


@dataclass
class EnumNode(SchemaNode):
    """A fragment with a non-empty enum list."""

    values: list[Any] = field(default_factory=list)
    value_type: str = "string"  # "string", "integer" or "number"

    # Custom member names from x-enumNames / x-enum-varnames, aligned with values
    member_names: list[str] = field(default_factory=list)


@dataclass
class AllOfNode(SchemaNode):
    """An allOf composition."""

    fragments: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class UnionNode(SchemaNode):
    """A oneOf / anyOf composition."""

    combinator: str = "oneOf"
    variants: list[dict[str, Any]] = field(default_factory=list)
    discriminator: str | None = None
    mapping: dict[str, str] = field(default_factory=dict)


@dataclass
class ArrayNode(SchemaNode):
    """An array; items is None when the fragment declares none."""

    items: dict[str, Any] | None = None


@dataclass
class MapNode(SchemaNode):
    """An object that only declares additionalProperties.

    value is None when additionalProperties is `true` (any value).
    """

    value: dict[str, Any] | None = None


@dataclass
class ObjectNode(SchemaNode):
    """An object with declared properties."""

    properties: dict[str, dict[str, Any]] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    additional: dict[str, Any] | bool | None = None


@dataclass
class PrimitiveNode(SchemaNode):
    """A string, integer, number or boolean."""

    type_name: str = "string"
    format: str | None = None


@dataclass
class UnknownNode(SchemaNode):
    """Anything the generator does not understand (typed as Any)."""

    type_name: str | None = None
