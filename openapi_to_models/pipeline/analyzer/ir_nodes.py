"""
IR (Intermediate Representation) node definitions.

These nodes describe one generated artifact each: a record class, an
enumeration, a discriminated union, an opaque value or a map wrapper.
All references are resolved and types are determined. Nodes are built
fresh for every run and dropped once rendered.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TypeKind(Enum):
    """Kind of type in the IR."""

    PRIMITIVE = "primitive"  # int, str, bool, float
    DATETIME = "datetime"  # datetime / date parsed from ISO strings
    CLASS = "class"  # A generated record or map wrapper
    ENUM = "enum"  # A generated enumeration
    UNION = "union"  # A generated discriminated union or opaque value
    ARRAY = "array"  # list[T]
    MAP = "map"  # dict[str, T]
    ANY = "any"  # Any type


@dataclass
class TypeRef:
    """A resolved type reference."""

    kind: TypeKind = TypeKind.PRIMITIVE
    name: str = ""  # Type name (e.g., "int", "User", "datetime")

    # For container types: [item] for ARRAY, [value] for MAP
    type_args: list[TypeRef] = field(default_factory=list)

    is_nullable: bool = False

    # Verbatim Python type from a per-schema type mapping
    override_type: str | None = None

    # Named schema the type is generated from (None for inline or unresolved types)
    schema_name: str | None = None

    # The target class decodes itself (map wrappers); only meaningful for CLASS
    custom_codec: bool = False

    def walk(self) -> Iterator[TypeRef]:
        """Yield this type and all nested type arguments."""
        yield self
        for arg in self.type_args:
            yield from arg.walk()

    def contains(self, predicate: Callable[[TypeRef], bool]) -> bool:
        return any(predicate(t) for t in self.walk())


@dataclass
class FieldDef:
    """A field of a record class."""

    name: str = ""  # JSON property name
    attr_name: str = ""  # Python attribute name
    type_ref: TypeRef = field(default_factory=TypeRef)

    # Always the negation of the fragment's nullability
    is_required: bool = True

    description: str | None = None
    example: Any = None

    # The raw property fragment
    schema: dict[str, Any] = field(default_factory=dict)


@dataclass
class ModelDef:
    """Base class for generated artifacts."""

    name: str = ""  # Class name
    original_name: str = ""  # Schema name in the document
    doc: str | None = None

    # Named schemas this artifact refers to (imports)
    dependencies: set[str] = field(default_factory=set)


@dataclass
class EnumDef(ModelDef):
    """An enum definition."""

    value_type: str = "string"  # "string", "integer" or "number"
    members: dict[str, Any] = field(default_factory=dict)  # member_name -> json_value


@dataclass
class ClassDef(ModelDef):
    """A record class."""

    fields: list[FieldDef] = field(default_factory=list)

    # Enumerations synthesized from inline enum properties, rendered in the same artifact
    inline_enums: list[EnumDef] = field(default_factory=list)

    # Emit explicit serialization-key annotations for every field
    use_json_key: bool = False


@dataclass
class UnionVariant:
    """One variant of a discriminated union."""

    token: str = ""  # Discriminator value
    class_name: str = ""
    schema_name: str = ""
    field_name: str = ""  # Attribute holding the variant on the union class


@dataclass
class UnionDef(ModelDef):
    """A oneOf/anyOf schema dispatched on a discriminator property."""

    discriminator: str = ""
    variants: list[UnionVariant] = field(default_factory=list)
    combinator: str = "oneOf"


@dataclass
class OpaqueDef(ModelDef):
    """A oneOf/anyOf schema that could not be turned into a union.

    The value is kept as raw JSON.
    """

    combinator: str = "oneOf"
    possible_types: list[str] = field(default_factory=list)


@dataclass
class MapDef(ModelDef):
    """An object that only declares additionalProperties."""

    value_type: TypeRef = field(default_factory=lambda: TypeRef(kind=TypeKind.ANY, name="Any"))

    # Enumerations synthesized from an inline enum value type
    inline_enums: list[EnumDef] = field(default_factory=list)
