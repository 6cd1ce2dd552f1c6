"""
Schema AST module.

Typed nodes over the fragment shapes the generator handles, and the
parser that classifies raw fragments into them.
"""

from __future__ import annotations

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
from .parser import SchemaParser

__all__ = [
    "SchemaNode",
    "RefNode",
    "EnumNode",
    "AllOfNode",
    "UnionNode",
    "ArrayNode",
    "MapNode",
    "ObjectNode",
    "PrimitiveNode",
    "UnknownNode",
    "SchemaParser",
]
