"""
Analyzer module.

Contains reference resolution, allOf composition, union synthesis, type
building and IR construction.
"""

from __future__ import annotations

from .analyzer import SchemaAnalyzer
from .composition import CompositionResolver
from .ir_nodes import (
    ClassDef,
    EnumDef,
    FieldDef,
    MapDef,
    ModelDef,
    OpaqueDef,
    TypeKind,
    TypeRef,
    UnionDef,
    UnionVariant,
)
from .reference_resolver import ReferenceResolver
from .type_builder import TypeBuilder
from .union_synthesizer import UnionSynthesizer

__all__ = [
    "ClassDef",
    "EnumDef",
    "FieldDef",
    "MapDef",
    "ModelDef",
    "OpaqueDef",
    "TypeKind",
    "TypeRef",
    "UnionDef",
    "UnionVariant",
    "CompositionResolver",
    "ReferenceResolver",
    "SchemaAnalyzer",
    "TypeBuilder",
    "UnionSynthesizer",
]
