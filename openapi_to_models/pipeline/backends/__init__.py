"""
Rendering backends.

One backend per generation style, selected through a StyleRegistry.
"""

from __future__ import annotations

from .base import ModelBackend
from .dataclass_backend import DataclassBackend
from .dataclasses_json_backend import DataclassesJsonBackend
from .pydantic_backend import PydanticBackend
from .registry import StyleRegistry

__all__ = [
    "ModelBackend",
    "DataclassBackend",
    "DataclassesJsonBackend",
    "PydanticBackend",
    "StyleRegistry",
]
