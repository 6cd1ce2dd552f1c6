"""
Style registry.

Maps style names to backend factories. The registry is a plain value:
the pipeline receives one explicitly instead of consulting global state,
so callers can add or remove styles for a single run.
"""

from __future__ import annotations

from collections.abc import Callable

from ..config import GenerationStyle, GeneratorConfig
from ..errors import UnknownStyleError
from .base import ModelBackend
from .dataclass_backend import DataclassBackend
from .dataclasses_json_backend import DataclassesJsonBackend
from .pydantic_backend import PydanticBackend

BackendFactory = Callable[[GeneratorConfig], ModelBackend]


class StyleRegistry:
    """Registry of rendering styles."""

    def __init__(self, factories: dict[str, BackendFactory] | None = None):
        self._factories: dict[str, BackendFactory] = dict(factories or {})

    @classmethod
    def default(cls) -> StyleRegistry:
        """Registry holding the built-in styles."""
        return cls(
            {
                GenerationStyle.DATACLASS.value: DataclassBackend,
                GenerationStyle.DATACLASSES_JSON.value: DataclassesJsonBackend,
                GenerationStyle.PYDANTIC.value: PydanticBackend,
            }
        )

    def register(self, name: str, factory: BackendFactory) -> None:
        """Register a style, replacing any style of the same name."""
        if not name:
            raise ValueError("Style name must not be empty")
        self._factories[name] = factory

    def unregister(self, name: str) -> None:
        self._factories.pop(name, None)

    def is_registered(self, name: str) -> bool:
        return name in self._factories

    @property
    def names(self) -> list[str]:
        return sorted(self._factories)

    def create(self, name: str, config: GeneratorConfig | None = None) -> ModelBackend:
        """
        Instantiate the backend of a style.

        Raises:
            UnknownStyleError: If no style of that name is registered
        """
        factory = self._factories.get(name)
        if factory is None:
            raise UnknownStyleError(name, self.names)
        return factory(config or GeneratorConfig())
