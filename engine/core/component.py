"""
Component base class for data-only components.

Components are pure data containers. Logic lives in Systems.

Usage:
    class Transform(Component):
        x: float = 0.0
        y: float = 0.0
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for all components.

    Pydantic gives validation on construction and on assignment, so a
    system writing a bad value fails loudly at the write site.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra='forbid',
    )

    _type_name: ClassVar[str] = ""

    # Owning entity id, set by Entity.add
    _entity_id: int | None = None

    @classmethod
    def get_type_name(cls) -> str:
        """Get the component type name for serialization."""
        return cls._type_name or cls.__name__


_component_registry: dict[str, type[Component]] = {}


def register_component(cls: type[Component]) -> type[Component]:
    """Decorator to register a component type by name."""
    _component_registry[cls.get_type_name()] = cls
    return cls


def get_component_type(type_name: str) -> type[Component] | None:
    """Get component class by type name."""
    return _component_registry.get(type_name)
