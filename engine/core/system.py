"""
System base class for logic processors.

Systems contain all game logic. They process entities that have specific
component combinations, once per fixed update, in descending priority.

Usage:
    class DriftSystem(System):
        required_components = [Transform, Locomotion]
        priority = 30

        def process_entity(self, entity: Entity, dt: float) -> None:
            transform = entity.get(Transform)
            locomotion = entity.get(Locomotion)
            transform.x += locomotion.vx * dt
"""

from __future__ import annotations

from abc import ABC
from typing import TYPE_CHECKING, ClassVar, Iterator

from engine.core.component import Component

if TYPE_CHECKING:
    from engine.core.entity import Entity
    from engine.core.world import World


class System(ABC):
    """
    Base class for all systems.

    Override required_components to specify which entities to process.
    Override process_entity to define the logic, or update for systems
    that work on the world as a whole.
    """

    required_components: ClassVar[list[type[Component]]] = []

    # Execution order (higher = earlier)
    priority: ClassVar[int] = 0

    enabled: bool = True

    def __init__(self):
        self._world: World | None = None

    @property
    def world(self) -> World:
        """Get the world this system belongs to."""
        if self._world is None:
            raise RuntimeError(f"System {self.__class__.__name__} not attached to world")
        return self._world

    def on_add(self, world: World) -> None:
        """Called when system is added to a world."""
        self._world = world

    def on_remove(self) -> None:
        """Called when system is removed from a world."""
        self._world = None

    def get_entities(self) -> Iterator[Entity]:
        """Entities matching required_components, in creation order."""
        if not self._world:
            return iter([])
        if not self.required_components:
            return self._world.entities
        return self._world.get_entities_with(*self.required_components)

    def update(self, dt: float) -> None:
        """
        Update this system.

        Default implementation calls process_entity for each active match.
        """
        if not self.enabled:
            return

        for entity in list(self.get_entities()):
            if entity.active:
                self.process_entity(entity, dt)

    def process_entity(self, entity: Entity, dt: float) -> None:
        """Process a single entity. Systems that override update may skip it."""

    def __repr__(self) -> str:
        required = ", ".join(c.__name__ for c in self.required_components)
        return f"{self.__class__.__name__}(requires=[{required}])"
