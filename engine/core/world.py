"""
World container for entities and systems.

Each Scene has one World. Queries return entities in creation order,
which callers may rely on for deterministic tie-breaks.

Usage:
    world = World(event_bus)
    world.add_system(MovementSystem(input_handler))

    player = world.create_entity("Player")
    player.add(Transform(x=100, y=100))

    # In the fixed update:
    world.update(dt)
"""

from __future__ import annotations

from typing import Iterator

from engine.core.component import Component
from engine.core.entity import Entity
from engine.core.events import EngineEvent, EventBus
from engine.core.system import System


class World:
    """
    Container for entities and systems.

    Provides:
    - Entity management (create, destroy, query)
    - System management (add, remove, update in priority order)
    - Ordered component and tag indices
    """

    def __init__(self, event_bus: EventBus | None = None):
        self.event_bus = event_bus or EventBus()

        self._entities: dict[int, Entity] = {}
        self._entities_by_name: dict[str, Entity] = {}
        self._entities_to_destroy: list[int] = []

        # component_type -> entity ids (dict keys keep insertion order)
        self._component_index: dict[type[Component], dict[int, None]] = {}
        self._tag_index: dict[str, dict[int, None]] = {}

        self._systems: list[System] = []

    # Entity Management

    def create_entity(self, name: str = "") -> Entity:
        """Create a new entity in this world."""
        return self.add_entity(Entity(name))

    def add_entity(self, entity: Entity) -> Entity:
        """Add an existing entity to this world."""
        if entity.id in self._entities:
            raise ValueError(f"Entity {entity.id} already in world")

        entity._world = self
        self._entities[entity.id] = entity
        self._entities_by_name[entity.name] = entity

        for component in entity.components:
            self._index(self._component_index, type(component), entity.id)
        for tag in entity.tags:
            self._index(self._tag_index, tag, entity.id)

        self.event_bus.publish(EngineEvent.ENTITY_CREATED, entity=entity)
        return entity

    def destroy_entity(self, entity: Entity | int) -> None:
        """Mark an entity for removal at the end of the current update."""
        entity_id = entity.id if isinstance(entity, Entity) else entity
        if entity_id in self._entities and entity_id not in self._entities_to_destroy:
            self._entities_to_destroy.append(entity_id)

    def _process_destroyed_entities(self) -> None:
        for entity_id in self._entities_to_destroy:
            entity = self._entities.pop(entity_id, None)
            if entity is None:
                continue

            for index in (*self._component_index.values(), *self._tag_index.values()):
                index.pop(entity_id, None)
            if self._entities_by_name.get(entity.name) is entity:
                del self._entities_by_name[entity.name]

            entity._world = None
            self.event_bus.publish(EngineEvent.ENTITY_DESTROYED, entity=entity)

        self._entities_to_destroy.clear()

    def get_entity(self, entity_id: int) -> Entity | None:
        return self._entities.get(entity_id)

    def get_entity_by_name(self, name: str) -> Entity | None:
        return self._entities_by_name.get(name)

    @property
    def entities(self) -> Iterator[Entity]:
        return iter(list(self._entities.values()))

    @property
    def entity_count(self) -> int:
        return len(self._entities)

    # Indexing

    @staticmethod
    def _index(index: dict, key: object, entity_id: int) -> None:
        index.setdefault(key, {})[entity_id] = None

    def _on_component_added(self, entity: Entity, component_type: type[Component]) -> None:
        self._index(self._component_index, component_type, entity.id)

    def _on_component_removed(self, entity: Entity, component_type: type[Component]) -> None:
        self._component_index.get(component_type, {}).pop(entity.id, None)

    def _on_tag_added(self, entity: Entity, tag: str) -> None:
        self._index(self._tag_index, tag, entity.id)

    # Queries

    def get_entities_with(self, *component_types: type[Component]) -> Iterator[Entity]:
        """All entities having ALL the given component types, in creation order."""
        if not component_types:
            return
        first, *rest = component_types
        for entity_id in list(self._component_index.get(first, {})):
            if all(entity_id in self._component_index.get(ct, {}) for ct in rest):
                entity = self._entities.get(entity_id)
                if entity:
                    yield entity

    def get_entities_with_tag(self, tag: str) -> Iterator[Entity]:
        for entity_id in list(self._tag_index.get(tag, {})):
            entity = self._entities.get(entity_id)
            if entity:
                yield entity

    def get_first_with_tag(self, tag: str) -> Entity | None:
        return next(self.get_entities_with_tag(tag), None)

    # System Management

    def add_system(self, system: System) -> None:
        """Add a system; systems run in descending priority, stable for ties."""
        self._systems.append(system)
        self._systems.sort(key=lambda s: -s.priority)
        system.on_add(self)

    def remove_system(self, system: System) -> None:
        if system in self._systems:
            self._systems.remove(system)
            system.on_remove()

    def get_system(self, system_type: type[System]) -> System | None:
        for system in self._systems:
            if isinstance(system, system_type):
                return system
        return None

    @property
    def systems(self) -> list[System]:
        return list(self._systems)

    # Update

    def update(self, dt: float) -> None:
        """Run every enabled system once, then drop destroyed entities."""
        for system in self._systems:
            if system.enabled:
                system.update(dt)

        self._process_destroyed_entities()

    def clear(self) -> None:
        """Remove all entities and systems."""
        for entity_id in list(self._entities):
            self.destroy_entity(entity_id)
        self._process_destroyed_entities()

        for system in self._systems[:]:
            self.remove_system(system)

        self._component_index.clear()
        self._tag_index.clear()
