"""
Village scene - the explorable resume village.

Owns the world, the game-time clock and the dialogue overlay. Each fixed
update advances the clock, then runs the systems in priority order:
movement, proximity, interaction.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import pygame

from engine.core import Scene, World, Clock
from engine.core.actions import Action
from village.config import ContentDescriptor, MapDescriptor, VillageSettings
from village.dialogue import DialogueOverlay, OverlayLayout
from village.render import VillageRenderer
from village.systems import MovementSystem, ProximitySystem, InteractionSystem
from village.world import layout_offset, populate_village

if TYPE_CHECKING:
    from engine.core.game import Game


logger = logging.getLogger(__name__)


class VillageScene(Scene):
    """
    The village map with its houses and NPC.

    Usage:
        map_descriptor, content = load_descriptors(database)
        game.scene_manager.push(VillageScene(game, map_descriptor, content))
    """

    def __init__(
        self,
        game: Game,
        map_descriptor: Optional[MapDescriptor] = None,
        content: Optional[ContentDescriptor] = None,
        settings: Optional[VillageSettings] = None,
    ):
        super().__init__(game)
        self.settings = settings or VillageSettings()
        self.map = map_descriptor or MapDescriptor.default()
        self.content = content

        self.events = game.event_bus
        self.input = game.input
        self.clock = Clock()
        self.world = World(self.events)

        self.layout = OverlayLayout(game.width, game.height)
        self.overlay = DialogueOverlay(
            self.events,
            self.clock,
            self.layout,
            typewriter_interval=self.settings.typewriter_interval,
        )

        npc_content = content.npc if content else None
        self.offset_x = layout_offset(game.width)
        self.player = populate_village(
            self.world,
            self.map,
            self.settings,
            viewport_width=game.width,
            npc_name=npc_content.name if npc_content else "NPC",
            npc_portrait=npc_content.portrait if npc_content else None,
        )

        # Systems
        self.movement_system = MovementSystem(
            self.input,
            bounds=self._bounds(game.width, game.height),
            arrival_threshold=self.settings.arrival_threshold,
        )
        self.proximity_system = ProximitySystem(self.events)
        self.interaction_system = InteractionSystem(
            self.input,
            self.overlay,
            self.proximity_system,
            self.clock,
            self.events,
            content=content,
            settings=self.settings,
        )
        self.movement_system.movement_gate = self.interaction_system.accepts_movement
        self.movement_system.pointer_gate = self.interaction_system.accepts_pointer_movement

        self.world.add_system(self.movement_system)
        self.world.add_system(self.proximity_system)
        self.world.add_system(self.interaction_system)

        self._renderer: Optional[VillageRenderer] = None

        logger.info(
            "Village ready: %d houses, content %s",
            len(self.map.houses),
            "loaded" if content else "missing",
        )

    def _bounds(self, width: float, height: float) -> tuple[float, float, float, float]:
        return (
            0.0,
            0.0,
            max(self.settings.world_width + 2 * self.offset_x, width),
            max(self.settings.world_height, height),
        )

    def update(self, dt: float) -> None:
        if self.input.is_action_just_pressed(Action.QUIT):
            self.game.quit()
            return

        self.clock.advance(dt)
        self.world.update(dt)

    def render(self, surface: pygame.Surface, alpha: float) -> None:
        if self._renderer is None:
            self._renderer = VillageRenderer()
        self._renderer.draw(surface, self)

    def on_resize(self, width: int, height: int) -> None:
        self.layout.resize(width, height)
        self.movement_system.bounds = self._bounds(width, height)

    def on_destroy(self) -> None:
        self.overlay.close()
        self.clock.clear()
        super().on_destroy()
