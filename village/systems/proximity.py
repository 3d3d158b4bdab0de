"""
Proximity system - which interactable the player is in range of.

Range is recomputed from scratch every tick; the only state carried
between ticks is what is needed to detect enter/exit edges.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from engine.core import System, Entity
from engine.core.events import EventBus
from village.components import Transform, InteractionZone, ProximityTarget, PromptPulse
from village.events import VillageEvent


logger = logging.getLogger(__name__)


def npc_in_range(player: tuple[float, float], npc: tuple[float, float], radius: float) -> bool:
    """Strict Euclidean range test."""
    return math.hypot(player[0] - npc[0], player[1] - npc[1]) < radius


class ProximitySystem(System):
    """
    Tracks the player's range to NPCs and house zones.

    Handles:
    - NPC range (distance < radius) with enter/exit edges
    - Prompt pulse restart on enter, reset on exit
    - Active zone lookup (first zone in creation order wins)

    Results are exposed as ``active_zone`` and ``npc_nearby`` for systems
    that run later in the same tick.
    """

    priority = 20

    def __init__(self, events: Optional[EventBus] = None, player_tag: str = "player"):
        super().__init__()
        self.events = events
        self.player_tag = player_tag

        self._active_zone: Optional[Entity] = None
        self._nearby_npc: Optional[Entity] = None

    @property
    def active_zone(self) -> Optional[Entity]:
        """House entity whose zone contains the player, if any."""
        return self._active_zone

    @property
    def nearby_npc(self) -> Optional[Entity]:
        return self._nearby_npc

    @property
    def npc_nearby(self) -> bool:
        return self._nearby_npc is not None

    @property
    def anything_in_range(self) -> bool:
        return self._active_zone is not None or self._nearby_npc is not None

    def update(self, dt: float) -> None:
        if not self.enabled:
            return

        player = self.world.get_first_with_tag(self.player_tag)
        position = player.get(Transform).position if player and player.active else None

        self._update_npcs(position, dt)
        self._update_zone(position)

    def _update_npcs(self, position: Optional[tuple[float, float]], dt: float) -> None:
        nearby: Optional[Entity] = None

        for npc in self.world.get_entities_with(Transform, ProximityTarget):
            target = npc.get(ProximityTarget)
            was_nearby = target.player_nearby
            is_nearby = position is not None and npc.active and npc_in_range(
                position, npc.get(Transform).position, target.radius
            )
            target.player_nearby = is_nearby

            pulse = npc.try_get(PromptPulse)
            if is_nearby and not was_nearby:
                if pulse:
                    pulse.restart()
                self._publish(VillageEvent.NPC_IN_RANGE, entity=npc)
            elif was_nearby and not is_nearby:
                if pulse:
                    pulse.stop()
                self._publish(VillageEvent.NPC_OUT_OF_RANGE, entity=npc)
            elif pulse:
                pulse.step(dt)

            if is_nearby and nearby is None:
                nearby = npc

        self._nearby_npc = nearby

    def _update_zone(self, position: Optional[tuple[float, float]]) -> None:
        previous = self._active_zone
        current: Optional[Entity] = None

        if position is not None:
            for house in self.world.get_entities_with(Transform, InteractionZone):
                if not house.active:
                    continue
                center = house.get(Transform)
                if house.get(InteractionZone).contains(center.x, center.y, *position):
                    current = house
                    break

        self._active_zone = current
        if current is previous:
            return

        if previous is not None:
            zone = previous.get(InteractionZone)
            self._publish(VillageEvent.ZONE_EXITED, key=zone.key, label=zone.label)
        if current is not None:
            zone = current.get(InteractionZone)
            logger.debug("Entered zone %s", zone.key)
            self._publish(VillageEvent.ZONE_ENTERED, key=zone.key, label=zone.label)

    def _publish(self, event_type: VillageEvent, **data) -> None:
        if self.events:
            self.events.publish(event_type, **data)
