"""
Village entities - factories for the player, the NPC and house zones.

Positions in the map descriptor are authored for an 800 px wide layout;
``offset_x`` recenters them for wider viewports.
"""

from __future__ import annotations

from typing import Optional

from engine.core import Entity, World
from village.components import (
    Transform,
    Locomotion,
    Facing,
    InteractionZone,
    ProximityTarget,
    PromptPulse,
    DialogSpeaker,
)
from village.config import LAYOUT_WIDTH, MapDescriptor, VillageSettings


def layout_offset(viewport_width: float) -> float:
    """Horizontal shift that centers the default layout in the viewport."""
    return (viewport_width - LAYOUT_WIDTH) / 2


def create_player(
    world: World,
    x: float,
    y: float,
    speed: float = 120.0,
) -> Entity:
    """
    Factory function to create the player entity.

    Args:
        world: World to add player to
        x: Spawn X
        y: Spawn Y
        speed: Walking speed (px/s)

    Returns:
        The created player entity
    """
    player = world.create_entity("player")
    player.add_tag("player")

    player.add(Transform(x=x, y=y, facing=Facing.DOWN))
    player.add(Locomotion(speed=speed))

    return player


def create_npc(
    world: World,
    x: float,
    y: float,
    name: str = "NPC",
    portrait_id: Optional[str] = None,
    radius: float = 50.0,
    pulse_period: float = 0.6,
) -> Entity:
    """
    Factory function to create a static NPC the player can talk to.

    Args:
        world: World to add NPC to
        x: X position
        y: Y position
        name: Display name
        portrait_id: Portrait asset id
        radius: Interaction radius
        pulse_period: Prompt pulse half-cycle (s)

    Returns:
        The created NPC entity
    """
    npc = world.create_entity(name)
    npc.add_tag("npc")

    npc.add(Transform(x=x, y=y, facing=Facing.DOWN))
    npc.add(DialogSpeaker(name=name, portrait_id=portrait_id))
    npc.add(ProximityTarget(radius=radius))
    npc.add(PromptPulse(period=pulse_period))

    return npc


def create_house_zones(
    world: World,
    map_descriptor: MapDescriptor,
    offset_x: float = 0.0,
) -> list[Entity]:
    """
    One zone entity per house, in map order.

    The Transform is the zone center. Houses are drawn from the map
    descriptor anchors, not from these entities.
    """
    houses = []
    for key, house in map_descriptor.houses.items():
        entity = world.create_entity(f"house:{key}")
        entity.add_tag("house")
        entity.add(Transform(x=house.zone.x + offset_x, y=house.zone.y))
        entity.add(InteractionZone(
            key=key,
            label=house.label,
            width=house.zone.w,
            height=house.zone.h,
        ))
        houses.append(entity)
    return houses


def populate_village(
    world: World,
    map_descriptor: MapDescriptor,
    settings: VillageSettings,
    viewport_width: float,
    npc_name: str = "NPC",
    npc_portrait: Optional[str] = None,
) -> Entity:
    """
    Create every village entity.

    Zones are registered first so their creation order is map order.

    Returns:
        The player entity
    """
    offset_x = layout_offset(viewport_width)

    create_house_zones(world, map_descriptor, offset_x)

    npc_x, npc_y = settings.npc_position
    create_npc(
        world,
        npc_x + offset_x,
        npc_y,
        name=npc_name,
        portrait_id=npc_portrait,
        radius=settings.npc_radius,
        pulse_period=settings.prompt_pulse_period,
    )

    spawn = map_descriptor.spawn
    return create_player(world, spawn.x + offset_x, spawn.y, speed=settings.player_speed)
