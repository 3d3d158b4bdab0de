"""
World module - village entity factories.
"""

from village.world.entities import (
    layout_offset,
    create_player,
    create_npc,
    create_house_zones,
    populate_village,
)

__all__ = [
    "layout_offset",
    "create_player",
    "create_npc",
    "create_house_zones",
    "populate_village",
]
