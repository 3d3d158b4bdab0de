"""
Village configuration: tunables plus the map and content descriptors.

The descriptors mirror the JSON documents loaded by the engine Database
(``map-data.json`` and ``resume-data.json``). Both are read-only once
parsed.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from engine.resources.database import Database


logger = logging.getLogger(__name__)

# Width the default village layout was authored for
LAYOUT_WIDTH = 800


class VillageSettings(BaseModel):
    """
    Tunables for movement, proximity, dialogue and suppression windows.

    Attributes:
        player_speed: Hero speed (px/s)
        arrival_threshold: Click-to-move stops within this distance (px)
        npc_radius: NPC interaction radius (px)
        npc_tap_radius: A tap must land this close to the NPC to talk (px)
        typewriter_interval: Seconds per revealed character
        pointer_cooldown: Seconds pointer input is swallowed after a close
        prompt_pulse_period: Half-cycle of the NPC prompt pulse (s)
        world_width: World width (px)
        world_height: World height (px)
        npc_position: NPC position in layout coordinates
    """
    model_config = ConfigDict(frozen=True)

    player_speed: float = Field(default=120.0, gt=0)
    arrival_threshold: float = Field(default=6.0, ge=0)
    npc_radius: float = Field(default=50.0, gt=0)
    npc_tap_radius: float = Field(default=60.0, gt=0)
    typewriter_interval: float = Field(default=0.03, gt=0)
    pointer_cooldown: float = Field(default=0.2, ge=0)
    prompt_pulse_period: float = Field(default=0.6, gt=0)
    world_width: float = 800.0
    world_height: float = 600.0
    npc_position: tuple[float, float] = (400.0, 350.0)


# Map descriptor

class Point(BaseModel):
    x: float
    y: float


class ZoneRect(BaseModel):
    """Interaction rectangle, centered on (x, y)."""
    x: float
    y: float
    w: float = Field(gt=0)
    h: float = Field(gt=0)


class HouseConfig(BaseModel):
    label: str
    x: float
    y: float
    zone: ZoneRect


class MapDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    spawn: Point = Point(x=400, y=450)
    # Insertion order is the zone registry order
    houses: dict[str, HouseConfig] = Field(default_factory=dict)

    @classmethod
    def default(cls) -> MapDescriptor:
        """The built-in three-house village."""
        return cls.model_validate({
            "spawn": {"x": 400, "y": 450},
            "houses": {
                "aboutMe": {
                    "label": "About Me",
                    "x": 150, "y": 240,
                    "zone": {"x": 150, "y": 280, "w": 100, "h": 60},
                },
                "workExperience": {
                    "label": "Work Experience",
                    "x": 400, "y": 140,
                    "zone": {"x": 400, "y": 180, "w": 100, "h": 60},
                },
                "education": {
                    "label": "Education",
                    "x": 650, "y": 240,
                    "zone": {"x": 650, "y": 280, "w": 100, "h": 60},
                },
            },
        })


# Content descriptor

class HouseContent(BaseModel):
    title: str = ""
    # Shape depends on the house; parsed by village.dialogue.cards
    entries: list[Any] = Field(default_factory=list)


class NpcContent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = "NPC"
    portrait: Optional[str] = None
    dialogue: list[str] = Field(default_factory=list)
    dialogue_short: Optional[list[str]] = Field(default=None, alias="dialogueShort")

    def lines_for(self, talked_before: bool) -> list[str]:
        """First-visit lines, or the short variant once talked to."""
        if talked_before and self.dialogue_short:
            return list(self.dialogue_short)
        return list(self.dialogue)


class ContentDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    houses: dict[str, HouseContent] = Field(default_factory=dict)
    npc: Optional[NpcContent] = None


def load_descriptors(database: Database) -> tuple[MapDescriptor, Optional[ContentDescriptor]]:
    """
    Build descriptors from a loaded Database.

    A missing or invalid map falls back to the built-in village. Missing or
    invalid content yields None; interactions then find nothing to open.
    """
    map_descriptor = MapDescriptor.default()
    if database.map_data is not None:
        try:
            map_descriptor = MapDescriptor.model_validate(database.map_data)
        except ValidationError as e:
            logger.error("Invalid map data, using built-in village: %s", e)

    content: Optional[ContentDescriptor] = None
    if database.resume_data is not None:
        try:
            content = ContentDescriptor.model_validate(database.resume_data)
        except ValidationError as e:
            logger.error("Invalid resume data, interactions disabled: %s", e)

    return map_descriptor, content
