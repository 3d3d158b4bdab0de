"""
Village events.

Published by the village systems on the shared EventBus, next to the
engine's EngineEvent/UIEvent/InputEvent types.
"""

from enum import Enum, auto


class VillageEvent(Enum):
    """Proximity and interaction events."""
    # Proximity (payload: entity)
    NPC_IN_RANGE = auto()
    NPC_OUT_OF_RANGE = auto()
    # Zones (payload: key, label)
    ZONE_ENTERED = auto()
    ZONE_EXITED = auto()
    # Interaction (payload: mode, key)
    INTERACTION_OPENED = auto()
