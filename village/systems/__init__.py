"""
Village systems - logic processors, in tick order.

MovementSystem (30) -> ProximitySystem (20) -> InteractionSystem (10)
"""

from village.systems.movement import MovementSystem, DirectionFlags, resolve_velocity, animation_key
from village.systems.proximity import ProximitySystem
from village.systems.interaction import InteractionSystem

__all__ = [
    "MovementSystem",
    "DirectionFlags",
    "resolve_velocity",
    "animation_key",
    "ProximitySystem",
    "InteractionSystem",
]
