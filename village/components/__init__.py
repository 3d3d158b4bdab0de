"""
Village components - data-only component definitions.

All components are Pydantic models containing only data.
Logic lives in Systems, not in components.
"""

from village.components.transform import Transform, Locomotion, Facing, MovementState
from village.components.interaction import InteractionZone, ProximityTarget, PromptPulse
from village.components.dialog import DialogSpeaker

__all__ = [
    # Transform
    "Transform",
    "Locomotion",
    "Facing",
    "MovementState",
    # Interaction
    "InteractionZone",
    "ProximityTarget",
    "PromptPulse",
    # Dialog
    "DialogSpeaker",
]
