"""
Transform components - position, facing and locomotion.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from pydantic import Field

from engine.core.component import Component, register_component


class Facing(Enum):
    """The four directions a character can face."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @staticmethod
    def from_velocity(vx: float, vy: float) -> Optional[Facing]:
        """
        Facing implied by a velocity, or None when standing still.

        Horizontal wins: left/right are checked before up/down.
        """
        if vx < 0:
            return Facing.LEFT
        if vx > 0:
            return Facing.RIGHT
        if vy < 0:
            return Facing.UP
        if vy > 0:
            return Facing.DOWN
        return None


class MovementState(Enum):
    IDLE = "idle"
    WALKING = "walking"


@register_component
class Transform(Component):
    """
    Position and facing in world space.

    Attributes:
        x: X position in pixels
        y: Y position in pixels
        facing: Last facing direction (kept while idle)
    """
    x: float = 0.0
    y: float = 0.0
    facing: Facing = Facing.DOWN

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    def distance_to(self, x: float, y: float) -> float:
        return math.hypot(x - self.x, y - self.y)


@register_component
class Locomotion(Component):
    """
    Player-driven movement state.

    Attributes:
        vx: Horizontal velocity (px/s)
        vy: Vertical velocity (px/s)
        speed: Walking speed (px/s)
        state: Idle or walking
        move_target: Click/tap-to-move destination, if any
        frozen: Set while a dialogue is open; forces zero velocity
    """
    vx: float = 0.0
    vy: float = 0.0
    speed: float = Field(default=120.0, gt=0)
    state: MovementState = MovementState.IDLE
    move_target: Optional[tuple[float, float]] = None
    frozen: bool = False

    @property
    def velocity(self) -> tuple[float, float]:
        return (self.vx, self.vy)

    def stop(self) -> None:
        """Zero velocity and go idle."""
        self.vx = 0.0
        self.vy = 0.0
        self.state = MovementState.IDLE
