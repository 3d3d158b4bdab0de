"""
Movement system - turns held keys and click/tap targets into velocity.

Keyboard always wins over click-to-move: any held direction cancels the
pending move target. Facing survives idle frames.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from engine.core import System, Entity
from engine.core.actions import Action
from village.components import Transform, Locomotion, Facing, MovementState

if TYPE_CHECKING:
    from engine.input.handler import InputHandler


DIAGONAL = 1 / math.sqrt(2)


@dataclass(frozen=True)
class DirectionFlags:
    """Merged held directions (arrow keys OR WASD)."""
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False

    @property
    def any(self) -> bool:
        return self.up or self.down or self.left or self.right

    @classmethod
    def from_input(cls, input_handler: InputHandler) -> DirectionFlags:
        return cls(
            up=input_handler.is_action_pressed(Action.MOVE_UP),
            down=input_handler.is_action_pressed(Action.MOVE_DOWN),
            left=input_handler.is_action_pressed(Action.MOVE_LEFT),
            right=input_handler.is_action_pressed(Action.MOVE_RIGHT),
        )


@dataclass(frozen=True)
class MovementResult:
    vx: float
    vy: float
    state: MovementState
    move_target: Optional[tuple[float, float]]


def resolve_velocity(
    flags: DirectionFlags,
    position: tuple[float, float],
    move_target: Optional[tuple[float, float]],
    speed: float,
    arrival_threshold: float,
) -> MovementResult:
    """
    Resolve one tick of movement input into a velocity.

    Args:
        flags: Held directions
        position: Current entity position
        move_target: Pending click/tap destination
        speed: Walking speed (px/s)
        arrival_threshold: Distance at which a move target counts as reached

    Returns:
        Velocity, movement state and the move target to keep
    """
    if flags.any:
        dx = (1.0 if flags.right else 0.0) - (1.0 if flags.left else 0.0)
        dy = (1.0 if flags.down else 0.0) - (1.0 if flags.up else 0.0)
        if dx != 0 and dy != 0:
            dx *= DIAGONAL
            dy *= DIAGONAL
        # Opposite keys cancel out: zero velocity, but still walking in place
        return MovementResult(dx * speed, dy * speed, MovementState.WALKING, None)

    if move_target is not None:
        tx, ty = move_target
        px, py = position
        if math.hypot(tx - px, ty - py) > arrival_threshold:
            angle = math.atan2(ty - py, tx - px)
            return MovementResult(
                _snap(math.cos(angle)) * speed,
                _snap(math.sin(angle)) * speed,
                MovementState.WALKING,
                move_target,
            )
        return MovementResult(0.0, 0.0, MovementState.IDLE, None)

    return MovementResult(0.0, 0.0, MovementState.IDLE, None)


def _snap(component: float) -> float:
    # cos(pi/2) is 6e-17, not 0; facing reads the sign
    return 0.0 if abs(component) < 1e-9 else component


def animation_key(state: MovementState, facing: Facing) -> tuple[str, bool]:
    """
    Sprite animation for a movement state and facing.

    Returns:
        (animation key, flip horizontally)
    """
    verb = "walk" if state == MovementState.WALKING else "idle"
    if facing in (Facing.LEFT, Facing.RIGHT):
        return f"hero-{verb}-side", facing == Facing.LEFT
    return f"hero-{verb}-{facing.value}", False


class MovementSystem(System):
    """
    Drives the controllable entity from input.

    Handles:
    - Keyboard movement with diagonal normalization
    - Click/tap-to-move targets
    - Facing and walking/idle state
    - Position integration clamped to world bounds
    - Zero velocity while frozen by an open dialogue
    """

    required_components = [Transform, Locomotion]
    priority = 30

    def __init__(
        self,
        input_handler: InputHandler,
        bounds: Optional[tuple[float, float, float, float]] = None,
        arrival_threshold: float = 6.0,
    ):
        super().__init__()
        self.input = input_handler
        self.bounds = bounds
        self.arrival_threshold = arrival_threshold
        # Return False while a dialogue owns input, or while pointer input
        # must not move the player
        self.movement_gate: Callable[[], bool] = lambda: True
        self.pointer_gate: Callable[[], bool] = lambda: True

    def process_entity(self, entity: Entity, dt: float) -> None:
        transform = entity.get(Transform)
        locomotion = entity.get(Locomotion)

        if locomotion.frozen or not self.movement_gate():
            locomotion.move_target = None
            locomotion.stop()
            return

        if self.pointer_gate():
            for activation in self.input.activations:
                locomotion.move_target = activation.world

        result = resolve_velocity(
            DirectionFlags.from_input(self.input),
            transform.position,
            locomotion.move_target,
            locomotion.speed,
            self.arrival_threshold,
        )
        locomotion.vx = result.vx
        locomotion.vy = result.vy
        locomotion.state = result.state
        locomotion.move_target = result.move_target

        facing = Facing.from_velocity(result.vx, result.vy)
        if facing is not None:
            transform.facing = facing

        self._integrate(transform, locomotion, dt)

    def _integrate(self, transform: Transform, locomotion: Locomotion, dt: float) -> None:
        x = transform.x + locomotion.vx * dt
        y = transform.y + locomotion.vy * dt

        if self.bounds:
            left, top, right, bottom = self.bounds
            x = min(max(x, left), right)
            y = min(max(y, top), bottom)

        transform.x = x
        transform.y = y
