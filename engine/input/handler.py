"""
Input handler with action-based abstraction.

Handles keyboard, mouse and touch input, translating raw pygame events
into semantic Actions and pointer Activations for game logic.

Mouse clicks and touch taps are normalized into a single Activation
event. SDL also synthesizes mouse events for touches; those carry
``event.touch`` and are ignored so a tap never fires twice.

Usage:
    # In game logic
    if input.is_action_just_pressed(Action.INTERACT):
        ...

    for activation in input.activations:
        player_target = activation.world
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto

import pygame

from engine.core.actions import Action, DEFAULT_KEY_BINDINGS
from engine.core.events import EventBus


logger = logging.getLogger(__name__)

# Max finger travel (px) for a touch to count as a tap
TAP_SLOP = 20.0


class InputEvent(Enum):
    """Input-specific events."""
    ACTION_PRESSED = auto()
    ACTION_RELEASED = auto()
    ACTIVATION = auto()
    POINTER_RESET = auto()


class PointerSource(Enum):
    MOUSE = auto()
    TOUCH = auto()


@dataclass(frozen=True)
class Activation:
    """
    A single primary-pointer activation (click or tap).

    Attributes:
        x, y: Screen position
        world_x, world_y: World position
        source: Device that produced it
    """
    x: float
    y: float
    world_x: float
    world_y: float
    source: PointerSource = PointerSource.MOUSE

    @property
    def screen(self) -> tuple[float, float]:
        return (self.x, self.y)

    @property
    def world(self) -> tuple[float, float]:
        return (self.world_x, self.world_y)


@dataclass
class PointerState:
    """Current primary pointer state."""
    x: float = 0.0
    y: float = 0.0
    is_down: bool = False
    # finger_id -> touch start position (screen px)
    touches: dict[int, tuple[float, float]] = field(default_factory=dict)


@dataclass
class InputState:
    """Complete input state for current frame."""
    actions_pressed: set[Action] = field(default_factory=set)
    actions_just_pressed: set[Action] = field(default_factory=set)
    actions_just_released: set[Action] = field(default_factory=set)

    keys_pressed: set[int] = field(default_factory=set)

    pointer: PointerState = field(default_factory=PointerState)

    # Activations delivered this frame
    activations: list[Activation] = field(default_factory=list)


class InputHandler:
    """
    Handles all input processing.

    process_event() is called for every pygame event as it arrives;
    update() is called once at the start of each fixed update and turns
    what arrived since the last call into this frame's edges and
    activations, publishing them on the event bus.
    """

    def __init__(
        self,
        event_bus: EventBus | None = None,
        screen_size: tuple[int, int] = (800, 600),
        touch_capable: bool = False,
    ):
        self.event_bus = event_bus
        self.screen_size = screen_size
        self.camera_offset: tuple[float, float] = (0.0, 0.0)

        self._state = InputState()
        self._prev_actions: set[Action] = set()
        # Presses seen since the last update, so a press+release between
        # two updates still produces an edge
        self._pressed_since_update: set[Action] = set()
        self._pending_activations: list[Activation] = []
        self._touch_capable = touch_capable

        self._key_bindings = {a: list(keys) for a, keys in DEFAULT_KEY_BINDINGS.items()}
        self._reverse_key_bindings: dict[int, list[Action]] = {}
        self._rebuild_reverse_bindings()

    def _rebuild_reverse_bindings(self) -> None:
        """Build reverse lookup: key -> actions."""
        self._reverse_key_bindings.clear()
        for action, keys in self._key_bindings.items():
            for key in keys:
                self._reverse_key_bindings.setdefault(key, []).append(action)

    # Public API

    def is_action_pressed(self, action: Action) -> bool:
        """Check if an action is currently held down."""
        return action in self._state.actions_pressed

    def is_action_just_pressed(self, action: Action) -> bool:
        """Check if an action was pressed since the previous update."""
        return action in self._state.actions_just_pressed

    @property
    def activations(self) -> list[Activation]:
        """Activations delivered by the latest update."""
        return list(self._state.activations)

    @property
    def pointer(self) -> PointerState:
        return self._state.pointer

    @property
    def touch_capable(self) -> bool:
        """True if configured for touch or a finger event has been seen."""
        return self._touch_capable

    def to_world(self, x: float, y: float) -> tuple[float, float]:
        ox, oy = self.camera_offset
        return (x + ox, y + oy)

    # Key binding management

    def bind_key(self, action: Action, key: int) -> None:
        """Add a key binding for an action."""
        keys = self._key_bindings.setdefault(action, [])
        if key not in keys:
            keys.append(key)
        self._rebuild_reverse_bindings()

    def unbind_key(self, action: Action, key: int) -> None:
        """Remove a key binding for an action."""
        if key in self._key_bindings.get(action, []):
            self._key_bindings[action].remove(key)
        self._rebuild_reverse_bindings()

    def get_bindings(self, action: Action) -> list[int]:
        return list(self._key_bindings.get(action, []))

    # Raw events

    def process_event(self, event: pygame.event.Event) -> None:
        """Process a pygame event."""
        if event.type == pygame.KEYDOWN:
            self._on_key_down(event.key)

        elif event.type == pygame.KEYUP:
            self._on_key_up(event.key)

        elif event.type == pygame.MOUSEMOTION:
            if not getattr(event, "touch", False):
                self._state.pointer.x, self._state.pointer.y = event.pos

        elif event.type == pygame.MOUSEBUTTONDOWN:
            # Synthesized from a touch: the finger events already cover it
            if getattr(event, "touch", False) or event.button != 1:
                return
            self._state.pointer.x, self._state.pointer.y = event.pos
            self._state.pointer.is_down = True
            self._queue_activation(*event.pos, source=PointerSource.MOUSE)

        elif event.type == pygame.MOUSEBUTTONUP:
            if getattr(event, "touch", False) or event.button != 1:
                return
            self._state.pointer.is_down = False

        elif event.type == pygame.FINGERDOWN:
            self._touch_capable = True
            pos = self._finger_pos(event)
            self._state.pointer.touches[event.finger_id] = pos
            self._state.pointer.x, self._state.pointer.y = pos
            self._state.pointer.is_down = True

        elif event.type == pygame.FINGERMOTION:
            self._state.pointer.x, self._state.pointer.y = self._finger_pos(event)

        elif event.type == pygame.FINGERUP:
            self._on_finger_up(event)

    def update(self) -> None:
        """
        Update input state for a new fixed update.

        Publishes ACTION_PRESSED / ACTION_RELEASED for each edge, then one
        ACTIVATION per pointer activation, in that order.
        """
        state = self._state
        state.actions_just_pressed = (
            (state.actions_pressed - self._prev_actions) | self._pressed_since_update
        )
        state.actions_just_released = self._prev_actions - state.actions_pressed
        self._prev_actions = state.actions_pressed.copy()
        self._pressed_since_update.clear()

        state.activations = self._pending_activations
        self._pending_activations = []

        if not self.event_bus:
            return

        for action in sorted(state.actions_just_pressed, key=lambda a: a.value):
            self.event_bus.publish(InputEvent.ACTION_PRESSED, action=action)
        for action in sorted(state.actions_just_released, key=lambda a: a.value):
            self.event_bus.publish(InputEvent.ACTION_RELEASED, action=action)
        for activation in list(state.activations):
            # A handler may reset the pointer mid-loop; later ones are dropped
            if activation not in state.activations:
                continue
            self.event_bus.publish(InputEvent.ACTIVATION, activation=activation)

    def reset_pointer(self) -> None:
        """
        Forget all pointer state: held buttons, touches in progress and
        activations not yet acted on.
        """
        pointer = self._state.pointer
        pointer.is_down = False
        pointer.touches.clear()
        self._pending_activations.clear()
        self._state.activations.clear()
        logger.debug("Pointer state reset")
        if self.event_bus:
            self.event_bus.publish(InputEvent.POINTER_RESET)

    # Internals

    def _queue_activation(self, x: float, y: float, source: PointerSource) -> None:
        wx, wy = self.to_world(x, y)
        self._pending_activations.append(
            Activation(x=float(x), y=float(y), world_x=wx, world_y=wy, source=source)
        )

    def _finger_pos(self, event: pygame.event.Event) -> tuple[float, float]:
        """Finger events carry normalized coordinates."""
        width, height = self.screen_size
        return (event.x * width, event.y * height)

    def _on_finger_up(self, event: pygame.event.Event) -> None:
        start = self._state.pointer.touches.pop(event.finger_id, None)
        x, y = self._finger_pos(event)
        self._state.pointer.x, self._state.pointer.y = x, y
        if not self._state.pointer.touches:
            self._state.pointer.is_down = False

        if start is None:
            return
        if abs(x - start[0]) < TAP_SLOP and abs(y - start[1]) < TAP_SLOP:
            self._queue_activation(x, y, source=PointerSource.TOUCH)

    def _on_key_down(self, key: int) -> None:
        self._state.keys_pressed.add(key)
        for action in self._reverse_key_bindings.get(key, []):
            self._state.actions_pressed.add(action)
            self._pressed_since_update.add(action)

    def _on_key_up(self, key: int) -> None:
        self._state.keys_pressed.discard(key)
        for action in self._reverse_key_bindings.get(key, []):
            still_pressed = any(
                other != key and other in self._state.keys_pressed
                for other in self._key_bindings.get(action, [])
            )
            if not still_pressed:
                self._state.actions_pressed.discard(action)
