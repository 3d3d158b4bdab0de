"""Input handling module."""

from engine.input.handler import (
    InputHandler,
    InputState,
    PointerState,
    InputEvent,
    Activation,
    PointerSource,
)

__all__ = [
    "InputHandler",
    "InputState",
    "PointerState",
    "InputEvent",
    "Activation",
    "PointerSource",
]
