"""
Input action definitions.

Actions abstract raw keys into semantic actions. Game logic should use
Actions, not raw keys, so arrow keys and WASD drive the same movement
and rebinding never touches game code.

Usage:
    if input.is_action_pressed(Action.MOVE_LEFT):
        ...

    if input.is_action_just_pressed(Action.INTERACT):
        ...
"""

from enum import Enum, auto

import pygame


class Action(Enum):
    """Semantic input actions."""

    # Movement
    MOVE_UP = auto()
    MOVE_DOWN = auto()
    MOVE_LEFT = auto()
    MOVE_RIGHT = auto()

    # World interaction
    INTERACT = auto()

    # Dialogue overlay
    ADVANCE = auto()        # npc conversation: next line / reveal
    CANCEL = auto()         # close any overlay
    CLOSE_PANEL = auto()    # island panel dismiss

    # System
    QUIT = auto()


DEFAULT_KEY_BINDINGS: dict[Action, list[int]] = {
    Action.MOVE_UP: [pygame.K_UP, pygame.K_w],
    Action.MOVE_DOWN: [pygame.K_DOWN, pygame.K_s],
    Action.MOVE_LEFT: [pygame.K_LEFT, pygame.K_a],
    Action.MOVE_RIGHT: [pygame.K_RIGHT, pygame.K_d],

    Action.INTERACT: [pygame.K_SPACE, pygame.K_RETURN],

    Action.ADVANCE: [pygame.K_SPACE, pygame.K_RETURN],
    Action.CANCEL: [pygame.K_ESCAPE],
    Action.CLOSE_PANEL: [pygame.K_SPACE, pygame.K_ESCAPE],

    Action.QUIT: [pygame.K_F10],
}
