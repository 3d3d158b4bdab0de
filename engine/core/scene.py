"""
Scene management system.

Scenes represent different game states. The SceneManager keeps a stack
of scenes; the top one receives updates, events and rendering.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import pygame

from engine.core.events import EngineEvent

if TYPE_CHECKING:
    from engine.core.game import Game
    from engine.core.world import World


logger = logging.getLogger(__name__)


class Scene(ABC):
    """
    Abstract base class for game scenes.

    Lifecycle:
        1. __init__: Called when scene is created
        2. on_enter: Called when scene becomes active
        3. update/render: Called each frame while active
        4. on_exit: Called when scene is removed or covered
        5. on_destroy: Called when scene is permanently removed
    """

    def __init__(self, game: Game):
        self.game = game
        self.world: World | None = None
        self._is_active = False

    @property
    def is_active(self) -> bool:
        return self._is_active

    def on_enter(self) -> None:
        self._is_active = True

    def on_exit(self) -> None:
        self._is_active = False

    def on_destroy(self) -> None:
        if self.world:
            self.world.clear()

    def on_resize(self, width: int, height: int) -> None:
        pass

    @abstractmethod
    def update(self, dt: float) -> None:
        """Update scene logic (fixed timestep)."""

    @abstractmethod
    def render(self, surface: pygame.Surface, alpha: float) -> None:
        """Draw the scene onto surface."""

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle a raw pygame event.

        Returns:
            True if the event was consumed
        """
        return False


class SceneManager:
    """
    Manages a stack of scenes.

    Stack operations are deferred to the start of the next update so a
    scene can push or pop from inside its own update.
    """

    def __init__(self, game: Game):
        self.game = game
        self._stack: list[Scene] = []
        self._pending_operations: list[tuple[str, Any]] = []

    @property
    def current(self) -> Scene | None:
        return self._stack[-1] if self._stack else None

    @property
    def is_empty(self) -> bool:
        return not self._stack and not self._pending_operations

    def push(self, scene: Scene) -> None:
        self._pending_operations.append(("push", scene))

    def pop(self) -> None:
        self._pending_operations.append(("pop", None))

    def clear(self) -> None:
        self._pending_operations.append(("clear", None))

    def update(self, dt: float) -> None:
        self._process_pending()
        if self.current:
            self.current.update(dt)

    def render(self, surface: pygame.Surface, alpha: float) -> None:
        if self.current:
            self.current.render(surface, alpha)

    def handle_event(self, event: pygame.event.Event) -> None:
        if self.current:
            self.current.handle_event(event)

    def on_resize(self, width: int, height: int) -> None:
        for scene in self._stack:
            scene.on_resize(width, height)

    def _process_pending(self) -> None:
        while self._pending_operations:
            op, scene = self._pending_operations.pop(0)

            if op == "push":
                if self._stack:
                    self._stack[-1].on_exit()
                self._stack.append(scene)
                scene.on_enter()
                logger.info("Scene pushed: %s", type(scene).__name__)
                self.game.event_bus.publish(EngineEvent.SCENE_PUSHED, scene=scene)

            elif op == "pop":
                if self._stack:
                    self._remove_top()
                    if self._stack:
                        self._stack[-1].on_enter()

            elif op == "clear":
                while self._stack:
                    self._remove_top()

    def _remove_top(self) -> None:
        scene = self._stack.pop()
        scene.on_exit()
        scene.on_destroy()
        logger.info("Scene popped: %s", type(scene).__name__)
        self.game.event_bus.publish(EngineEvent.SCENE_POPPED, scene=scene)
