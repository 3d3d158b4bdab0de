"""
Core Game class with fixed timestep game loop.

The Game class is the main entry point for the engine. It handles:
- Window creation (pygame display surface)
- Fixed timestep update loop (deterministic logic and timers)
- Variable render loop
- Scene management delegation
"""

from __future__ import annotations

import logging
import time

import pygame

from engine.core.events import EngineEvent, EventBus
from engine.core.scene import SceneManager
from engine.input.handler import InputHandler


logger = logging.getLogger(__name__)


class GameConfig:
    """Configuration for the game engine."""

    def __init__(
        self,
        title: str = "Resume Village",
        width: int = 800,
        height: int = 600,
        target_fps: int = 60,
        fixed_timestep: float = 1 / 60,
        max_frame_skip: int = 5,
        resizable: bool = False,
        touch_input: bool = False,
    ):
        self.title = title
        self.width = width
        self.height = height
        self.target_fps = target_fps
        self.fixed_timestep = fixed_timestep
        self.max_frame_skip = max_frame_skip
        self.resizable = resizable
        self.touch_input = touch_input


class Game:
    """
    Main game engine class.

    Implements a fixed timestep game loop with variable rendering, so
    logic and timers advance in identical steps regardless of frame rate.

    Usage:
        game = Game(GameConfig(width=800, height=600))
        game.scene_manager.push(VillageScene(game, map_data, content))
        game.run()
    """

    def __init__(self, config: GameConfig | None = None):
        self.config = config or GameConfig()
        self._running = False

        pygame.init()

        flags = pygame.RESIZABLE if self.config.resizable else 0
        self.screen = pygame.display.set_mode(
            (self.config.width, self.config.height), flags
        )
        pygame.display.set_caption(self.config.title)

        self.event_bus = EventBus()
        self.input = InputHandler(
            self.event_bus,
            screen_size=(self.config.width, self.config.height),
            touch_capable=self.config.touch_input,
        )
        self.scene_manager = SceneManager(self)

        self._clock = pygame.time.Clock()
        self._accumulator = 0.0
        self._current_time = time.perf_counter()

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def run(self) -> None:
        """Start the main game loop."""
        self._running = True
        self._current_time = time.perf_counter()
        self.event_bus.publish(EngineEvent.GAME_START)
        logger.info("Game loop started (%dx%d)", self.width, self.height)

        while self._running:
            new_time = time.perf_counter()
            frame_time = min(new_time - self._current_time, 0.25)
            self._current_time = new_time
            self._accumulator += frame_time

            self._process_events()

            updates = 0
            while self._accumulator >= self.config.fixed_timestep:
                self._fixed_update(self.config.fixed_timestep)
                self._accumulator -= self.config.fixed_timestep
                updates += 1
                if updates >= self.config.max_frame_skip:
                    self._accumulator = 0
                    break

            alpha = self._accumulator / self.config.fixed_timestep
            self._render(alpha)
            self._clock.tick(self.config.target_fps)

            if self.scene_manager.is_empty:
                self.quit()

        self._shutdown()

    def quit(self) -> None:
        """Request game shutdown."""
        self._running = False

    def _process_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit()
            elif event.type == pygame.VIDEORESIZE:
                self.input.screen_size = (event.w, event.h)
                self.scene_manager.on_resize(event.w, event.h)
                self.event_bus.publish(EngineEvent.WINDOW_RESIZED, width=event.w, height=event.h)
            else:
                self.input.process_event(event)
                self.scene_manager.handle_event(event)

    def _fixed_update(self, dt: float) -> None:
        self.input.update()
        self.scene_manager.update(dt)

    def _render(self, alpha: float) -> None:
        self.screen.fill((0, 0, 0))
        self.scene_manager.render(self.screen, alpha)
        pygame.display.flip()

    def _shutdown(self) -> None:
        self.event_bus.publish(EngineEvent.GAME_QUIT)
        self.scene_manager.clear()
        self.scene_manager.update(0.0)
        pygame.quit()
        logger.info("Game shut down")
