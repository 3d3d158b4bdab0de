"""
Village engine

A small pygame engine: fixed-timestep loop, ECS, typed event bus,
game-time timers and action-based input.

Quick Start:
    from engine.core import Game, GameConfig, Scene

    class MyScene(Scene):
        def update(self, dt: float) -> None:
            pass

        def render(self, surface, alpha: float) -> None:
            pass

    game = Game(GameConfig(title="My Game"))
    game.scene_manager.push(MyScene(game))
    game.run()
"""

__version__ = "0.1.0"

from engine.core import (
    Game,
    GameConfig,
    Scene,
    SceneManager,
    Entity,
    Component,
    register_component,
    System,
    World,
    EventBus,
    Event,
    EngineEvent,
    Clock,
    Action,
)

from engine.input import InputHandler

__all__ = [
    "Game",
    "GameConfig",
    "Scene",
    "SceneManager",
    "Entity",
    "Component",
    "register_component",
    "System",
    "World",
    "EventBus",
    "Event",
    "EngineEvent",
    "Clock",
    "InputHandler",
    "Action",
]
