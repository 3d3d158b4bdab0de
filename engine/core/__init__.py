"""
Core engine module.

Exports:
- Game, GameConfig: Main game class and configuration
- Scene, SceneManager: Scene management
- Entity, Component, System, World: ECS
- EventBus, Event, Subscription, EngineEvent, UIEvent: Event system
- Clock, Timer: Game-time timers
- Action: Input actions
"""

from engine.core.game import Game, GameConfig
from engine.core.scene import Scene, SceneManager
from engine.core.entity import Entity
from engine.core.component import Component, register_component, get_component_type
from engine.core.system import System
from engine.core.world import World
from engine.core.events import EventBus, Event, Subscription, EngineEvent, UIEvent
from engine.core.clock import Clock, Timer
from engine.core.actions import Action
from engine.core.errors import EngineError, DataError

__all__ = [
    # Game
    "Game",
    "GameConfig",
    # Scene
    "Scene",
    "SceneManager",
    # ECS
    "Entity",
    "Component",
    "register_component",
    "get_component_type",
    "System",
    "World",
    # Events
    "EventBus",
    "Event",
    "Subscription",
    "EngineEvent",
    "UIEvent",
    # Timers
    "Clock",
    "Timer",
    # Input
    "Action",
    # Errors
    "EngineError",
    "DataError",
]
