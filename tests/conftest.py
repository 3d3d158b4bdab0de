import os
import sys
from types import SimpleNamespace
import pytest
from unittest.mock import MagicMock, patch

# Ensure engine modules can be imported
sys.path.append(os.getcwd())

@pytest.fixture(autouse=True)
def mock_pygame():
    """
    Global mock for pygame to allow headless testing.
    Autoused for all tests to prevent accidental window creation.
    """
    with patch('pygame.init'), \
         patch('pygame.display'), \
         patch('pygame.event'), \
         patch('pygame.time'), \
         patch('pygame.mixer'), \
         patch('pygame.image'), \
         patch('pygame.key'), \
         patch('pygame.mouse'), \
         patch('pygame.Surface'):

        import pygame
        pygame.time.get_ticks = MagicMock(return_value=0)

        yield

@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from engine.core.events import EventBus
    return EventBus()

@pytest.fixture
def world(event_bus):
    """Fresh World for each test."""
    from engine.core.world import World
    return World(event_bus)

@pytest.fixture
def clock():
    """Game-time clock starting at 0."""
    from engine.core.clock import Clock
    return Clock()

@pytest.fixture
def input_handler(event_bus):
    from engine.input.handler import InputHandler
    return InputHandler(event_bus, screen_size=(800, 600))

@pytest.fixture
def resume_content():
    """Content descriptor with a two-line NPC and three houses."""
    from village.config import ContentDescriptor
    return ContentDescriptor.model_validate({
        "npc": {
            "name": "Sihong",
            "portrait": "portrait1",
            "dialogue": ["A", "B"],
            "dialogueShort": ["Back again?"],
        },
        "houses": {
            "aboutMe": {
                "title": "About Me",
                "entries": [{"title": "Hello", "description": "I build things."}],
            },
            "workExperience": {
                "title": "Work Experience",
                "entries": [{
                    "role": "Engineer", "company": "Example Corp",
                    "period": "2021 - Present", "highlights": ["Shipped it"],
                }],
            },
            "education": {
                "title": "Education",
                "entries": [{
                    "degree": "B.Sc.", "institution": "State U",
                    "year": 2021, "details": "CS",
                }],
            },
        },
    })

@pytest.fixture
def game(event_bus, input_handler):
    """Stand-in for engine.core.game.Game with the attributes scenes use."""
    return SimpleNamespace(
        width=800,
        height=600,
        event_bus=event_bus,
        input=input_handler,
        quit=MagicMock(),
    )

@pytest.fixture
def village(game, resume_content):
    """VillageScene on the default map with test content."""
    from village.scenes import VillageScene
    return VillageScene(game, content=resume_content)

@pytest.fixture
def keys(input_handler):
    """Feed key presses/releases the way pygame delivers them."""
    import pygame

    class Keys:
        def press(self, key):
            input_handler.process_event(SimpleNamespace(type=pygame.KEYDOWN, key=key))

        def release(self, key):
            input_handler.process_event(SimpleNamespace(type=pygame.KEYUP, key=key))

        def tap(self, key):
            self.press(key)
            self.release(key)

    return Keys()

@pytest.fixture
def click(input_handler):
    """Left mouse click at a screen position."""
    import pygame

    def _click(x, y):
        input_handler.process_event(
            SimpleNamespace(type=pygame.MOUSEBUTTONDOWN, button=1, pos=(x, y))
        )
        input_handler.process_event(
            SimpleNamespace(type=pygame.MOUSEBUTTONUP, button=1, pos=(x, y))
        )

    return _click

@pytest.fixture
def tick(input_handler):
    """One fixed update of a scene: sample input, then update."""
    def _tick(scene, dt=1 / 60, frames=1):
        for _ in range(frames):
            input_handler.update()
            scene.update(dt)

    return _tick
