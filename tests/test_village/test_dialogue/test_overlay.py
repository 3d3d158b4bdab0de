import pytest
from engine.core.actions import Action
from engine.core.events import UIEvent
from engine.input.handler import Activation, InputEvent
from village.dialogue import (
    DialogueMode,
    DialogueOverlay,
    DialogueRequest,
    OverlayHit,
    OverlayLayout,
    RevealState,
    SessionState,
)

@pytest.fixture
def layout():
    return OverlayLayout(800, 600)

@pytest.fixture
def overlay(event_bus, clock, layout):
    return DialogueOverlay(event_bus, clock, layout, typewriter_interval=0.03)

@pytest.fixture
def closures(event_bus):
    closed = []
    event_bus.subscribe(UIEvent.DIALOG_ENDED, lambda e: closed.append(e), weak=False)
    return closed

def npc(*lines):
    return DialogueRequest.npc("Guide", list(lines), portrait="portrait1")

def island(key="aboutMe", title="About Me"):
    return DialogueRequest.island(key, title, [{"title": "Hi", "description": "There"}])

def press(event_bus, action):
    return event_bus.publish(InputEvent.ACTION_PRESSED, action=action)

def tap(event_bus, x, y):
    return event_bus.publish(
        InputEvent.ACTIVATION, activation=Activation(x=x, y=y, world_x=x, world_y=y)
    )

def test_typewriter_reveals_one_char_per_interval(overlay, clock):
    session = overlay.open(npc("Hello"))
    assert session.state is SessionState.ACTIVE
    assert session.visible_text == ""

    clock.advance(0.035)
    assert session.visible_text == "H"

    clock.advance(0.06)
    assert session.visible_text == "Hel"

    clock.advance(1.0)
    assert session.visible_text == "Hello"
    assert session.reveal is RevealState.REVEALED
    assert session.typewriter is None

def test_two_stage_advance(overlay, closures):
    session = overlay.open(npc("A", "B"))

    overlay.advance()
    assert session.line_index == 0
    assert session.visible_text == "A"
    assert session.reveal is RevealState.REVEALED

    overlay.advance()
    assert session.line_index == 1
    assert session.reveal is RevealState.REVEALING

    overlay.advance()
    assert session.visible_text == "B"
    assert overlay.is_open

    overlay.advance()
    assert not overlay.is_open
    assert len(closures) == 1

def test_lines_with_typewriter_done(overlay, clock, closures):
    overlay.open(npc("A", "B"))

    clock.advance(0.035)
    overlay.advance()
    assert overlay.session.line_index == 1

    clock.advance(0.035)
    overlay.advance()
    assert not overlay.is_open
    assert len(closures) == 1

def test_no_reveal_after_close(overlay, clock):
    session = overlay.open(npc("A long line of text"))
    clock.advance(0.1)
    shown = session.visible_chars
    assert shown == 3

    overlay.close()
    clock.advance(5.0)

    assert session.visible_chars == shown
    assert session.state is SessionState.CLOSED
    assert clock.pending_count() == 0

def test_open_while_open_replaces_session(overlay, event_bus, closures):
    first = overlay.open(npc("A"))
    second = overlay.open(island())

    assert overlay.session is second
    assert first.state is SessionState.CLOSED
    assert len(closures) == 1
    assert event_bus.listener_count(InputEvent.ACTION_PRESSED) == 1
    assert event_bus.listener_count(InputEvent.ACTIVATION) == 1
    assert first.subscriptions == []

def test_close_when_closed_is_noop(overlay, closures):
    overlay.close()
    overlay.open(npc("A"))
    overlay.close()
    overlay.close()

    assert len(closures) == 1

def test_close_releases_input_subscriptions(overlay, event_bus):
    overlay.open(npc("A"))
    assert event_bus.listener_count(InputEvent.ACTION_PRESSED) == 1

    overlay.close()

    assert event_bus.listener_count(InputEvent.ACTION_PRESSED) == 0
    assert event_bus.listener_count(InputEvent.ACTIVATION) == 0

def test_started_signal(overlay, event_bus):
    started = []
    event_bus.subscribe(UIEvent.DIALOG_STARTED, lambda e: started.append(e["mode"]), weak=False)

    overlay.open(island())

    assert started == [DialogueMode.ISLAND]

def test_npc_keys(overlay, event_bus, closures):
    session = overlay.open(npc("A", "B"))

    event = press(event_bus, Action.ADVANCE)
    assert event.consumed
    assert session.reveal is RevealState.REVEALED

    # Island-only dismiss does nothing in a conversation
    press(event_bus, Action.CLOSE_PANEL)
    assert overlay.is_open

    press(event_bus, Action.CANCEL)
    assert not overlay.is_open
    assert len(closures) == 1

@pytest.mark.parametrize("action", [Action.CLOSE_PANEL, Action.CANCEL])
def test_island_keys_close(overlay, event_bus, closures, action):
    overlay.open(island())
    press(event_bus, Action.ADVANCE)
    assert overlay.is_open

    press(event_bus, action)
    assert not overlay.is_open
    assert len(closures) == 1

def test_escape_publishes_two_actions_but_closes_once(overlay, event_bus, closures):
    overlay.open(island())
    press(event_bus, Action.CANCEL)
    press(event_bus, Action.CLOSE_PANEL)

    assert len(closures) == 1

def test_npc_taps(overlay, event_bus, layout, closures):
    session = overlay.open(npc("A", "B"))
    box = layout.dialogue_box

    tap(event_bus, box.x + box.width / 2, box.y + box.height / 2)
    assert session.reveal is RevealState.REVEALED

    tap(event_bus, box.x + box.width / 2, box.y + box.height / 2)
    assert session.line_index == 1

    tap(event_bus, 10, 10)
    assert not overlay.is_open
    assert len(closures) == 1

def test_npc_close_button(overlay, event_bus, layout):
    overlay.open(npc("A", "B"))
    button = layout.close_button(DialogueMode.NPC)

    tap(event_bus, button.x + 4, button.y + 4)

    assert not overlay.is_open

def test_island_taps(overlay, event_bus, layout, closures):
    overlay.open(island())
    panel = layout.panel

    event = tap(event_bus, panel.x + panel.width / 2, panel.y + panel.height / 2)
    assert event.consumed
    assert overlay.is_open

    bar = layout.close_bar
    tap(event_bus, bar.x + bar.width / 2, bar.y + bar.height / 2)
    assert not overlay.is_open

    overlay.open(island())
    tap(event_bus, 5, 300)
    assert not overlay.is_open
    assert len(closures) == 2

def test_footer_text(overlay):
    session = overlay.open(npc("A", "B"))
    assert session.footer_text == "Tap or [Space] for next ▸"

    overlay.advance()
    overlay.advance()
    assert session.footer_text == "Tap or [Space] to close"

    session = overlay.open(island())
    assert session.footer_text == "Tap here or press Esc to close"

def test_island_title_fallback(overlay):
    session = overlay.open(island(title=""))
    assert session.title == "Island"

def test_island_advance_closes(overlay, closures):
    overlay.open(island())
    overlay.advance()
    assert not overlay.is_open
    assert len(closures) == 1

def test_empty_line_needs_no_typewriter(overlay, clock):
    session = overlay.open(npc(""))
    assert session.reveal is RevealState.REVEALED
    assert clock.pending_count() == 0

    overlay.advance()
    assert not overlay.is_open

def test_line_shown_signal(overlay, event_bus, clock):
    shown = []
    event_bus.subscribe(UIEvent.DIALOG_LINE_SHOWN, lambda e: shown.append(e["text"]), weak=False)

    overlay.open(npc("Hi", "Bye"))
    clock.advance(0.07)
    overlay.advance()
    overlay.advance()

    assert shown == ["Hi", "Bye"]

def test_layout_regions(layout):
    assert layout.hit(DialogueMode.NPC, 400, 510) is OverlayHit.CONTENT
    assert layout.hit(DialogueMode.NPC, 400, 100) is OverlayHit.BACKDROP
    assert layout.hit(DialogueMode.ISLAND, 400, 300) is OverlayHit.CONTENT
    assert layout.hit(DialogueMode.ISLAND, 400, 520) is OverlayHit.CLOSE_BAR
    button = layout.close_button(DialogueMode.ISLAND)
    assert layout.hit(DialogueMode.ISLAND, button.x + 1, button.y + 1) is OverlayHit.CLOSE_BUTTON

def test_layout_resize(layout):
    layout.resize(400, 300)
    assert layout.dialogue_box.right <= 400
    assert layout.panel.bottom <= 300
