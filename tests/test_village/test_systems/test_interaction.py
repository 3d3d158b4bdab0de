import logging
import pytest
import pygame
from engine.core.events import UIEvent
from engine.input.handler import InputHandler
from village.components import Transform, Locomotion
from village.dialogue import DialogueMode, RevealState
from village.scenes import VillageScene

NEAR_NPC = (400, 370)
FAR_AWAY = (400, 520)
ABOUT_ME = (150, 280)
NPC_SCREEN = (400, 350)
BACKDROP = (10, 10)

def place(scene, position):
    t = scene.player.get(Transform)
    t.x, t.y = position

@pytest.fixture
def closures(event_bus):
    closed = []
    event_bus.subscribe(UIEvent.DIALOG_ENDED, lambda e: closed.append(e), weak=False)
    return closed

def open_npc(village, keys, tick):
    place(village, NEAR_NPC)
    tick(village)
    keys.tap(pygame.K_SPACE)
    tick(village)
    assert village.overlay.is_open

def test_key_opens_npc_dialogue(village, keys, tick):
    open_npc(village, keys, tick)

    session = village.overlay.session
    assert session.mode is DialogueMode.NPC
    assert session.title == "Sihong"
    assert session.request.lines == ("A", "B")
    assert village.interaction_system.npc_talked_once

def test_enter_key_also_interacts(village, keys, tick):
    place(village, NEAR_NPC)
    tick(village)
    keys.tap(pygame.K_RETURN)
    tick(village)

    assert village.overlay.is_open

def test_key_does_nothing_out_of_range(village, keys, tick):
    place(village, FAR_AWAY)
    keys.tap(pygame.K_SPACE)
    tick(village)

    assert not village.overlay.is_open

def test_zone_wins_over_npc(village, keys, tick):
    place(village, ABOUT_ME)
    tick(village)
    keys.tap(pygame.K_SPACE)
    tick(village)

    session = village.overlay.session
    assert session.mode is DialogueMode.ISLAND
    assert session.title == "About Me"

def test_two_stage_advance_then_close(village, keys, tick, closures):
    open_npc(village, keys, tick)
    session = village.overlay.session
    assert session.reveal is RevealState.REVEALING

    # First trigger completes "A"
    keys.tap(pygame.K_SPACE)
    tick(village)
    assert session.line_index == 0
    assert session.reveal is RevealState.REVEALED
    assert session.visible_text == "A"

    # Second trigger moves to "B"
    keys.tap(pygame.K_SPACE)
    tick(village)
    assert session.line_index == 1

    tick(village, frames=5)
    assert session.visible_text == "B"

    # Third trigger closes
    keys.tap(pygame.K_SPACE)
    tick(village)
    assert not village.overlay.is_open
    assert len(closures) == 1

def test_velocity_zero_while_open(village, keys, click, tick):
    open_npc(village, keys, tick)
    keys.press(pygame.K_RIGHT)

    for _ in range(30):
        tick(village)
        loco = village.player.get(Locomotion)
        assert loco.velocity == (0.0, 0.0)
        assert loco.frozen

    assert village.player.get(Transform).position == NEAR_NPC

def test_retrigger_after_walking_away(village, keys, tick, closures):
    open_npc(village, keys, tick)
    keys.tap(pygame.K_ESCAPE)
    tick(village)

    # Still in range: suppressed
    keys.tap(pygame.K_SPACE)
    tick(village)
    assert not village.overlay.is_open
    assert village.interaction_system.interaction_cooldown

    place(village, FAR_AWAY)
    tick(village, frames=20)
    assert not village.interaction_system.interaction_cooldown
    assert not village.interaction_system.pointer_cooldown

    place(village, NEAR_NPC)
    tick(village)
    keys.tap(pygame.K_SPACE)
    tick(village)

    assert village.overlay.is_open
    assert village.overlay.session.request.lines == ("Back again?",)

def test_closure_resets_pointer_and_unfreezes(village, keys, click, tick, input_handler):
    open_npc(village, keys, tick)
    input_handler.pointer.is_down = True

    keys.tap(pygame.K_ESCAPE)
    tick(village)

    loco = village.player.get(Locomotion)
    assert not input_handler.pointer.is_down
    assert not loco.frozen
    assert loco.move_target is None
    assert village.interaction_system.pointer_cooldown

def test_closing_tap_does_not_move_player(village, keys, click, tick):
    open_npc(village, keys, tick)

    click(*BACKDROP)
    tick(village)

    assert not village.overlay.is_open
    assert village.player.get(Locomotion).move_target is None

def test_pointer_cooldown_then_walk_away_pending(village, keys, click, tick):
    open_npc(village, keys, tick)
    keys.tap(pygame.K_ESCAPE)
    tick(village)
    system = village.interaction_system

    # Inside the pointer window: taps are swallowed entirely
    click(*NPC_SCREEN)
    tick(village)
    assert not village.overlay.is_open
    assert village.player.get(Locomotion).move_target is None

    tick(village, frames=15)
    assert not system.pointer_cooldown
    assert system.interaction_cooldown

    # Pointer window over, walk-away still pending: the tap moves but never interacts
    click(*NPC_SCREEN)
    tick(village)
    assert not village.overlay.is_open
    assert village.player.get(Locomotion).move_target == NPC_SCREEN

def test_tap_near_npc_opens_dialogue(village, click, tick):
    place(village, NEAR_NPC)
    tick(village)
    click(*NPC_SCREEN)
    tick(village)

    assert village.overlay.is_open
    assert village.overlay.session.mode is DialogueMode.NPC
    assert village.player.get(Locomotion).move_target is None

def test_tap_away_from_npc_only_moves(village, click, tick):
    place(village, NEAR_NPC)
    tick(village)
    click(470, 350)
    tick(village)

    assert not village.overlay.is_open
    assert village.player.get(Locomotion).move_target == (470, 350)

def test_tap_anywhere_in_zone_opens_island(village, click, tick):
    place(village, ABOUT_ME)
    tick(village)
    click(700, 50)
    tick(village)

    assert village.overlay.is_open
    assert village.overlay.session.mode is DialogueMode.ISLAND
    loco = village.player.get(Locomotion)
    assert loco.move_target is None
    assert loco.frozen

def test_tap_on_prompt_interacts(village, click, tick):
    place(village, NEAR_NPC)
    tick(village)
    assert village.interaction_system.prompt_text == "Press SPACE to talk"

    # Far from the NPC, but on the prompt
    click(400, 560)
    tick(village)

    assert village.overlay.is_open

def test_prompt_text(village, tick, event_bus):
    changes = []
    event_bus.subscribe(UIEvent.PROMPT_CHANGED, lambda e: changes.append(e["text"]), weak=False)

    place(village, ABOUT_ME)
    tick(village)
    assert village.interaction_system.prompt_text == "Press SPACE to enter About Me"

    place(village, NEAR_NPC)
    tick(village)
    assert village.interaction_system.prompt_text == "Press SPACE to talk"

    place(village, FAR_AWAY)
    tick(village)
    assert village.interaction_system.prompt_text is None

    assert changes == ["Press SPACE to enter About Me", "Press SPACE to talk", None]

def test_prompt_text_on_touch_devices(game, event_bus, resume_content):
    game.input = InputHandler(event_bus, touch_capable=True)
    scene = VillageScene(game, content=resume_content)

    place(scene, NEAR_NPC)
    scene.input.update()
    scene.update(1 / 60)

    assert scene.interaction_system.prompt_text == "Tap to talk"

def test_prompt_hidden_while_open(village, keys, tick):
    open_npc(village, keys, tick)
    assert village.interaction_system.prompt_text is None

def test_missing_npc_content_is_dropped(game, keys, tick, caplog):
    scene = VillageScene(game, content=None)
    place(scene, NEAR_NPC)
    tick(scene)

    with caplog.at_level(logging.DEBUG, logger="village.systems.interaction"):
        keys.tap(pygame.K_SPACE)
        tick(scene)

    assert not scene.overlay.is_open
    assert not scene.player.get(Locomotion).frozen
    assert "No NPC dialogue" in caplog.text

def test_missing_house_content_is_dropped(game, keys, tick):
    from village.config import ContentDescriptor
    scene = VillageScene(game, content=ContentDescriptor(houses={}))
    place(scene, ABOUT_ME)
    tick(scene)
    keys.tap(pygame.K_SPACE)
    tick(scene)

    assert not scene.overlay.is_open

def test_open_clears_move_target(village, click, keys, tick):
    place(village, ABOUT_ME)
    village.player.get(Locomotion).move_target = (300, 280)
    tick(village)
    keys.tap(pygame.K_SPACE)
    tick(village)

    assert village.overlay.is_open
    assert village.player.get(Locomotion).move_target is None

def test_quit_action(village, game, keys, tick):
    keys.tap(pygame.K_F10)
    tick(village)
    game.quit.assert_called_once()

def test_retrigger_same_tick_suppressed(village, keys, tick, closures):
    open_npc(village, keys, tick)
    tick(village, frames=5)
    keys.tap(pygame.K_SPACE)
    tick(village, frames=5)
    assert village.overlay.session.is_last_line

    # The Space press that closes is also an INTERACT edge in range
    keys.tap(pygame.K_SPACE)
    tick(village)

    assert not village.overlay.is_open
    assert len(closures) == 1
    assert village.interaction_system.interaction_cooldown

    tick(village, frames=30)
    assert not village.overlay.is_open

def test_pointer_cooldown_is_replaced_not_stacked(village, keys, tick):
    from village.dialogue import DialogueRequest
    system = village.interaction_system
    open_npc(village, keys, tick)
    keys.tap(pygame.K_ESCAPE)
    tick(village)
    first = system._pointer_timer

    village.overlay.open(DialogueRequest.npc("Sihong", ["A"]))
    village.overlay.close()

    assert first.cancelled
    assert system._pointer_timer is not first
    assert system.pointer_cooldown
    assert village.clock.pending_count() == 1

def test_replaced_session_keeps_player_still(village, keys, tick):
    from village.dialogue import DialogueRequest
    open_npc(village, keys, tick)

    village.overlay.open(DialogueRequest.npc("Other", ["X"]))
    keys.press(pygame.K_LEFT)
    tick(village)

    assert village.overlay.is_open
    assert village.player.get(Locomotion).frozen
    assert village.player.get(Transform).position == NEAR_NPC

    # Closing the replacement releases the player again
    keys.tap(pygame.K_ESCAPE)
    tick(village)
    assert not village.overlay.is_open
    assert not village.player.get(Locomotion).frozen

    tick(village)
    assert village.player.get(Transform).x < NEAR_NPC[0]

def test_interacting_tap_does_not_move_player(village, click, tick):
    place(village, (400, 390))
    tick(village)

    click(430, 350)
    tick(village)

    assert village.overlay.is_open
    assert village.player.get(Transform).position == (400, 390)
    assert village.player.get(Locomotion).move_target is None

def test_interacting_tap_in_zone_does_not_move_player(village, click, tick):
    place(village, ABOUT_ME)
    tick(village)

    click(700, 50)
    tick(village)

    assert village.overlay.is_open
    assert village.player.get(Transform).position == ABOUT_ME
