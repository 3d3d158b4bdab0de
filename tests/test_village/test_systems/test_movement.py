import itertools
import math
import pytest
import pygame
from village.components import Transform, Locomotion, Facing, MovementState
from village.systems.movement import (
    DirectionFlags,
    MovementSystem,
    animation_key,
    resolve_velocity,
)

SPEED = 120.0
THRESHOLD = 6.0

@pytest.fixture
def hero(world):
    e = world.create_entity("player")
    e.add_tag("player")
    e.add(Transform(x=100, y=100))
    e.add(Locomotion(speed=SPEED))
    return e

@pytest.fixture
def movement(world, input_handler):
    system = MovementSystem(input_handler, bounds=(0, 0, 800, 600), arrival_threshold=THRESHOLD)
    world.add_system(system)
    return system

def all_flag_combinations():
    for up, down, left, right in itertools.product([False, True], repeat=4):
        yield DirectionFlags(up=up, down=down, left=left, right=right)

@pytest.mark.parametrize("flags", list(all_flag_combinations()))
def test_diagonal_speed_equals_axial_speed(flags):
    result = resolve_velocity(flags, (0, 0), None, SPEED, THRESHOLD)
    magnitude = math.hypot(result.vx, result.vy)

    moving = (flags.right != flags.left) or (flags.up != flags.down)
    if moving:
        assert magnitude == pytest.approx(SPEED)
    else:
        assert magnitude == 0
    assert (result.state is MovementState.WALKING) == flags.any

@pytest.mark.parametrize("flags", [f for f in all_flag_combinations() if f.any])
@pytest.mark.parametrize("target", [(500.0, 500.0), (100.0, 100.0), (0.0, 3.0)])
def test_keyboard_clears_move_target(flags, target):
    result = resolve_velocity(flags, (100, 100), target, SPEED, THRESHOLD)
    assert result.move_target is None

def test_opposite_keys_cancel():
    result = resolve_velocity(DirectionFlags(left=True, right=True), (0, 0), (50, 50), SPEED, THRESHOLD)
    assert (result.vx, result.vy) == (0, 0)
    # Keys are held, so the hero walks in place
    assert result.state is MovementState.WALKING
    assert result.move_target is None

def test_move_target_walks_toward_target():
    result = resolve_velocity(DirectionFlags(), (0, 0), (30, 40), SPEED, THRESHOLD)
    assert result.state is MovementState.WALKING
    assert result.vx == pytest.approx(SPEED * 0.6)
    assert result.vy == pytest.approx(SPEED * 0.8)
    assert result.move_target == (30, 40)

def test_straight_up_target_has_no_horizontal_drift():
    result = resolve_velocity(DirectionFlags(), (100, 100), (100, 0), SPEED, THRESHOLD)
    assert result.vx == 0
    assert Facing.from_velocity(result.vx, result.vy) is Facing.UP

def test_arrival_clears_target():
    result = resolve_velocity(DirectionFlags(), (0, 0), (3, 4), SPEED, THRESHOLD)
    assert result.move_target is None
    assert result.state is MovementState.IDLE
    assert (result.vx, result.vy) == (0, 0)

def test_keys_move_and_face(world, hero, movement, keys, input_handler):
    keys.press(pygame.K_a)
    input_handler.update()
    world.update(0.5)

    t = hero.get(Transform)
    assert t.x == pytest.approx(40)
    assert t.facing is Facing.LEFT
    assert hero.get(Locomotion).state is MovementState.WALKING

def test_facing_persists_when_idle(world, hero, movement, keys, input_handler):
    keys.press(pygame.K_UP)
    input_handler.update()
    world.update(0.1)
    keys.release(pygame.K_UP)
    input_handler.update()
    world.update(0.1)

    assert hero.get(Transform).facing is Facing.UP
    assert hero.get(Locomotion).state is MovementState.IDLE

def test_click_sets_move_target(world, hero, movement, click, input_handler):
    click(300, 100)
    input_handler.update()
    world.update(1 / 60)

    loco = hero.get(Locomotion)
    assert loco.move_target == (300, 100)
    assert loco.vx == pytest.approx(SPEED)
    assert hero.get(Transform).facing is Facing.RIGHT

def test_walks_to_click_and_stops(world, hero, movement, click, input_handler):
    click(160, 100)
    input_handler.update()
    for _ in range(60):
        world.update(1 / 60)
        input_handler.update()

    loco = hero.get(Locomotion)
    assert loco.move_target is None
    assert loco.state is MovementState.IDLE
    assert hero.get(Transform).x == pytest.approx(160, abs=THRESHOLD)

def test_pointer_gate_blocks_click_to_move(world, hero, movement, click, input_handler):
    movement.pointer_gate = lambda: False
    click(300, 100)
    input_handler.update()
    world.update(1 / 60)

    assert hero.get(Locomotion).move_target is None

def test_movement_gate_stops_unfrozen_hero(world, hero, movement, keys, input_handler):
    movement.movement_gate = lambda: False
    keys.press(pygame.K_d)
    input_handler.update()
    world.update(0.5)

    assert not hero.get(Locomotion).frozen
    assert hero.get(Locomotion).velocity == (0.0, 0.0)
    assert hero.get(Transform).position == (100, 100)

def test_keyboard_overrides_click(world, hero, movement, click, keys, input_handler):
    click(300, 300)
    input_handler.update()
    world.update(1 / 60)

    keys.press(pygame.K_s)
    input_handler.update()
    world.update(1 / 60)

    loco = hero.get(Locomotion)
    assert loco.move_target is None
    assert loco.vx == 0
    assert loco.vy == pytest.approx(SPEED)

def test_frozen_forces_zero_velocity(world, hero, movement, keys, click, input_handler):
    hero.get(Locomotion).frozen = True
    keys.press(pygame.K_d)
    click(500, 500)

    for _ in range(10):
        input_handler.update()
        world.update(1 / 60)
        loco = hero.get(Locomotion)
        assert loco.velocity == (0.0, 0.0)
        assert loco.move_target is None

    assert hero.get(Transform).position == (100, 100)

def test_clamped_to_bounds(world, hero, movement, keys, input_handler):
    keys.press(pygame.K_LEFT)
    input_handler.update()
    world.update(5.0)

    assert hero.get(Transform).x == 0

@pytest.mark.parametrize("state,facing,expected", [
    (MovementState.WALKING, Facing.LEFT, ("hero-walk-side", True)),
    (MovementState.WALKING, Facing.RIGHT, ("hero-walk-side", False)),
    (MovementState.IDLE, Facing.UP, ("hero-idle-up", False)),
    (MovementState.IDLE, Facing.DOWN, ("hero-idle-down", False)),
])
def test_animation_key(state, facing, expected):
    assert animation_key(state, facing) == expected
