"""
Interaction system - decides when a dialogue opens.

Triggers are the INTERACT key edge and pointer activations. After a
dialogue closes, two independent windows suppress triggers:

- pointer cooldown: a short Clock timer that swallows pointer input so
  the tap that closed the dialogue neither moves the player nor
  interacts again
- interaction cooldown: blocks every trigger until the player has been
  out of range of everything for a tick

The pointer cooldown can run out while the interaction cooldown is still
pending; taps then move the player but do not interact.

Pointer triggers are handled as the InputHandler publishes them, before
any system runs, so a tap that opens a dialogue never reaches movement.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from engine.core import System, Entity
from engine.core.actions import Action
from engine.core.clock import Clock, Timer
from engine.core.events import Event, EventBus, Subscription, UIEvent
from engine.input.handler import InputEvent
from village.components import Transform, Locomotion, InteractionZone, DialogSpeaker
from village.config import ContentDescriptor, VillageSettings
from village.dialogue import DialogueOverlay, DialogueRequest
from village.dialogue.layout import Rect
from village.events import VillageEvent

if TYPE_CHECKING:
    from engine.input.handler import Activation, InputHandler
    from village.systems.proximity import ProximitySystem


logger = logging.getLogger(__name__)

# Floating prompt geometry (screen px)
PROMPT_CHAR_WIDTH = 8
PROMPT_PADDING = (6, 4)
PROMPT_BOTTOM_OFFSET = 40

# Pointer triggers run after the overlay's input handlers
POINTER_PRIORITY = 50


def prompt_rect(text: str, viewport: tuple[float, float]) -> Rect:
    """Screen rectangle of the prompt, centered near the bottom edge."""
    pad_x, pad_y = PROMPT_PADDING
    width = len(text) * PROMPT_CHAR_WIDTH + 2 * pad_x
    height = PROMPT_CHAR_WIDTH + 2 * pad_y
    cx = viewport[0] / 2
    cy = viewport[1] - PROMPT_BOTTOM_OFFSET
    return Rect(cx - width / 2, cy - height / 2, width, height)


class InteractionSystem(System):
    """
    Coordinates proximity, triggers and the dialogue overlay.

    Handles:
    - Key and pointer triggers while no suppression window is active
    - Opening island panels for zones and conversations for the NPC
    - Freezing the player while a dialogue is open
    - Cooldowns and input reset on dialogue closure
    - Context prompt text
    """

    priority = 10

    def __init__(
        self,
        input_handler: InputHandler,
        overlay: DialogueOverlay,
        proximity: ProximitySystem,
        clock: Clock,
        events: EventBus,
        content: Optional[ContentDescriptor] = None,
        settings: Optional[VillageSettings] = None,
        player_tag: str = "player",
    ):
        super().__init__()
        self.input = input_handler
        self.overlay = overlay
        self.proximity = proximity
        self.clock = clock
        self.events = events
        self.content = content
        self.settings = settings or VillageSettings()
        self.player_tag = player_tag

        self.interaction_cooldown = False
        self.npc_talked_once = False
        self._pointer_timer: Optional[Timer] = None
        self._prompt: Optional[str] = None

        self._subscriptions: list[Subscription] = []

    def on_add(self, world) -> None:
        super().on_add(world)
        self._subscriptions = [
            self.events.subscribe(UIEvent.DIALOG_ENDED, self._on_dialogue_closed),
            # Below the overlay, so taps it consumes never get here
            self.events.subscribe(
                InputEvent.ACTIVATION, self._on_activation, priority=POINTER_PRIORITY
            ),
        ]

    def on_remove(self) -> None:
        for subscription in self._subscriptions:
            subscription.release()
        self._subscriptions = []
        if self._pointer_timer:
            self._pointer_timer.cancel()
            self._pointer_timer = None
        super().on_remove()

    # State

    @property
    def pointer_cooldown(self) -> bool:
        """True while pointer input is swallowed after a dialogue closed."""
        return self._pointer_timer is not None and self._pointer_timer.pending

    @property
    def prompt_text(self) -> Optional[str]:
        """Current interaction hint, or None when hidden."""
        return self._prompt

    def accepts_movement(self) -> bool:
        """Whether the player may move at all this tick."""
        return not self.overlay.is_open

    def accepts_pointer_movement(self) -> bool:
        """Whether pointer activations may set a move target this tick."""
        return not self.overlay.is_open and not self.pointer_cooldown

    # Update

    def update(self, dt: float) -> None:
        if not self.enabled:
            return

        player = self.world.get_first_with_tag(self.player_tag)

        if self.overlay.is_open:
            if player:
                self._freeze(player)
            self._set_prompt(None)
            return

        # Released only once no dialogue is up, whichever session closed last
        if player:
            self._unfreeze(player)

        if self.interaction_cooldown and not self.proximity.anything_in_range:
            self.interaction_cooldown = False
            logger.debug("Interaction cooldown cleared")

        self._set_prompt(self._build_prompt())

        if self.input.is_action_just_pressed(Action.INTERACT) and not self.interaction_cooldown:
            self._interact()

    def _on_activation(self, event: Event) -> None:
        if not self.enabled or self._world is None or self.overlay.is_open:
            return
        if self.pointer_cooldown or self.interaction_cooldown:
            return

        if self._pointer_interact(event["activation"]):
            event.consume()

    def _interact(self) -> bool:
        """Open whatever is in range: a zone first, then the NPC."""
        zone = self.proximity.active_zone
        if zone is not None:
            return self.open_island(zone.get(InteractionZone).key)
        if self.proximity.npc_nearby:
            return self.open_npc()
        return False

    def _pointer_interact(self, activation: Activation) -> bool:
        if self._prompt and prompt_rect(self._prompt, self._viewport()).contains(*activation.screen):
            return self._interact()

        zone = self.proximity.active_zone
        if zone is not None:
            return self.open_island(zone.get(InteractionZone).key)

        npc = self.proximity.nearby_npc
        if npc is not None:
            npc_t = npc.get(Transform)
            wx, wy = activation.world
            if npc_t.distance_to(wx, wy) < self.settings.npc_tap_radius:
                return self.open_npc()

        return False

    # Opening

    def open_island(self, key: str) -> bool:
        """Open the panel for house ``key``. Returns False if there is no content."""
        house = self.content.houses.get(key) if self.content else None
        if house is None:
            logger.debug("No content for house '%s', ignoring", key)
            return False

        self._open(DialogueRequest.island(key, house.title, house.entries), key)
        return True

    def open_npc(self) -> bool:
        """Open the NPC conversation. Returns False if there is nothing to say."""
        npc = self.content.npc if self.content else None
        lines = npc.lines_for(self.npc_talked_once) if npc else []
        if not lines:
            logger.debug("No NPC dialogue, ignoring")
            return False

        portrait = npc.portrait
        speaker_entity = self.proximity.nearby_npc
        speaker = speaker_entity.try_get(DialogSpeaker) if speaker_entity else None
        if portrait is None and speaker is not None:
            portrait = speaker.portrait_id

        self._open(DialogueRequest.npc(npc.name, lines, portrait), "npc")
        self.npc_talked_once = True
        return True

    def _open(self, request: DialogueRequest, key: str) -> None:
        player = self.world.get_first_with_tag(self.player_tag)
        if player:
            self._freeze(player)
        self.overlay.open(request)
        self._set_prompt(None)
        self.events.publish(VillageEvent.INTERACTION_OPENED, mode=request.mode, key=key)

    # Closure

    def _on_dialogue_closed(self, event: Event) -> None:
        self.input.reset_pointer()
        self.interaction_cooldown = True

        if self._pointer_timer:
            self._pointer_timer.cancel()
        self._pointer_timer = self.clock.schedule(
            self.settings.pointer_cooldown, self._end_pointer_cooldown
        )

        # The freeze itself is lifted by update(); a replacing session may
        # already be opening
        if self._world is None:
            return
        player = self.world.get_first_with_tag(self.player_tag)
        if player:
            locomotion = player.get(Locomotion)
            locomotion.move_target = None
            locomotion.stop()

    def _end_pointer_cooldown(self) -> None:
        self._pointer_timer = None

    # Helpers

    def _freeze(self, player: Entity) -> None:
        locomotion = player.get(Locomotion)
        locomotion.frozen = True
        locomotion.move_target = None
        locomotion.stop()

    def _unfreeze(self, player: Entity) -> None:
        locomotion = player.get(Locomotion)
        if locomotion.frozen:
            locomotion.frozen = False
            locomotion.move_target = None
            locomotion.stop()

    def _build_prompt(self) -> Optional[str]:
        verb = "Tap" if self.input.touch_capable else "Press SPACE"
        zone = self.proximity.active_zone
        if zone is not None:
            return f"{verb} to enter {zone.get(InteractionZone).label}"
        if self.proximity.npc_nearby:
            return f"{verb} to talk"
        return None

    def _set_prompt(self, text: Optional[str]) -> None:
        if text != self._prompt:
            self._prompt = text
            self.events.publish(UIEvent.PROMPT_CHANGED, text=text)

    def _viewport(self) -> tuple[float, float]:
        return (self.overlay.layout.width, self.overlay.layout.height)
