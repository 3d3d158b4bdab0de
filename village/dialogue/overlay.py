"""
Dialogue overlay - modal npc conversations and island panels.

Only one session exists at a time. While open, the overlay listens to
the input events published by the InputHandler through subscriptions
its session owns; closing the session releases them and cancels the
typewriter, so nothing the session started can run after it ends.

Every dismiss path goes through advance() or close(), and close() is the
only place UIEvent.DIALOG_ENDED is published.
"""

from __future__ import annotations

import logging
from typing import Optional

from engine.core.actions import Action
from engine.core.clock import Clock
from engine.core.events import Event, EventBus, UIEvent
from engine.input.handler import InputEvent
from village.dialogue.layout import OverlayHit, OverlayLayout
from village.dialogue.session import (
    DialogueMode,
    DialogueRequest,
    DialogueSession,
    RevealState,
    SessionState,
)


logger = logging.getLogger(__name__)

# Input subscriptions run ahead of everything else while a dialogue is up
INPUT_PRIORITY = 100


class DialogueOverlay:
    """
    Opens, advances and closes dialogue sessions.

    Usage:
        overlay = DialogueOverlay(event_bus, clock, OverlayLayout(800, 600))
        overlay.open(DialogueRequest.npc("Guide", ["Hello!", "Welcome."]))

        # Input events now drive it; or call directly:
        overlay.advance()
        overlay.close()
    """

    def __init__(
        self,
        event_bus: EventBus,
        clock: Clock,
        layout: OverlayLayout,
        typewriter_interval: float = 0.03,
    ):
        self.event_bus = event_bus
        self.clock = clock
        self.layout = layout
        self.typewriter_interval = typewriter_interval

        self._session: Optional[DialogueSession] = None

    @property
    def session(self) -> Optional[DialogueSession]:
        return self._session

    @property
    def is_open(self) -> bool:
        return self._session is not None

    def open(self, request: DialogueRequest) -> DialogueSession:
        """Open a new session, closing the current one first."""
        if self._session is not None:
            self.close()

        session = DialogueSession(request)
        self._session = session

        session.own(self.event_bus.subscribe(
            InputEvent.ACTION_PRESSED, self._on_action, priority=INPUT_PRIORITY
        ))
        session.own(self.event_bus.subscribe(
            InputEvent.ACTIVATION, self._on_activation, priority=INPUT_PRIORITY
        ))

        session.state = SessionState.ACTIVE
        if request.mode is DialogueMode.NPC:
            self._show_line(session, 0)

        logger.info("Dialogue opened: %s '%s'", request.mode.value, session.title)
        self.event_bus.publish(UIEvent.DIALOG_STARTED, mode=request.mode, title=session.title)
        return session

    def close(self) -> None:
        """Close the current session. No-op when closed."""
        session = self._session
        if session is None:
            return

        self._session = None
        session.release()

        logger.info("Dialogue closed: %s", session.mode.value)
        self.event_bus.publish(UIEvent.DIALOG_ENDED)

    def advance(self) -> None:
        """
        Advance the current session.

        npc: finish the line being revealed, else go to the next line, else
        close. island: close.
        """
        session = self._session
        if session is None:
            return

        if session.mode is DialogueMode.ISLAND:
            self.close()
            return

        if session.reveal is RevealState.REVEALING:
            session.complete_line()
            self._line_shown(session)
        elif not session.is_last_line:
            self._show_line(session, session.line_index + 1)
        else:
            self.close()

    def _show_line(self, session: DialogueSession, index: int) -> None:
        session.start_line(index)
        if session.reveal is RevealState.REVEALING:
            session.set_typewriter(self.clock.schedule_interval(
                self.typewriter_interval, lambda: self._type_char(session)
            ))
        else:
            self._line_shown(session)

    def _type_char(self, session: DialogueSession) -> None:
        if session.reveal_next_char():
            self._line_shown(session)

    def _line_shown(self, session: DialogueSession) -> None:
        self.event_bus.publish(
            UIEvent.DIALOG_LINE_SHOWN, index=session.line_index, text=session.current_line
        )

    # Input

    def _on_action(self, event: Event) -> None:
        session = self._session
        if session is None:
            return

        action = event["action"]
        if session.mode is DialogueMode.NPC:
            if action is Action.ADVANCE:
                event.consume()
                self.advance()
            elif action is Action.CANCEL:
                event.consume()
                self.close()
        elif action in (Action.CLOSE_PANEL, Action.CANCEL):
            event.consume()
            self.close()

    def _on_activation(self, event: Event) -> None:
        session = self._session
        if session is None:
            return

        event.consume()
        activation = event["activation"]
        hit = self.layout.hit(session.mode, activation.x, activation.y)

        if hit is OverlayHit.CONTENT:
            if session.mode is DialogueMode.NPC:
                self.advance()
            # Taps inside the island panel do nothing
        else:
            self.close()
