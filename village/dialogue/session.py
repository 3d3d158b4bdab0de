"""
Dialogue session - state of one open overlay.

A session is created by DialogueOverlay.open and released by
DialogueOverlay.close. It owns every resource that must not outlive it:
the typewriter timer and the overlay's input subscriptions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional

from engine.core.clock import Timer
from engine.core.events import Subscription
from village.dialogue.cards import IslandCard, build_cards


FOOTER_NEXT = "Tap or [Space] for next ▸"
FOOTER_CLOSE = "Tap or [Space] to close"
CLOSE_BAR_TEXT = "Tap here or press Esc to close"
ISLAND_TITLE_FALLBACK = "Island"


class DialogueMode(Enum):
    NPC = "npc"
    ISLAND = "island"


class SessionState(Enum):
    OPENING = auto()
    ACTIVE = auto()
    CLOSED = auto()


class RevealState(Enum):
    """Typewriter sub-state of the current npc line."""
    REVEALING = auto()
    REVEALED = auto()


@dataclass(frozen=True)
class DialogueRequest:
    """
    What to show.

    Attributes:
        mode: npc conversation or island panel
        title: Speaker name or panel title
        portrait: Portrait asset id (npc)
        lines: Conversation lines (npc)
        section_key: House key the cards were built for (island)
        cards: Island cards
    """
    mode: DialogueMode
    title: str = ""
    portrait: Optional[str] = None
    lines: tuple[str, ...] = ()
    section_key: Optional[str] = None
    cards: tuple[IslandCard, ...] = ()

    @classmethod
    def npc(cls, name: str, lines: list[str], portrait: Optional[str] = None) -> DialogueRequest:
        return cls(DialogueMode.NPC, title=name, portrait=portrait, lines=tuple(lines))

    @classmethod
    def island(cls, section_key: str, title: str, entries: list[Any]) -> DialogueRequest:
        return cls(
            DialogueMode.ISLAND,
            title=title,
            section_key=section_key,
            cards=build_cards(section_key, entries),
        )


@dataclass(eq=False)
class DialogueSession:
    """
    One overlay from open to close.

    Attributes:
        request: Content being shown
        state: Lifecycle state
        line_index: Current npc line
        visible_chars: Characters of the current line revealed so far
        reveal: Typewriter sub-state
    """
    request: DialogueRequest
    state: SessionState = SessionState.OPENING
    line_index: int = 0
    visible_chars: int = 0
    reveal: RevealState = RevealState.REVEALED

    _typewriter: Optional[Timer] = field(default=None, repr=False)
    _subscriptions: list[Subscription] = field(default_factory=list, repr=False)

    @property
    def mode(self) -> DialogueMode:
        return self.request.mode

    @property
    def is_open(self) -> bool:
        return self.state is not SessionState.CLOSED

    @property
    def title(self) -> str:
        if self.mode is DialogueMode.ISLAND:
            return self.request.title or ISLAND_TITLE_FALLBACK
        return self.request.title

    @property
    def current_line(self) -> str:
        lines = self.request.lines
        return lines[self.line_index] if self.line_index < len(lines) else ""

    @property
    def visible_text(self) -> str:
        return self.current_line[:self.visible_chars]

    @property
    def is_last_line(self) -> bool:
        return self.line_index >= len(self.request.lines) - 1

    @property
    def footer_text(self) -> str:
        if self.mode is DialogueMode.ISLAND:
            return CLOSE_BAR_TEXT
        return FOOTER_CLOSE if self.is_last_line else FOOTER_NEXT

    @property
    def typewriter(self) -> Optional[Timer]:
        return self._typewriter

    @property
    def subscriptions(self) -> list[Subscription]:
        return list(self._subscriptions)

    # Line state

    def start_line(self, index: int) -> None:
        """Show line ``index`` from its first character."""
        self.line_index = index
        self.visible_chars = 0
        self.reveal = RevealState.REVEALING if self.current_line else RevealState.REVEALED

    def reveal_next_char(self) -> bool:
        """Reveal one more character. Returns True once the line is complete."""
        if self.reveal is RevealState.REVEALING:
            self.visible_chars += 1
            if self.visible_chars >= len(self.current_line):
                self.complete_line()
        return self.reveal is RevealState.REVEALED

    def complete_line(self) -> None:
        self.visible_chars = len(self.current_line)
        self.reveal = RevealState.REVEALED
        self.stop_typewriter()

    # Owned resources

    def own(self, subscription: Subscription) -> None:
        self._subscriptions.append(subscription)

    def set_typewriter(self, timer: Timer) -> None:
        self.stop_typewriter()
        self._typewriter = timer

    def stop_typewriter(self) -> None:
        if self._typewriter is not None:
            self._typewriter.cancel()
            self._typewriter = None

    def release(self) -> None:
        """Cancel the typewriter and drop every subscription."""
        self.stop_typewriter()
        for subscription in self._subscriptions:
            subscription.release()
        self._subscriptions.clear()
        self.state = SessionState.CLOSED
