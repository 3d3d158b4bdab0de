"""
Dialogue overlay - npc conversations and island panels.
"""

from village.dialogue.cards import (
    SectionKind,
    IslandCard,
    AboutMeEntry,
    EducationEntry,
    WorkEntry,
    RawEntry,
    parse_entry,
    build_cards,
)
from village.dialogue.session import (
    DialogueMode,
    DialogueRequest,
    DialogueSession,
    RevealState,
    SessionState,
)
from village.dialogue.layout import OverlayLayout, OverlayHit, Rect
from village.dialogue.overlay import DialogueOverlay

__all__ = [
    # Cards
    "SectionKind",
    "IslandCard",
    "AboutMeEntry",
    "EducationEntry",
    "WorkEntry",
    "RawEntry",
    "parse_entry",
    "build_cards",
    # Session
    "DialogueMode",
    "DialogueRequest",
    "DialogueSession",
    "RevealState",
    "SessionState",
    # Layout
    "OverlayLayout",
    "OverlayHit",
    "Rect",
    # Overlay
    "DialogueOverlay",
]
