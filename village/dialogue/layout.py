"""
Overlay layout - screen-space regions of the dialogue overlay.

Used both to draw the overlay and to hit-test pointer activations
against it, so what is tapped is always what is drawn.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from village.dialogue.session import DialogueMode


@dataclass(frozen=True)
class Rect:
    """Screen rectangle."""
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, px: float, py: float) -> bool:
        """Check if point is inside rect."""
        return (self.x <= px < self.x + self.width and
                self.y <= py < self.y + self.height)


class OverlayHit(Enum):
    """What an activation landed on."""
    CLOSE_BUTTON = auto()
    CLOSE_BAR = auto()
    CONTENT = auto()
    BACKDROP = auto()


class OverlayLayout:
    """
    Regions for a viewport size.

    npc mode: a dialogue box along the bottom edge with a close button in
    its top-right corner. island mode: a centered panel with a close button
    and a close bar along its bottom edge. Everything else is backdrop.
    """

    MARGIN = 20
    BOX_MAX_WIDTH = 700
    BOX_HEIGHT = 140
    PANEL_MAX_WIDTH = 560
    PANEL_MAX_HEIGHT = 480
    CLOSE_SIZE = 28
    CLOSE_BAR_HEIGHT = 40
    PORTRAIT_SIZE = 96

    def __init__(self, width: float, height: float):
        self.resize(width, height)

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

        box_w = min(width - 2 * self.MARGIN, self.BOX_MAX_WIDTH)
        self.dialogue_box = Rect(
            (width - box_w) / 2, height - self.BOX_HEIGHT - self.MARGIN, box_w, self.BOX_HEIGHT
        )

        panel_w = min(width - 3 * self.MARGIN, self.PANEL_MAX_WIDTH)
        panel_h = min(height - 3 * self.MARGIN, self.PANEL_MAX_HEIGHT)
        self.panel = Rect((width - panel_w) / 2, (height - panel_h) / 2, panel_w, panel_h)
        self.close_bar = Rect(
            self.panel.x, self.panel.bottom - self.CLOSE_BAR_HEIGHT, panel_w, self.CLOSE_BAR_HEIGHT
        )

    def content_rect(self, mode: DialogueMode) -> Rect:
        return self.dialogue_box if mode is DialogueMode.NPC else self.panel

    def close_button(self, mode: DialogueMode) -> Rect:
        content = self.content_rect(mode)
        inset = 8
        return Rect(
            content.right - self.CLOSE_SIZE - inset, content.y + inset,
            self.CLOSE_SIZE, self.CLOSE_SIZE,
        )

    def portrait_rect(self) -> Rect:
        box = self.dialogue_box
        return Rect(
            box.x + 16, box.y + (box.height - self.PORTRAIT_SIZE) / 2,
            self.PORTRAIT_SIZE, self.PORTRAIT_SIZE,
        )

    def hit(self, mode: DialogueMode, x: float, y: float) -> OverlayHit:
        """Classify a screen position; the close button wins over the content under it."""
        if self.close_button(mode).contains(x, y):
            return OverlayHit.CLOSE_BUTTON
        if mode is DialogueMode.ISLAND and self.close_bar.contains(x, y):
            return OverlayHit.CLOSE_BAR
        if self.content_rect(mode).contains(x, y):
            return OverlayHit.CONTENT
        return OverlayHit.BACKDROP
