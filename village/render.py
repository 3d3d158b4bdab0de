"""
Village renderer - pygame drawing of the map, prompt and dialogue overlay.

Purely cosmetic: reads scene state, never changes it. Shapes stand in
for the sprite art.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple

import pygame

from village.components import Transform, Locomotion, DialogSpeaker, PromptPulse, Facing
from village.dialogue import DialogueMode, DialogueSession, OverlayLayout
from village.dialogue.layout import Rect
from village.systems.interaction import prompt_rect

if TYPE_CHECKING:
    from village.scenes.village import VillageScene


Color = Tuple[int, ...]

GRASS = (86, 148, 72)
PATH = (196, 170, 120)
WALL = (222, 205, 170)
ROOF = (150, 62, 48)
HERO = (58, 96, 190)
NPC_BODY = (190, 120, 60)
INK = (20, 20, 24)
WHITE = (255, 255, 255)
BACKDROP = (0, 0, 0, 140)
BOX = (28, 28, 40)
PARCHMENT = (238, 224, 190)
PROMPT_BG = (0, 0, 0, 170)

HOUSE_SIZE = (80, 56)
FACING_VECTORS = {
    Facing.UP: (0, -1),
    Facing.DOWN: (0, 1),
    Facing.LEFT: (-1, 0),
    Facing.RIGHT: (1, 0),
}


class VillageRenderer:
    """
    Draws a VillageScene onto a surface.

    Usage:
        renderer = VillageRenderer()
        renderer.draw(screen, scene)
    """

    def __init__(self) -> None:
        self._fonts: dict[int, pygame.font.Font] = {}
        self.surface: Optional[pygame.Surface] = None

    def get_font(self, size: int = 16) -> pygame.font.Font:
        if size not in self._fonts:
            if not pygame.font.get_init():
                pygame.font.init()
            self._fonts[size] = pygame.font.Font(None, size)
        return self._fonts[size]

    def draw(self, surface: pygame.Surface, scene: VillageScene) -> None:
        self.surface = surface
        surface.fill(GRASS)

        self._draw_houses(scene)
        self._draw_npcs(scene)
        self._draw_player(scene)

        prompt = scene.interaction_system.prompt_text
        if prompt:
            self._draw_prompt(prompt, (scene.layout.width, scene.layout.height))

        session = scene.overlay.session
        if session is not None:
            self._draw_overlay(session, scene.layout)

    # World

    def _draw_houses(self, scene: VillageScene) -> None:
        w, h = HOUSE_SIZE
        for house in scene.map.houses.values():
            x = house.x + scene.offset_x - w / 2
            y = house.y - h / 2
            pygame.draw.rect(self.surface, PATH, pygame.Rect(
                int(house.zone.x + scene.offset_x - house.zone.w / 2),
                int(house.zone.y - house.zone.h / 2),
                int(house.zone.w), int(house.zone.h),
            ))
            pygame.draw.rect(self.surface, WALL, pygame.Rect(int(x), int(y), w, h))
            pygame.draw.polygon(self.surface, ROOF, [
                (int(x - 6), int(y)),
                (int(x + w / 2), int(y - 30)),
                (int(x + w + 6), int(y)),
            ])
            self._draw_text(house.label, x + w / 2, y - 44, INK, size=18, align="center")

    def _draw_npcs(self, scene: VillageScene) -> None:
        for npc in scene.world.get_entities_with(Transform, DialogSpeaker):
            t = npc.get(Transform)
            pygame.draw.circle(self.surface, NPC_BODY, (int(t.x), int(t.y)), 12)
            self._draw_text(npc.get(DialogSpeaker).name, t.x, t.y - 30, WHITE, size=16, align="center")

            pulse = npc.try_get(PromptPulse)
            if pulse and pulse.active:
                bubble = pygame.Surface((20, 20), pygame.SRCALPHA)
                pygame.draw.circle(bubble, (255, 255, 255, int(255 * pulse.alpha)), (10, 10), 10)
                self.surface.blit(bubble, (int(t.x - 10), int(t.y - 58)))
                self._draw_text("!", t.x, t.y - 54, INK, size=18, align="center")

    def _draw_player(self, scene: VillageScene) -> None:
        t = scene.player.get(Transform)
        pygame.draw.circle(self.surface, HERO, (int(t.x), int(t.y)), 12)

        dx, dy = FACING_VECTORS[t.facing]
        pygame.draw.line(
            self.surface, WHITE,
            (int(t.x), int(t.y)),
            (int(t.x + dx * 12), int(t.y + dy * 12)),
            3,
        )

        target = scene.player.get(Locomotion).move_target
        if target is not None:
            pygame.draw.circle(self.surface, WHITE, (int(target[0]), int(target[1])), 4, 1)

    def _draw_prompt(self, text: str, viewport: tuple[float, float]) -> None:
        rect = prompt_rect(text, viewport)
        self._fill(rect, PROMPT_BG)
        self._draw_text(text, rect.x + rect.width / 2, rect.y + 5, WHITE, size=16, align="center")

    # Overlay

    def _draw_overlay(self, session: DialogueSession, layout: OverlayLayout) -> None:
        self._fill(Rect(0, 0, layout.width, layout.height), BACKDROP)
        if session.mode is DialogueMode.NPC:
            self._draw_dialogue_box(session, layout)
        else:
            self._draw_island_panel(session, layout)

        close = layout.close_button(session.mode)
        self._draw_text("X", close.x + close.width / 2, close.y + 6, WHITE, size=20, align="center")

    def _draw_dialogue_box(self, session: DialogueSession, layout: OverlayLayout) -> None:
        box = layout.dialogue_box
        self._fill(box, BOX)

        text_x = box.x + 16
        if session.request.portrait:
            portrait = layout.portrait_rect()
            self._fill(portrait, (70, 70, 90))
            text_x = portrait.right + 16

        text_width = box.right - text_x - 48
        self._draw_text(session.title, text_x, box.y + 14, (255, 214, 120), size=20)

        y = box.y + 42
        for line in self._wrap_text(session.visible_text, self.get_font(18), text_width):
            self._draw_text(line, text_x, y, WHITE, size=18)
            y += 20

        self._draw_text(session.footer_text, box.right - 16, box.bottom - 24, (180, 180, 200), size=16, align="right")

    def _draw_island_panel(self, session: DialogueSession, layout: OverlayLayout) -> None:
        panel = layout.panel
        self._fill(panel, PARCHMENT)
        self._draw_text(session.title, panel.x + panel.width / 2, panel.y + 16, INK, size=26, align="center")

        width = panel.width - 48
        x = panel.x + 24
        y = panel.y + 54
        limit = layout.close_bar.y - 8

        for card in session.request.cards:
            if card.heading:
                y = self._draw_wrapped(card.heading, x, y, width, INK, 20, limit)
            if card.subtitle:
                y = self._draw_wrapped(card.subtitle, x, y, width, (100, 80, 60), 16, limit)
            if card.body:
                y = self._draw_wrapped(card.body, x, y, width, INK, 16, limit)
            for bullet in card.bullets:
                y = self._draw_wrapped(f"- {bullet}", x + 8, y, width - 8, INK, 16, limit)
            y += 10
            if y >= limit:
                break

        bar = layout.close_bar
        self._fill(bar, (120, 90, 60))
        self._draw_text(session.footer_text, bar.x + bar.width / 2, bar.y + 13, WHITE, size=16, align="center")

    # Primitives

    def _fill(self, rect: Rect, color: Color) -> None:
        if len(color) == 4 and color[3] < 255:
            temp = pygame.Surface((int(rect.width), int(rect.height)), pygame.SRCALPHA)
            temp.fill(color)
            self.surface.blit(temp, (int(rect.x), int(rect.y)))
        else:
            pygame.draw.rect(self.surface, color[:3], pygame.Rect(
                int(rect.x), int(rect.y), int(rect.width), int(rect.height)
            ))

    def _draw_text(
        self,
        text: str,
        x: float,
        y: float,
        color: Color,
        size: int = 16,
        align: str = "left",
    ) -> None:
        if not text:
            return
        rendered = self.get_font(size).render(text, True, color[:3])
        if align == "center":
            x -= rendered.get_width() / 2
        elif align == "right":
            x -= rendered.get_width()
        self.surface.blit(rendered, (int(x), int(y)))

    def _draw_wrapped(
        self,
        text: str,
        x: float,
        y: float,
        width: float,
        color: Color,
        size: int,
        limit: float,
    ) -> float:
        font = self.get_font(size)
        for line in self._wrap_text(text, font, width):
            if y + font.get_height() > limit:
                break
            self._draw_text(line, x, y, color, size=size)
            y += font.get_height() + 2
        return y

    @staticmethod
    def _wrap_text(text: str, font: pygame.font.Font, max_width: float) -> list[str]:
        """Wrap text to fit within max_width."""
        lines = []
        current_line = ""

        for word in text.split(" "):
            test_line = current_line + (" " if current_line else "") + word
            if font.size(test_line)[0] <= max_width:
                current_line = test_line
            else:
                if current_line:
                    lines.append(current_line)
                current_line = word

        if current_line:
            lines.append(current_line)

        return lines if lines else [""]
