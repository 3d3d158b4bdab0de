"""
Interaction components - house zones, NPC proximity and prompt pulse.
"""

from __future__ import annotations

from pydantic import ConfigDict, Field

from engine.core.component import Component, register_component


@register_component
class InteractionZone(Component):
    """
    Axis-aligned interaction rectangle centered on the entity Transform.

    Immutable once created.

    Attributes:
        key: Stable house key ("aboutMe", "education", ...)
        label: Display label
        width: Rectangle width
        height: Rectangle height
    """
    model_config = ConfigDict(frozen=True)

    key: str
    label: str = ""
    width: float = Field(gt=0)
    height: float = Field(gt=0)

    def contains(self, cx: float, cy: float, x: float, y: float) -> bool:
        """Half-extent test of (x, y) against this zone centered at (cx, cy)."""
        return abs(x - cx) < self.width / 2 and abs(y - cy) < self.height / 2


@register_component
class ProximityTarget(Component):
    """
    A point target the player can be near.

    Attributes:
        radius: Interaction radius (px); in range when strictly closer
        player_nearby: Result of the latest proximity pass
    """
    radius: float = Field(default=50.0, gt=0)
    player_nearby: bool = False


@register_component
class PromptPulse(Component):
    """
    Opacity pulse of a floating interaction prompt.

    Attributes:
        active: Pulsing (and visible)
        elapsed: Time since the pulse started
        period: Seconds from low to full opacity
        alpha: Current opacity (0-1)
        low: Opacity at the bottom of the pulse
    """
    active: bool = False
    elapsed: float = 0.0
    period: float = Field(default=0.6, gt=0)
    alpha: float = 1.0
    low: float = 0.5

    def restart(self) -> None:
        self.active = True
        self.elapsed = 0.0
        self.alpha = self.low

    def stop(self) -> None:
        self.active = False
        self.elapsed = 0.0
        self.alpha = 1.0

    def step(self, dt: float) -> None:
        """Advance a yoyo from low to 1 and back, repeating."""
        if not self.active:
            return
        self.elapsed += dt
        phase = (self.elapsed / self.period) % 2.0
        t = phase if phase <= 1.0 else 2.0 - phase
        self.alpha = self.low + (1.0 - self.low) * t
