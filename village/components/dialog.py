"""
Dialog components - speakers.
"""

from __future__ import annotations

from typing import Optional

from engine.core.component import Component, register_component


@register_component
class DialogSpeaker(Component):
    """
    Makes an entity able to speak in dialogs.

    Attributes:
        name: Display name above the entity and in the dialog box
        portrait_id: Portrait asset id
    """
    name: str = ""
    portrait_id: Optional[str] = None
