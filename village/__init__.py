"""
Resume village.

Built on top of the engine:
- Components (data-only, Pydantic models)
- Systems (movement, proximity, interaction)
- Dialogue (npc conversations, island panels)
- World (entity factories)
- Scenes (the village map)
"""
