"""
Village scenes.
"""

from village.scenes.village import VillageScene

__all__ = ["VillageScene"]
