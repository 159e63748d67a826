"""
Configuration modules for map generation.
"""

from .config import Settings, settings
from .world_config import WorldConfig

__all__ = ['Settings', 'settings', 'WorldConfig']
