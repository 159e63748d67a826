"""
Procedural hexagonal terrain map generation.
"""

__version__ = "0.1.0"
