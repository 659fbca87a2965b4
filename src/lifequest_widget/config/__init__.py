"""
Configuration loading for LifeQuest widget.
"""

from .loader import ConfigLoader

__all__ = ["ConfigLoader"]
