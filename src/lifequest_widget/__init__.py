"""
LifeQuest widget - home-screen widget state derivation and link routing
"""

__version__ = "0.1.0"

from .controller import WidgetController

__all__ = ["WidgetController"]
