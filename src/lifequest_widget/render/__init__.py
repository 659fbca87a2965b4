"""
Widget surface rendering.
"""

from .renderer import Background, WidgetRenderer, select_background

__all__ = ["Background", "WidgetRenderer", "select_background"]
