"""
Widget host abstraction.

The host owns the widget surfaces and delivers triggers to the application.
"""

from .base import WidgetHost
from .directory import DirectoryHost

__all__ = [
    "WidgetHost",
    "DirectoryHost",
]
