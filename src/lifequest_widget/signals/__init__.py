"""
Signals addressed from the widget back to the owning application.
"""

from .refresh import REFRESH_URI, RefreshSignaler, TriggerHandle

__all__ = ["REFRESH_URI", "RefreshSignaler", "TriggerHandle"]
