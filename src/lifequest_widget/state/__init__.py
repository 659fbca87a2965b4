"""
Read-only access to the state the owning application persists for the widget.
"""

from .reader import (
    DEFAULT_MILESTONE_LEVELS,
    DEFAULT_RECENT_LAST,
    PersistedSnapshot,
    PersistedStateReader,
    YamlStateStore,
)

__all__ = [
    "DEFAULT_MILESTONE_LEVELS",
    "DEFAULT_RECENT_LAST",
    "PersistedSnapshot",
    "PersistedStateReader",
    "YamlStateStore",
]
