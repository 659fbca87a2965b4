"""
Utility modules for LifeQuest widget.
"""

from .errors import (
    ConfigurationError,
    LifeQuestError,
    MethodNotImplementedError,
    RenderError,
    StateStoreError,
    error_boundary,
    parse_int,
    parse_or_default,
    safe_execute,
)

__all__ = [
    "LifeQuestError",
    "ConfigurationError",
    "StateStoreError",
    "RenderError",
    "MethodNotImplementedError",
    "error_boundary",
    "parse_int",
    "parse_or_default",
    "safe_execute",
]
