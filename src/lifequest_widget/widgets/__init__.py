"""
Widget render model derivation.

The render model is the fully resolved, display-ready state for one widget
refresh. It is rebuilt from the persisted snapshot on every update and has
no identity of its own.
"""

from .model import RenderModel, build_render_model

__all__ = ["RenderModel", "build_render_model"]
