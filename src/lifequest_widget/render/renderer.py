"""
Widget rendering for the LifeQuest home-screen widget
"""

import enum
import logging
import os
from typing import Any, Dict, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from ..hosts.base import WidgetHost
from ..signals.refresh import RefreshSignaler
from ..widgets.model import RenderModel

logger = logging.getLogger(__name__)

PADDING = 12
BAR_HEIGHT = 10
PROGRESS_MAX = 100


class Background(enum.Enum):
    """Widget background variants."""

    LEVEL_UP = "level_up"
    NORMAL = "normal"


def select_background(model: RenderModel) -> Background:
    """
    Pick the background for a model.

    Only a recent level-up changes the background. Milestone status is shown
    by the label badge alone.
    """
    return Background.LEVEL_UP if model.is_recent_level_up else Background.NORMAL


class WidgetRenderer:
    """
    Paints render models onto widget surfaces.

    This class handles:
    - Background selection (level-up vs normal)
    - Level, progress and recent activity labels
    - The progress bar (max 100)
    - Attaching the refresh trigger to the widget root

    Rendering is idempotent: a widget whose model and background are
    unchanged since its last successful render is not pushed to the host
    again.

    Attributes:
        font_cache: Dictionary mapping font keys to loaded ImageFont objects
    """

    def __init__(
        self,
        host: WidgetHost,
        signaler: Optional[RefreshSignaler] = None,
        styles: Optional[Dict[str, Dict[str, Any]]] = None,
        size: Tuple[int, int] = (320, 160),
    ):
        self.host = host
        self.signaler = signaler or RefreshSignaler()
        self.styles = styles or {}
        self.size = tuple(size)
        self.font_cache: Dict[str, Any] = {}
        self._rendered: Dict[int, Tuple[RenderModel, Background]] = {}

    def render(self, widget_id: int, model: RenderModel) -> None:
        """
        Render a model onto one widget.

        Args:
            widget_id: Host-assigned widget id
            model: Render model for this update
        """
        background = select_background(model)
        if self._rendered.get(widget_id) == (model, background):
            logger.debug(f"Widget {widget_id} unchanged, skipping host update")
            return

        image = self.paint(model, background)

        # On tap: background refresh without opening the app
        self.host.attach_click_trigger(widget_id, self.signaler.build_refresh_trigger())
        self.host.update_widget(widget_id, image, model)

        self._rendered[widget_id] = (model, background)
        logger.debug(f"Widget {widget_id} rendered with {background.value} background")

    def forget(self, widget_id: Optional[int] = None) -> None:
        """Drop remembered renders so the next render always reaches the host."""
        if widget_id is None:
            self._rendered.clear()
        else:
            self._rendered.pop(widget_id, None)

    def paint(self, model: RenderModel, background: Background) -> Image.Image:
        """Paint a model onto a new image."""
        style = self._style_for(background)
        width, height = self.size

        image = Image.new("RGB", self.size, style.get("background_color", "#000000"))
        draw = ImageDraw.Draw(image)

        font_name = style.get("font", "DejaVu Sans")
        font_size = style.get("font_size", 22)
        text_color = style.get("text_color", "#FFFFFF")
        accent_color = style.get("accent_color", "#4CAF50")

        title_font = self._load_font(font_name, font_size)
        body_font = self._load_font(font_name, max(8, int(font_size * 0.7)))

        y = PADDING
        y = self._draw_line(draw, model.level_label, (PADDING, y), title_font, text_color)
        y = self._draw_line(draw, model.progress_text, (PADDING, y + 4), body_font, text_color)

        self._draw_progress_bar(
            draw,
            (PADDING, y + 6, width - PADDING, y + 6 + BAR_HEIGHT),
            model.progress_percent,
            accent_color,
            text_color,
        )

        bottom = height - PADDING
        task_height = self._line_height(draw, model.recent_task_label, body_font)
        xp_height = self._line_height(draw, model.recent_xp_label, body_font)
        self._draw_line(
            draw, model.recent_task_label, (PADDING, bottom - task_height), body_font, text_color
        )
        self._draw_line(
            draw,
            model.recent_xp_label,
            (PADDING, bottom - task_height - xp_height - 4),
            body_font,
            accent_color,
        )

        return image

    def _style_for(self, background: Background) -> Dict[str, Any]:
        return self.styles.get(background.value, {})

    def _draw_progress_bar(
        self,
        draw: ImageDraw.ImageDraw,
        box: Tuple[int, int, int, int],
        value: int,
        fill_color: str,
        outline_color: str,
    ) -> None:
        """Draw a horizontal bar filled to ``value`` out of PROGRESS_MAX."""
        left, top, right, bottom = box
        value = max(0, min(PROGRESS_MAX, value))

        draw.rectangle(box, outline=outline_color, width=1)
        filled = left + (right - left) * value // PROGRESS_MAX
        if filled > left:
            draw.rectangle((left, top, filled, bottom), fill=fill_color)

    def _line_height(self, draw: ImageDraw.ImageDraw, text: str, font) -> int:
        bbox = draw.textbbox((0, 0), text or " ", font=font)
        return bbox[3] - bbox[1]

    def _draw_line(
        self,
        draw: ImageDraw.ImageDraw,
        text: str,
        position: Tuple[int, int],
        font,
        color: str,
    ) -> int:
        """
        Draw one line of text with its visual top at ``position``.

        Returns:
            y coordinate just below the drawn line
        """
        x, y = position
        bbox = draw.textbbox((0, 0), text or " ", font=font)
        # bbox top can be non-zero for fonts with tall ascenders
        draw.text((x, y - bbox[1]), text, font=font, fill=color)
        return y + (bbox[3] - bbox[1])

    def _load_font(self, font_name: str, font_size: int):
        """Load a font with caching"""
        cache_key = f"{font_name}_{font_size}"

        if cache_key in self.font_cache:
            return self.font_cache[cache_key]

        font = None

        if "/" in font_name or font_name.endswith((".ttf", ".otf")):
            font_path = os.path.expanduser(font_name)
            try:
                font = ImageFont.truetype(font_path, font_size)
            except OSError as e:
                logger.warning(f"Failed to load font from path '{font_path}': {e}")

        if not font:
            font = self._search_system_font(font_name, font_size)

        if not font:
            logger.warning(f"Failed to load font '{font_name}', using default")
            font = ImageFont.load_default()

        self.font_cache[cache_key] = font
        return font

    def _search_system_font(self, font_name: str, font_size: int):
        font_dirs = [
            "/usr/share/fonts",
            "/usr/local/share/fonts",
            os.path.expanduser("~/.fonts"),
            os.path.expanduser("~/.local/share/fonts"),
        ]
        wanted = font_name.lower().replace(" ", "")

        for font_dir in font_dirs:
            if not os.path.exists(font_dir):
                continue

            for root, _dirs, files in os.walk(font_dir):
                for file in files:
                    if not file.endswith((".ttf", ".otf")):
                        continue
                    if wanted not in file.lower().replace(" ", ""):
                        continue
                    font_path = os.path.join(root, file)
                    try:
                        font = ImageFont.truetype(font_path, font_size)
                        logger.debug(f"Loaded font: {font_path}")
                        return font
                    except OSError as e:
                        logger.debug(f"Cannot load font {font_path}: {e}")

        return None
