"""
Directory-backed widget host.

Each widget surface is written as ``widget-<id>.png`` with a
``widget-<id>.yaml`` sidecar describing the model and its click trigger.
Delivered triggers are appended to ``broadcasts.log``.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from PIL import Image

from ..signals.refresh import TriggerHandle
from ..utils.errors import RenderError
from ..widgets.model import RenderModel
from .base import WidgetHost

logger = logging.getLogger(__name__)


class DirectoryHost(WidgetHost):
    """Host that renders widgets into files in a directory"""

    name = "directory"

    def __init__(self, output_dir: Union[str, Path], widget_ids: Optional[List[int]] = None):
        self.output_dir = Path(output_dir).expanduser()
        self.widget_ids = list(widget_ids or [])
        self._triggers: Dict[int, TriggerHandle] = {}

    def get_widget_ids(self) -> List[int]:
        return list(self.widget_ids)

    def image_path(self, widget_id: int) -> Path:
        return self.output_dir / f"widget-{widget_id}.png"

    def sidecar_path(self, widget_id: int) -> Path:
        return self.output_dir / f"widget-{widget_id}.yaml"

    @property
    def broadcast_log(self) -> Path:
        return self.output_dir / "broadcasts.log"

    def update_widget(self, widget_id: int, image: Image.Image, model: RenderModel) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)

        try:
            image.save(self.image_path(widget_id), format="PNG")
        except OSError as e:
            raise RenderError(f"Cannot write widget {widget_id} surface: {e}")

        self._write_sidecar(widget_id, model)
        logger.debug(f"Wrote widget {widget_id} to {self.image_path(widget_id)}")

    def attach_click_trigger(self, widget_id: int, trigger: TriggerHandle) -> None:
        self._triggers[widget_id] = trigger

    def get_click_trigger(self, widget_id: int) -> Optional[TriggerHandle]:
        """Return the trigger attached to a widget, if any."""
        return self._triggers.get(widget_id)

    def deliver(self, trigger: TriggerHandle) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat()
        with open(self.broadcast_log, "a", encoding="utf-8") as f:
            f.write(f"{stamp} {trigger.uri}\n")
        logger.info(f"Delivered background trigger: {trigger.uri}")

    def _write_sidecar(self, widget_id: int, model: RenderModel) -> None:
        trigger = self._triggers.get(widget_id)
        sidecar: Dict[str, Any] = {
            "widget_id": widget_id,
            "model": model.to_dict(),
            "click_uri": trigger.uri if trigger else None,
        }
        with open(self.sidecar_path(widget_id), "w", encoding="utf-8") as f:
            yaml.safe_dump(sidecar, f, allow_unicode=True, sort_keys=False)
