"""
Base widget host abstraction
"""

from abc import ABC, abstractmethod
from typing import List

from PIL import Image

from ..signals.refresh import TriggerHandle
from ..widgets.model import RenderModel


class WidgetHost(ABC):
    """Base class for hosts that display widgets and deliver their triggers"""

    name: str = "base"

    @abstractmethod
    def get_widget_ids(self) -> List[int]:
        """
        List the widget instances currently placed by the user

        Returns:
            Widget ids (may be empty)
        """
        pass

    @abstractmethod
    def update_widget(self, widget_id: int, image: Image.Image, model: RenderModel) -> None:
        """
        Replace a widget's visible surface

        Args:
            widget_id: Host-assigned widget id
            image: Painted widget surface
            model: Render model the surface was painted from
        """
        pass

    @abstractmethod
    def attach_click_trigger(self, widget_id: int, trigger: TriggerHandle) -> None:
        """
        Attach a trigger fired when the widget root is tapped

        Args:
            widget_id: Host-assigned widget id
            trigger: Trigger built by RefreshSignaler
        """
        pass

    def deliver(self, trigger: TriggerHandle) -> None:
        """
        Deliver a fired trigger to the application

        Hosts without a delivery mechanism ignore it; a dropped delivery is
        corrected by the next natural update.
        """
        return None
