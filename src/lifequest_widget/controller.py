"""
Controller wiring host callbacks to the widget core.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .config.loader import ConfigLoader
from .hosts.base import WidgetHost
from .links.channel import LinkChannel
from .links.router import LinkEvent, LinkOrigin, LinkRouter
from .render.renderer import WidgetRenderer
from .signals.refresh import RefreshSignaler, TriggerHandle
from .state.reader import PersistedStateReader, YamlStateStore
from .utils.errors import error_boundary, safe_execute
from .widgets.model import RenderModel, build_render_model

logger = logging.getLogger(__name__)

ACTION_APPWIDGET_UPDATE = "android.appwidget.action.APPWIDGET_UPDATE"


class WidgetController:
    """
    Thin adapter between host callbacks and the widget core.

    Every public callback is wrapped in an error boundary: nothing raised
    while deriving or routing reaches the host.

    Components:
    - PersistedStateReader: reads the application's snapshot
    - WidgetRenderer: paints models and attaches the refresh trigger
    - RefreshSignaler: builds the background refresh trigger
    - LinkRouter/LinkChannel: route deep links into the application
    """

    def __init__(
        self,
        host: WidgetHost,
        config: Optional[Dict[str, Any]] = None,
        state_source: Any = None,
        launch_uri: Any = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            host: Widget host adapter
            config: Loaded configuration (defaults if None)
            state_source: Snapshot source; defaults to the configured state file
            launch_uri: URI the process was launched with, if any
        """
        self.config: Dict[str, Any] = config or ConfigLoader().default_config()
        self.host = host

        if state_source is None:
            state_source = YamlStateStore(self.config["state"]["path"])
        self.state_reader = PersistedStateReader(state_source)

        widget_config = self.config["widget"]
        self.signaler = RefreshSignaler(widget_config["refresh_uri"])
        self.renderer = WidgetRenderer(
            host,
            signaler=self.signaler,
            styles=self.config.get("styles", {}),
            size=tuple(widget_config["size"]),
        )

        app_config = self.config["app"]
        self.router = LinkRouter(scheme=app_config["scheme"], launch_uri=launch_uri)
        self.channel = LinkChannel(self.router, name=app_config["channel"])

    def build_model(self, now: Optional[datetime] = None) -> RenderModel:
        """Read the current snapshot and derive its render model."""
        return build_render_model(self.state_reader.read(), now)

    @error_boundary(default_return=[])
    def on_receive(
        self, action: str, widget_ids: Optional[Iterable[int]] = None
    ) -> List[int]:
        """
        Handle a broadcast from the host.

        An update broadcast without widget ids updates every widget the host
        knows about.

        Returns:
            Ids of widgets that were updated
        """
        logger.debug(f"onReceive: {action}")

        if action != ACTION_APPWIDGET_UPDATE:
            return []

        ids = list(widget_ids) if widget_ids is not None else self.host.get_widget_ids()
        if not ids:
            return []
        return self.on_update(ids)

    @error_boundary(default_return=[])
    def on_update(
        self, widget_ids: Optional[Iterable[int]] = None, now: Optional[datetime] = None
    ) -> List[int]:
        """
        Update widgets from the persisted snapshot.

        Each widget is updated on its own; a failure on one is logged and
        does not stop the others.

        Args:
            widget_ids: Widgets to update (all host widgets if None)
            now: Reference time for the level-up window

        Returns:
            Ids of widgets that were updated
        """
        ids = list(widget_ids) if widget_ids is not None else self.host.get_widget_ids()
        logger.debug(f"onUpdate triggered for {len(ids)} widgets")

        updated = []
        for widget_id in ids:
            if safe_execute(lambda: self._update_widget(widget_id, now), default=False):
                updated.append(widget_id)
            else:
                logger.warning(f"Widget {widget_id} was not updated")

        return updated

    def _update_widget(self, widget_id: int, now: Optional[datetime]) -> bool:
        self.renderer.render(widget_id, self.build_model(now))
        return True

    @error_boundary(default_return=None)
    def on_tap(self, widget_id: int) -> Optional[TriggerHandle]:
        """
        Deliver a background refresh trigger for a tapped widget.

        The trigger is built fresh; it carries the same fixed address as the
        one attached to the widget root at render time. Delivery is handed
        to the host; the refreshed render arrives later through a separate
        update callback, if at all.
        """
        trigger = self.signaler.build_refresh_trigger()
        logger.info(f"Widget {widget_id} tapped, firing {trigger.uri}")
        self.host.deliver(trigger)
        return trigger

    @error_boundary(default_return=None)
    def on_new_link(self, uri: Any) -> Optional[LinkEvent]:
        """Handle a URI delivered while the application is running."""
        return self.router.route(uri, LinkOrigin.LIVE)

    @error_boundary(default_return=None)
    def on_launch(self, uri: Any) -> Optional[LinkEvent]:
        """Record the URI the process was launched with."""
        return self.router.route(uri, LinkOrigin.COLD_START)

    def handle_method_call(self, method: str, args: Any = None) -> Optional[str]:
        """
        Answer a method call on the link channel.

        Raises:
            MethodNotImplementedError: For unknown methods
        """
        return self.channel.handle_call(method, args)
