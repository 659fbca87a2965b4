"""
Refresh trigger construction.

Tapping the widget must not open the application. Instead the host delivers
a fixed, well-known address to the application's background handler, which
recomputes and re-persists state. This module only builds that address; it
never interprets the delivery.
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

REFRESH_URI = "lifequest://refresh"


@dataclass(frozen=True)
class TriggerHandle:
    """
    Opaque, deferred signal attached to an interactive widget element.

    Attributes:
        uri: Address delivered to the application
        foreground: Whether delivery brings the application UI forward
    """

    uri: str
    foreground: bool = False


class RefreshSignaler:
    """Builds the background refresh trigger for the widget root."""

    def __init__(self, refresh_uri: str = REFRESH_URI):
        self.refresh_uri = refresh_uri

    def build_refresh_trigger(self) -> TriggerHandle:
        """Return the background refresh trigger. Cannot fail."""
        trigger = TriggerHandle(uri=self.refresh_uri, foreground=False)
        logger.debug(f"Background intent URI: {trigger.uri}")
        return trigger
