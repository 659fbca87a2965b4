"""
Link routing for URIs delivered by the host.

A URI reaches the process at one of two points: it launched the process
(cold start), or it arrived while the process was already running (live).
Both pass through the same ``route`` function so normalization and scheme
matching are shared.
"""

import enum
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

# Name of the event forwarded to the application's logic layer
ON_LINK = "onLink"

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")


class LinkOrigin(enum.Enum):
    """Where a link entered the process."""

    COLD_START = "cold_start"
    LIVE = "live"


@dataclass(frozen=True)
class LinkEvent:
    """A normalized URI together with its delivery context."""

    uri: str
    origin: LinkOrigin


def normalize_uri(uri: Any) -> Optional[str]:
    """
    Normalize a delivered URI to its canonical string form.

    Surrounding whitespace is stripped and bytes are decoded; the URI itself
    is otherwise kept exactly as delivered. Returns None for no link.
    """
    if uri is None:
        return None
    if isinstance(uri, bytes):
        uri = uri.decode("utf-8", errors="replace")
    text = str(uri).strip()
    return text or None


def uri_scheme(uri: str) -> Optional[str]:
    """
    Extract the scheme of a URI exactly as written.

    Unlike urllib.parse the case is preserved, so matching stays exact.
    """
    match = _SCHEME_RE.match(uri)
    return match.group(1) if match else None


class LinkRouter:
    """
    Routes delivered URIs to the application's active logic channel.

    Attributes:
        scheme: Registered application scheme (matched exactly)
    """

    def __init__(
        self,
        scheme: str = "lifequest",
        forward: Optional[Callable[[str, str], Any]] = None,
        launch_uri: Any = None,
    ):
        """
        Initialize the router.

        Args:
            scheme: Registered application scheme
            forward: Callable receiving (event_name, uri) for live links
            launch_uri: URI the process was launched with, if any
        """
        self.scheme = scheme
        self.forward = forward
        self._launch_uri: Optional[str] = normalize_uri(launch_uri)

    def route(self, uri: Any, origin: LinkOrigin) -> Optional[LinkEvent]:
        """
        Route one delivered URI.

        Cold-start links become the launching context. Live links replace the
        launching context whatever their scheme, and are forwarded as an
        ``onLink`` event only when their scheme matches exactly.

        Args:
            uri: Delivered URI (str, bytes or any object whose str() is the URI)
            origin: Delivery context

        Returns:
            The LinkEvent that was recorded or forwarded, or None
        """
        normalized = normalize_uri(uri)

        if origin is LinkOrigin.COLD_START:
            self._launch_uri = normalized
            return LinkEvent(normalized, origin) if normalized else None

        # A relaunch replaces the launching context
        self._launch_uri = normalized
        if normalized is None:
            return None

        scheme = uri_scheme(normalized)
        if scheme != self.scheme:
            logger.debug(f"Ignoring link with scheme {scheme!r}: {normalized}")
            return None

        event = LinkEvent(normalized, origin)
        if self.forward is None:
            logger.warning(f"No active channel, dropping link: {normalized}")
            return None

        logger.info(f"Forwarding {ON_LINK}: {normalized}")
        self.forward(ON_LINK, normalized)
        return event

    def deliver_live(self, uri: Any) -> Optional[LinkEvent]:
        """Handle a URI delivered while the process is running."""
        return self.route(uri, LinkOrigin.LIVE)

    def set_launch_uri(self, uri: Any) -> None:
        """Record the URI the process was launched with."""
        self.route(uri, LinkOrigin.COLD_START)

    def initial_link(self) -> Optional[str]:
        """Return the current launching URI, or None if there is none."""
        return self._launch_uri
