"""
Deep-link routing into the owning application.
"""

from .channel import GET_INITIAL_LINK, LinkChannel
from .router import ON_LINK, LinkEvent, LinkOrigin, LinkRouter, normalize_uri, uri_scheme

__all__ = [
    "GET_INITIAL_LINK",
    "ON_LINK",
    "LinkChannel",
    "LinkEvent",
    "LinkOrigin",
    "LinkRouter",
    "normalize_uri",
    "uri_scheme",
]
