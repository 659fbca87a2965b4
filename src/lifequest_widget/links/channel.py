"""
Named method channel between the host process and the application logic.

The application asks for the launching link with ``getInitialLink`` and
listens for ``onLink`` invocations carrying live links.
"""

import logging
from typing import Any, Callable, Optional

from ..utils.errors import MethodNotImplementedError
from .router import LinkRouter

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL = "com.example.life_quests/deep_link"
GET_INITIAL_LINK = "getInitialLink"


class LinkChannel:
    """
    Method channel bound to a LinkRouter.

    Incoming calls are answered from the router; outgoing ``onLink``
    invocations go to the registered listener.
    """

    def __init__(self, router: LinkRouter, name: str = DEFAULT_CHANNEL):
        self.name = name
        self.router = router
        self._listener: Optional[Callable[[str, Any], Any]] = None
        router.forward = self.invoke_method

    def set_listener(self, listener: Optional[Callable[[str, Any], Any]]) -> None:
        """Register the application-side listener (None detaches it)."""
        self._listener = listener

    def handle_call(self, method: str, args: Any = None) -> Optional[str]:
        """
        Answer a method call from the application.

        Raises:
            MethodNotImplementedError: For any method other than getInitialLink
        """
        if method == GET_INITIAL_LINK:
            return self.router.initial_link()
        raise MethodNotImplementedError(method)

    def invoke_method(self, method: str, args: Any) -> None:
        """Invoke a method on the application side."""
        if self._listener is None:
            logger.debug(f"No listener on {self.name}, dropping {method}")
            return
        self._listener(method, args)
