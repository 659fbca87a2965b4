"""
Error handling utilities and boundaries for LifeQuest widget.

Provides consistent error handling patterns across the codebase. Nothing in
the derivation path is allowed to fail loudly: malformed input degrades to a
documented default and host-facing callbacks are wrapped in boundaries.
"""

import logging
import re
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

# Type variable for generic function decoration
F = TypeVar("F", bound=Callable[..., Any])
T = TypeVar("T")

# Optional sign followed by ASCII digits only
_INT_RE = re.compile(r"[+-]?[0-9]+")


def error_boundary(
    *,
    reraise: bool = False,
    default_return: Any = None,
    log_level: int = logging.ERROR,
) -> Callable[[F], F]:
    """
    Decorator to create consistent error boundaries around functions.

    Args:
        reraise: If True, re-raise the exception after logging
        default_return: Value to return if error occurs and not reraising
        log_level: Logging level for the error (default: ERROR)

    Returns:
        Decorated function with error handling

    Example:
        >>> @error_boundary(default_return=False)
        ... def on_tap(widget_id):
        ...     # If this raises, it will be logged and return False
        ...     host.deliver(signaler.build_refresh_trigger())
        ...     return True
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.log(
                    log_level,
                    f"Error in {func.__name__}: {e}",
                    exc_info=True,
                    extra={"function": func.__name__, "function_module": func.__module__},
                )

                if reraise:
                    raise

                return default_return

        return wrapper  # type: ignore

    return decorator


def safe_execute(
    func: Callable[[], Any],
    *,
    on_error: Optional[Callable[[Exception], Any]] = None,
    default: Any = None,
) -> Any:
    """
    Safely execute a function with error handling.

    Useful for one-off operations where a decorator isn't appropriate.

    Args:
        func: Function to execute
        on_error: Optional callback to call if error occurs (receives exception)
        default: Default value to return on error

    Returns:
        Function result, or default value on error
    """
    try:
        return func()
    except Exception as e:
        logger.error(f"Error in safe_execute: {e}", exc_info=True)
        if on_error:
            on_error(e)
        return default


def parse_or_default(value: Any, parser: Callable[[Any], T], default: T) -> T:
    """
    Parse a raw persisted value, falling back to a default.

    This is the single fallback policy for every snapshot field: a missing
    value (None) or any exception raised by ``parser`` yields ``default``.
    Fallbacks are expected on first run, so they are logged at DEBUG only.

    Args:
        value: Raw value read from the store (may be None)
        parser: Callable converting the raw value
        default: Value to return when the raw value is missing or malformed

    Returns:
        Parsed value or default

    Example:
        >>> parse_or_default("42", int, 0)
        42
        >>> parse_or_default("4x2", int, 0)
        0
    """
    if value is None:
        return default

    try:
        return parser(value)
    except Exception as e:
        logger.debug(f"Falling back to default {default!r} for {value!r}: {e}")
        return default


def parse_int(value: Any) -> int:
    """
    Strict integer parser for persisted counters.

    Accepts ints and integer strings made of an optional sign and ASCII
    digits. Booleans, floats, digit-group underscores ("1_0") and non-ASCII
    digits are rejected so a corrupted write can never be silently
    reinterpreted.
    """
    if isinstance(value, bool):
        raise TypeError(f"Expected integer, got bool: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not _INT_RE.fullmatch(text):
            raise ValueError(f"Not an integer: {value!r}")
        return int(text)
    raise TypeError(f"Expected integer, got {type(value).__name__}: {value!r}")


class LifeQuestError(Exception):
    """Base exception for all LifeQuest widget errors."""

    pass


class ConfigurationError(LifeQuestError, ValueError):
    """Raised when a configuration file is invalid."""

    pass


class StateStoreError(LifeQuestError):
    """Raised when the persisted state store cannot be read."""

    pass


class RenderError(LifeQuestError):
    """Raised when a widget surface cannot be painted."""

    pass


class MethodNotImplementedError(LifeQuestError):
    """Raised when a link channel receives a method it does not handle."""

    def __init__(self, method: str):
        super().__init__(f"Method not implemented: {method}")
        self.method = method
