"""
Persisted state reader.

The owning application writes a flat key/value map (level, XP counters,
recent activity, milestones, level-up time). This module reads it and fills
in defaults for anything missing or malformed. Reading never fails.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from ..utils.errors import StateStoreError, parse_int, parse_or_default

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = 1
DEFAULT_XP_IN_LEVEL = 0
DEFAULT_XP_NEEDED = 100
DEFAULT_RECENT_LAST = "+0XP — No data"
DEFAULT_MILESTONE_LEVELS = "10,20,30,40,50"

# Keys as written by the application
KEY_LEVEL = "level"
KEY_XP_IN_LEVEL = "xpInLevel"
KEY_XP_NEEDED = "xpNeeded"
KEY_RECENT_LAST = "recentLast"
KEY_MILESTONE_LEVELS = "milestoneLevels"
KEY_LEVEL_UP_TIME = "levelUpTime"


def _parse_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"Expected string, got {type(value).__name__}")
    return value


def _parse_milestone_str(value: Any) -> str:
    # An unquoted single level ("milestoneLevels: 7") loads as an int
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return _parse_str(value)


def _parse_timestamp_str(value: Any) -> str:
    # YAML resolves unquoted ISO-8601 values to datetime objects
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return _parse_str(value)


@dataclass(frozen=True)
class PersistedSnapshot:
    """Defaulted view of the application's persisted widget fields."""

    level: int = DEFAULT_LEVEL
    xp_in_level: int = DEFAULT_XP_IN_LEVEL
    xp_needed: int = DEFAULT_XP_NEEDED
    recent_last: str = DEFAULT_RECENT_LAST
    milestone_levels: str = DEFAULT_MILESTONE_LEVELS
    level_up_time: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "PersistedSnapshot":
        """
        Build a snapshot from a raw key/value mapping.

        Args:
            data: Raw mapping using the application's key names, or None

        Returns:
            Snapshot with defaults substituted for missing or malformed fields
        """
        if not isinstance(data, Mapping):
            if data is not None:
                logger.debug(f"Ignoring non-mapping snapshot source: {type(data).__name__}")
            data = {}

        return cls(
            level=parse_or_default(data.get(KEY_LEVEL), parse_int, DEFAULT_LEVEL),
            xp_in_level=parse_or_default(
                data.get(KEY_XP_IN_LEVEL), parse_int, DEFAULT_XP_IN_LEVEL
            ),
            xp_needed=parse_or_default(data.get(KEY_XP_NEEDED), parse_int, DEFAULT_XP_NEEDED),
            recent_last=parse_or_default(
                data.get(KEY_RECENT_LAST), _parse_str, DEFAULT_RECENT_LAST
            ),
            milestone_levels=parse_or_default(
                data.get(KEY_MILESTONE_LEVELS), _parse_milestone_str, DEFAULT_MILESTONE_LEVELS
            ),
            level_up_time=parse_or_default(
                data.get(KEY_LEVEL_UP_TIME), _parse_timestamp_str, None
            ),
        )


class YamlStateStore:
    """
    Key/value store backed by a YAML (or JSON) file.

    JSON is a subset of YAML, so a state file exported by the application as
    JSON loads the same way.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def load(self) -> Dict[str, Any]:
        """
        Load the raw key/value map.

        Returns:
            Mapping of stored keys (empty if the file does not exist yet)

        Raises:
            StateStoreError: If the file exists but cannot be read or parsed
        """
        if not self.path.exists():
            logger.debug(f"State file not found, treating as empty: {self.path}")
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise StateStoreError(f"Cannot read state file {self.path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise StateStoreError(f"State file {self.path} must contain a mapping")
        return data


class PersistedStateReader:
    """
    Reads a PersistedSnapshot from a snapshot source.

    The source may be a plain mapping, an object with a ``load()`` method
    returning a mapping (such as YamlStateStore), or None.
    """

    def __init__(self, source: Any = None):
        self.source = source

    def read(self) -> PersistedSnapshot:
        """
        Read the current snapshot.

        Returns:
            Defaulted snapshot; an absent or broken store yields all defaults
        """
        return PersistedSnapshot.from_mapping(self._load_raw())

    def _load_raw(self) -> Optional[Mapping[str, Any]]:
        if self.source is None:
            return None

        if isinstance(self.source, Mapping):
            return self.source

        try:
            return self.source.load()
        except Exception as e:
            logger.warning(f"State store unavailable, using defaults: {e}")
            return None
