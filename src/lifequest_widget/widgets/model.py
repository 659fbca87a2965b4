"""
Snapshot to render model transform.
"""

import logging
import math
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Optional, Tuple

from ..state.reader import PersistedSnapshot
from ..utils.errors import parse_int, parse_or_default

logger = logging.getLogger(__name__)

DEFAULT_MILESTONES: FrozenSet[int] = frozenset({10, 20, 30, 40, 50})

# Seconds after a level-up during which the level-up background is shown
LEVEL_UP_WINDOW_SECONDS = 5

RECENT_SEPARATOR = " — "
DEFAULT_RECENT_XP = "+0XP"
DEFAULT_RECENT_TASK = "No data"

MILESTONE_BADGE = "🏆"


@dataclass(frozen=True)
class RenderModel:
    """
    Display-ready widget state.

    Attributes:
        level_label: "Level N", with a trophy badge at milestone levels
        progress_text: "xp / needed XP"
        progress_percent: Progress bar value in [0, 100]
        recent_xp_label: XP part of the recent activity, e.g. "+120XP"
        recent_task_label: Task part of the recent activity
        is_milestone: Current level is a milestone level
        is_recent_level_up: A level-up happened within the recency window
    """

    level_label: str
    progress_text: str
    progress_percent: int
    recent_xp_label: str
    recent_task_label: str
    is_milestone: bool
    is_recent_level_up: bool

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict form, used for sidecar files and the CLI."""
        return asdict(self)


def compute_progress_percent(xp_in_level: int, xp_needed: int) -> int:
    """
    Compute the progress bar value.

    Returns floor(100 * xp_in_level / xp_needed) clamped to [0, 100], or 0
    when xp_needed is not positive.
    """
    if xp_needed <= 0:
        return 0
    percent = (100 * xp_in_level) // xp_needed
    return max(0, min(100, percent))


def _parse_milestone_tokens(raw: str) -> FrozenSet[int]:
    if not raw.strip():
        raise ValueError("empty milestone list")

    levels = set()
    for token in raw.split(","):
        level = parse_or_default(token.strip(), parse_int, None)
        if level is None:
            logger.debug(f"Dropping unparseable milestone token: {token!r}")
            continue
        levels.add(level)
    return frozenset(levels)


def parse_milestones(raw: Optional[str]) -> FrozenSet[int]:
    """
    Parse a comma-separated milestone list.

    Tokens are trimmed and parsed as integers; tokens that fail to parse are
    dropped individually. An absent, blank or non-string value yields the
    default milestone set.
    """
    return parse_or_default(raw, _parse_milestone_tokens, DEFAULT_MILESTONES)


def _parse_timestamp(raw: str) -> datetime:
    text = raw.strip()
    # fromisoformat only accepts a trailing "Z" on newer interpreters
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_recent_level_up(level_up_time: Optional[str], now: Optional[datetime] = None) -> bool:
    """
    Check whether a level-up happened within the recency window.

    Elapsed time is taken in whole seconds (floored). A missing or malformed
    timestamp is never recent; neither is one in the future.

    Args:
        level_up_time: ISO-8601 timestamp, or None
        now: Reference time (defaults to the current UTC time)
    """
    moment = parse_or_default(level_up_time, _parse_timestamp, None)
    if moment is None:
        return False

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    elapsed = math.floor((now - moment).total_seconds())
    return 0 <= elapsed < LEVEL_UP_WINDOW_SECONDS


def split_recent(recent_last: Optional[str]) -> Tuple[str, str]:
    """
    Split the recent activity string into (xp label, task label).

    Only the first separator counts; any later ones stay in the task label.
    A missing task part falls back to "No data"; a missing string falls back
    to ("+0XP", "No data"). Parts that are present but empty are kept as
    empty labels.

    Example:
        >>> split_recent("+120XP — Finish report")
        ('+120XP', 'Finish report')
        >>> split_recent("+0XP")
        ('+0XP', 'No data')
    """
    if not isinstance(recent_last, str):
        return DEFAULT_RECENT_XP, DEFAULT_RECENT_TASK

    parts = recent_last.split(RECENT_SEPARATOR, 1)
    task_label = parts[1] if len(parts) > 1 else DEFAULT_RECENT_TASK
    return parts[0], task_label


def build_render_model(
    snapshot: PersistedSnapshot, now: Optional[datetime] = None
) -> RenderModel:
    """
    Derive the render model from a persisted snapshot.

    Pure apart from reading the clock when ``now`` is not given. Never
    raises for malformed field contents; every field degrades to its default.

    Args:
        snapshot: Snapshot read by PersistedStateReader
        now: Reference time for the level-up window

    Returns:
        RenderModel for this update
    """
    is_milestone = snapshot.level in parse_milestones(snapshot.milestone_levels)
    recent_xp, recent_task = split_recent(snapshot.recent_last)

    if is_milestone:
        level_label = f"Level {snapshot.level} {MILESTONE_BADGE}"
    else:
        level_label = f"Level {snapshot.level}"

    model = RenderModel(
        level_label=level_label,
        progress_text=f"{snapshot.xp_in_level} / {snapshot.xp_needed} XP",
        progress_percent=compute_progress_percent(snapshot.xp_in_level, snapshot.xp_needed),
        recent_xp_label=recent_xp,
        recent_task_label=recent_task,
        is_milestone=is_milestone,
        is_recent_level_up=is_recent_level_up(snapshot.level_up_time, now),
    )

    logger.debug(
        f"Widget data: Level={snapshot.level}, XP={snapshot.xp_in_level}/{snapshot.xp_needed} "
        f"({model.progress_percent}%), Recent={snapshot.recent_last!r}, "
        f"Milestone={model.is_milestone}, LevelUp={model.is_recent_level_up}"
    )
    return model
