"""
Tests for render model derivation.
"""

import unittest
from datetime import datetime, timedelta, timezone

import pytest

from lifequest_widget.state.reader import PersistedSnapshot
from lifequest_widget.widgets.model import (
    DEFAULT_MILESTONES,
    build_render_model,
    compute_progress_percent,
    is_recent_level_up,
    parse_milestones,
    split_recent,
)

NOW = datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc)


def _iso(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


class TestProgressPercent:
    """Test progress bar value computation"""

    @pytest.mark.parametrize("xp_needed", [0, -1, -100])
    def test_non_positive_needed_is_zero(self, xp_needed):
        """Test that progress is zero whenever xpNeeded <= 0"""
        assert compute_progress_percent(50, xp_needed) == 0

    @pytest.mark.parametrize(
        "xp_in_level,xp_needed,expected",
        [(0, 100, 0), (45, 150, 30), (1, 3, 33), (2, 3, 66), (99, 100, 99), (100, 100, 100)],
    )
    def test_floor_of_ratio(self, xp_in_level, xp_needed, expected):
        """Test that progress is the floor of the percentage"""
        assert compute_progress_percent(xp_in_level, xp_needed) == expected

    def test_clamped_above(self):
        """Test that xpInLevel > xpNeeded is clamped to 100"""
        assert compute_progress_percent(250, 100) == 100

    def test_clamped_below(self):
        """Test that negative xpInLevel is clamped to 0"""
        assert compute_progress_percent(-5, 100) == 0


class TestMilestones:
    """Test milestone list parsing"""

    def test_parses_trimmed_tokens(self):
        assert parse_milestones(" 5, 15 ,25") == frozenset({5, 15, 25})

    def test_drops_bad_tokens_only(self):
        """Test that unparseable tokens are dropped, not the whole list"""
        assert parse_milestones("10,abc,,20,3.5") == frozenset({10, 20})

    def test_rejects_underscores_and_non_ascii_digits(self):
        assert parse_milestones("1_0,\u0661\u0662,20") == frozenset({20})

    def test_signed_tokens(self):
        assert parse_milestones("+10,-1") == frozenset({10, -1})

    def test_absent_uses_default(self):
        assert parse_milestones(None) == DEFAULT_MILESTONES

    def test_blank_uses_default(self):
        assert parse_milestones("  ") == DEFAULT_MILESTONES

    def test_non_string_uses_default(self):
        assert parse_milestones(42) == DEFAULT_MILESTONES

    def test_all_tokens_bad_gives_empty_set(self):
        assert parse_milestones("x,y") == frozenset()


class TestLevelUpRecency(unittest.TestCase):
    """Test the level-up recency window"""

    def test_just_now_is_recent(self):
        self.assertTrue(is_recent_level_up(_iso(NOW), NOW))

    def test_within_window(self):
        moment = NOW - timedelta(seconds=4, milliseconds=900)
        self.assertTrue(is_recent_level_up(_iso(moment), NOW))

    def test_window_boundary_is_not_recent(self):
        moment = NOW - timedelta(seconds=5)
        self.assertFalse(is_recent_level_up(_iso(moment), NOW))

    def test_old_level_up(self):
        moment = NOW - timedelta(minutes=3)
        self.assertFalse(is_recent_level_up(_iso(moment), NOW))

    def test_future_timestamp_is_not_recent(self):
        moment = NOW + timedelta(seconds=3)
        self.assertFalse(is_recent_level_up(_iso(moment), NOW))

    def test_absent(self):
        self.assertFalse(is_recent_level_up(None, NOW))

    def test_malformed(self):
        """Test that malformed timestamps never raise"""
        for value in ["yesterday", "", "2024-13-45T99:00:00Z", "not-a-date"]:
            self.assertFalse(is_recent_level_up(value, NOW), value)

    def test_offset_timestamp(self):
        """Test that explicit UTC offsets are honoured"""
        self.assertTrue(is_recent_level_up("2024-01-15T12:00:01+02:00", NOW + timedelta(seconds=2)))

    def test_naive_timestamp_is_utc(self):
        self.assertTrue(is_recent_level_up("2024-01-15T09:59:58", NOW))

    def test_naive_now_is_utc(self):
        naive_now = datetime(2024, 1, 15, 10, 0, 1)
        self.assertTrue(is_recent_level_up(_iso(NOW), naive_now))


class TestSplitRecent:
    """Test recent activity parsing"""

    def test_xp_and_task(self):
        assert split_recent("+120XP — Finish report") == ("+120XP", "Finish report")

    def test_no_separator(self):
        assert split_recent("+0XP") == ("+0XP", "No data")

    def test_splits_on_first_separator_only(self):
        assert split_recent("+5XP — Read — chapter 2") == ("+5XP", "Read — chapter 2")

    def test_plain_hyphen_is_not_separator(self):
        assert split_recent("+5XP - Walk") == ("+5XP - Walk", "No data")

    def test_empty_string_keeps_empty_xp_label(self):
        assert split_recent("") == ("", "No data")

    def test_empty_parts_kept(self):
        assert split_recent(" — Task") == ("", "Task")
        assert split_recent("+5XP — ") == ("+5XP", "")

    def test_none(self):
        assert split_recent(None) == ("+0XP", "No data")


class TestBuildRenderModel:
    """Test full render model derivation"""

    def test_defaults(self):
        """Test that an empty snapshot renders the documented defaults"""
        model = build_render_model(PersistedSnapshot(), NOW)

        assert model.level_label == "Level 1"
        assert model.progress_text == "0 / 100 XP"
        assert model.progress_percent == 0
        assert model.recent_xp_label == "+0XP"
        assert model.recent_task_label == "No data"
        assert model.is_milestone is False
        assert model.is_recent_level_up is False

    def test_milestone_without_recent_level_up(self):
        """Test badge without level-up background"""
        snapshot = PersistedSnapshot(level=20, level_up_time=_iso(NOW - timedelta(hours=1)))
        model = build_render_model(snapshot, NOW)

        assert model.level_label == "Level 20 🏆"
        assert model.is_milestone is True
        assert model.is_recent_level_up is False

    def test_recent_level_up_without_milestone(self):
        """Test level-up background without badge"""
        snapshot = PersistedSnapshot(level=7, level_up_time=_iso(NOW - timedelta(seconds=1)))
        model = build_render_model(snapshot, NOW)

        assert model.level_label == "Level 7"
        assert model.is_milestone is False
        assert model.is_recent_level_up is True

    def test_custom_milestones(self):
        snapshot = PersistedSnapshot(level=7, milestone_levels="3, 7, x")
        model = build_render_model(snapshot, NOW)

        assert model.level_label == "Level 7 🏆"
        assert model.is_milestone is True

    def test_progress_fields(self):
        snapshot = PersistedSnapshot(xp_in_level=45, xp_needed=150)
        model = build_render_model(snapshot, NOW)

        assert model.progress_text == "45 / 150 XP"
        assert model.progress_percent == 30

    def test_overflowing_xp_is_clamped(self):
        snapshot = PersistedSnapshot(xp_in_level=300, xp_needed=100)
        model = build_render_model(snapshot, NOW)

        assert model.progress_text == "300 / 100 XP"
        assert model.progress_percent == 100

    def test_models_compare_by_value(self):
        snapshot = PersistedSnapshot(level=3)
        assert build_render_model(snapshot, NOW) == build_render_model(snapshot, NOW)

    def test_to_dict(self):
        data = build_render_model(PersistedSnapshot(), NOW).to_dict()
        assert data["level_label"] == "Level 1"
        assert set(data) == {
            "level_label",
            "progress_text",
            "progress_percent",
            "recent_xp_label",
            "recent_task_label",
            "is_milestone",
            "is_recent_level_up",
        }
