"""
Tests for the persisted state reader.
"""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from lifequest_widget.state.reader import (
    DEFAULT_RECENT_LAST,
    PersistedSnapshot,
    PersistedStateReader,
    YamlStateStore,
)
from lifequest_widget.utils.errors import StateStoreError
from lifequest_widget.widgets.model import build_render_model


class TestPersistedSnapshot:
    """Test snapshot defaults and field parsing"""

    def test_all_defaults(self):
        snapshot = PersistedSnapshot.from_mapping({})

        assert snapshot.level == 1
        assert snapshot.xp_in_level == 0
        assert snapshot.xp_needed == 100
        assert snapshot.recent_last == DEFAULT_RECENT_LAST
        assert snapshot.milestone_levels == "10,20,30,40,50"
        assert snapshot.level_up_time is None

    def test_none_source(self):
        assert PersistedSnapshot.from_mapping(None) == PersistedSnapshot()

    def test_non_mapping_source(self):
        assert PersistedSnapshot.from_mapping(["level", 3]) == PersistedSnapshot()

    def test_reads_fields(self, sample_state):
        snapshot = PersistedSnapshot.from_mapping(sample_state)

        assert snapshot.level == 12
        assert snapshot.xp_in_level == 45
        assert snapshot.xp_needed == 150
        assert snapshot.recent_last == "+120XP — Finish report"
        assert snapshot.level_up_time == "2024-01-15T10:00:00Z"

    def test_integer_strings_accepted(self):
        snapshot = PersistedSnapshot.from_mapping({"level": " 4 ", "xpNeeded": "250"})
        assert snapshot.level == 4
        assert snapshot.xp_needed == 250

    def test_malformed_fields_fall_back_individually(self):
        """Test that one corrupted field does not discard the others"""
        snapshot = PersistedSnapshot.from_mapping(
            {
                "level": "nine",
                "xpInLevel": 30,
                "xpNeeded": True,
                "recentLast": 17,
                "milestoneLevels": ["10"],
                "levelUpTime": 1700000000,
            }
        )

        assert snapshot.level == 1
        assert snapshot.xp_in_level == 30
        assert snapshot.xp_needed == 100
        assert snapshot.recent_last == DEFAULT_RECENT_LAST
        assert snapshot.milestone_levels == "10,20,30,40,50"
        assert snapshot.level_up_time is None


class TestYamlStateStore:
    """Test the file-backed store"""

    def test_load(self, state_file, sample_state):
        assert YamlStateStore(state_file).load() == sample_state

    def test_missing_file_is_empty(self, tmp_path):
        assert YamlStateStore(tmp_path / "missing.yaml").load() == {}

    def test_empty_file_is_empty(self, tmp_path):
        path = tmp_path / "state.yaml"
        path.write_text("")
        assert YamlStateStore(path).load() == {}

    def test_unquoted_yaml_values(self, tmp_path):
        """Test hand-written state where YAML resolves timestamps and ints"""
        path = tmp_path / "state.yaml"
        path.write_text(
            "level: 7\n"
            "milestoneLevels: 7\n"
            "levelUpTime: 2024-01-15T10:00:00Z\n",
            encoding="utf-8",
        )

        snapshot = PersistedStateReader(YamlStateStore(path)).read()
        model = build_render_model(
            snapshot, now=datetime(2024, 1, 15, 10, 0, 2, tzinfo=timezone.utc)
        )

        assert snapshot.milestone_levels == "7"
        assert snapshot.level_up_time.startswith("2024-01-15T10:00:00")
        assert model.is_milestone is True
        assert model.is_recent_level_up is True

    def test_unquoted_naive_timestamp_is_utc(self, tmp_path):
        path = tmp_path / "state.yaml"
        path.write_text("levelUpTime: 2024-01-15 10:00:00\n", encoding="utf-8")

        snapshot = PersistedStateReader(YamlStateStore(path)).read()

        assert snapshot.level_up_time == "2024-01-15T10:00:00+00:00"

    def test_json_file(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text('{"level": 5, "xpInLevel": 10}')
        assert YamlStateStore(path).load() == {"level": 5, "xpInLevel": 10}

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "state.yaml"
        path.write_text("level: [unclosed")
        with pytest.raises(StateStoreError):
            YamlStateStore(path).load()

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "state.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(StateStoreError, match="must contain a mapping"):
            YamlStateStore(path).load()


class TestPersistedStateReader:
    """Test that reading never fails"""

    def test_mapping_source(self, sample_state):
        assert PersistedStateReader(sample_state).read().level == 12

    def test_store_source(self, state_file):
        assert PersistedStateReader(YamlStateStore(state_file)).read().xp_needed == 150

    def test_no_source(self):
        assert PersistedStateReader().read() == PersistedSnapshot()

    def test_broken_store_degrades_to_defaults(self, caplog):
        store = Mock()
        store.load.side_effect = StateStoreError("disk on fire")

        assert PersistedStateReader(store).read() == PersistedSnapshot()
        assert "using defaults" in caplog.text

    def test_corrupted_file_degrades_to_defaults(self, tmp_path):
        path = tmp_path / "state.yaml"
        path.write_text("level: [unclosed")
        assert PersistedStateReader(YamlStateStore(path)).read() == PersistedSnapshot()

    def test_reads_fresh_each_time(self, tmp_path):
        path = tmp_path / "state.yaml"
        reader = PersistedStateReader(YamlStateStore(path))

        path.write_text("level: 2\n")
        assert reader.read().level == 2
        path.write_text("level: 3\n")
        assert reader.read().level == 3
