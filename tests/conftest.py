"""
Pytest configuration and fixtures
"""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
import yaml

from lifequest_widget.config.loader import ConfigLoader
from lifequest_widget.hosts.base import WidgetHost


@pytest.fixture
def sample_state():
    """Sample persisted state as written by the application"""
    return {
        "level": 12,
        "xpInLevel": 45,
        "xpNeeded": 150,
        "recentLast": "+120XP — Finish report",
        "milestoneLevels": "10,20,30,40,50",
        "levelUpTime": "2024-01-15T10:00:00Z",
    }


@pytest.fixture
def state_file(tmp_path, sample_state):
    """Create a temporary state file"""
    state_path = tmp_path / "state.yaml"
    with open(state_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(sample_state, f, allow_unicode=True)
    return state_path


@pytest.fixture
def fixed_now():
    """Reference time two seconds after the sample level-up"""
    return datetime(2024, 1, 15, 10, 0, 2, tzinfo=timezone.utc)


@pytest.fixture
def config(tmp_path):
    """Default configuration pointing at temporary paths"""
    config = ConfigLoader().default_config()
    config["state"]["path"] = str(tmp_path / "state.yaml")
    config["host"]["output_dir"] = str(tmp_path / "widgets")
    return config


@pytest.fixture
def mock_host():
    """Mock widget host"""
    host = Mock(spec=WidgetHost)
    host.name = "test"
    host.get_widget_ids.return_value = [1, 2]
    return host
