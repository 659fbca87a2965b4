"""
Tests for the refresh trigger.
"""

from lifequest_widget.signals.refresh import REFRESH_URI, RefreshSignaler, TriggerHandle


class TestRefreshSignaler:
    """Test refresh trigger construction"""

    def test_default_address(self):
        trigger = RefreshSignaler().build_refresh_trigger()
        assert trigger.uri == "lifequest://refresh"
        assert trigger.uri == REFRESH_URI

    def test_does_not_open_app(self):
        assert RefreshSignaler().build_refresh_trigger().foreground is False

    def test_custom_address(self):
        trigger = RefreshSignaler("otherapp://sync").build_refresh_trigger()
        assert trigger == TriggerHandle(uri="otherapp://sync", foreground=False)

    def test_stateless(self):
        signaler = RefreshSignaler()
        assert signaler.build_refresh_trigger() == signaler.build_refresh_trigger()
