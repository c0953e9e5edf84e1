"""
Unit tests for the sync update gate.

Tests interval enforcement and the force override.
"""

from datetime import datetime, timedelta, timezone

from price_catalog.core.update_gate import (
    DEFAULT_MIN_INTERVAL,
    check_sync_due,
    next_eligible_after,
)
from price_catalog.storage.models import SyncMetadata

NOW = datetime(2025, 6, 15, 9, 30, tzinfo=timezone.utc)


def _metadata(last_synced: datetime) -> SyncMetadata:
    return SyncMetadata(
        last_synced=last_synced,
        next_eligible=last_synced + DEFAULT_MIN_INTERVAL,
        source="litellm/model_prices_and_context_window.json",
        model_count=30
    )


class TestCheckSyncDue:
    """Test sync due decisions."""

    def test_default_interval_is_seven_days(self):
        assert DEFAULT_MIN_INTERVAL == timedelta(days=7)

    def test_never_synced_is_due(self):
        decision = check_sync_due(None, NOW)
        assert decision.due is True

    def test_recent_sync_is_skipped(self):
        last = NOW - timedelta(days=6)
        decision = check_sync_due(_metadata(last), NOW)

        assert decision.due is False
        assert decision.last_synced == last
        assert decision.next_eligible == last + timedelta(days=7)

    def test_stale_sync_is_due(self):
        decision = check_sync_due(_metadata(NOW - timedelta(days=8)), NOW)
        assert decision.due is True

    def test_exact_interval_is_due(self):
        """Elapsed time equal to the interval is enough."""
        decision = check_sync_due(_metadata(NOW - timedelta(days=7)), NOW)
        assert decision.due is True

    def test_force_overrides_recent_sync(self):
        decision = check_sync_due(_metadata(NOW - timedelta(minutes=5)), NOW, force=True)
        assert decision.due is True

    def test_force_without_metadata(self):
        assert check_sync_due(None, NOW, force=True).due is True

    def test_custom_interval(self):
        metadata = _metadata(NOW - timedelta(hours=2))
        assert check_sync_due(metadata, NOW, min_interval=timedelta(hours=1)).due is True
        assert check_sync_due(metadata, NOW, min_interval=timedelta(hours=3)).due is False


class TestNextEligible:
    """Test next eligible time computation."""

    def test_adds_interval(self):
        assert next_eligible_after(NOW) == NOW + timedelta(days=7)

    def test_custom_interval(self):
        assert next_eligible_after(NOW, timedelta(days=1)) == NOW + timedelta(days=1)
