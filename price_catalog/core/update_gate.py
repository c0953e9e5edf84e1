"""
Update gate for price synchronization.

Enforces a minimum interval between sync passes, with a force override.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from price_catalog.storage.models import SyncMetadata

DEFAULT_MIN_INTERVAL = timedelta(days=7)


@dataclass(frozen=True)
class GateDecision:
    """Outcome of checking whether a sync is due."""
    due: bool
    last_synced: Optional[datetime] = None
    next_eligible: Optional[datetime] = None


def next_eligible_after(last_synced: datetime, min_interval: timedelta = DEFAULT_MIN_INTERVAL) -> datetime:
    """Earliest time the next non-forced sync may run."""
    return last_synced + min_interval


def check_sync_due(
    metadata: Optional[SyncMetadata],
    now: datetime,
    min_interval: timedelta = DEFAULT_MIN_INTERVAL,
    force: bool = False
) -> GateDecision:
    """Decide whether a synchronization pass should run.

    Args:
        metadata: Sync metadata from the last pass, or None if never synced
        now: Current time
        min_interval: Minimum time between passes
        force: Run regardless of the last sync time

    Returns:
        GateDecision; when not due it carries the last and next sync times
    """
    if force or metadata is None:
        return GateDecision(due=True)

    if now - metadata.last_synced >= min_interval:
        return GateDecision(due=True, last_synced=metadata.last_synced)

    return GateDecision(
        due=False,
        last_synced=metadata.last_synced,
        next_eligible=next_eligible_after(metadata.last_synced, min_interval),
    )
