"""
Data models for storage layer.

Defines sync bookkeeping records persisted alongside the catalog.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SyncMetadata:
    """Bookkeeping for the most recent successful sync.

    A single record exists process-wide; every sync overwrites it.
    """
    last_synced: datetime
    next_eligible: datetime
    source: str
    model_count: int
    inserted_count: int = 0
    updated_count: int = 0

    def __post_init__(self):
        """Validate counts and time ordering."""
        if self.model_count < 0:
            raise ValueError("model_count cannot be negative")
        if self.inserted_count < 0 or self.updated_count < 0:
            raise ValueError("inserted/updated counts cannot be negative")
        if self.next_eligible < self.last_synced:
            raise ValueError("next_eligible must not be before last_synced")


@dataclass(frozen=True)
class UpsertResult:
    """Counts of rows written by a catalog upsert."""
    inserted: int
    updated: int
