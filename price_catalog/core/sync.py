"""
Catalog synchronization and read operations.

Ties the update gate, the feed reconciler and the catalog store together.
The store is passed in explicitly so these operations can run against any
repository, including a throwaway one in tests.

Failures are reported as structured outcomes rather than raised:
1. Feed unreachable - no catalog change
2. Feed reachable but no tracked model resolved - no catalog change
3. Store unreachable - fetched models are kept on the outcome
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

from price_catalog.config.loader import SyncConfig
from price_catalog.storage.models import SyncMetadata
from price_catalog.storage.repository import CatalogRepository

from .calculator import CostBreakdown, UsageParameters, calculate_cost
from .catalog import FALLBACK_MODELS, FALLBACK_SOURCE, CatalogModel
from .errors import EmptyResolution, ErrorKind, PricingSyncError, StoreUnavailable
from .reconciler import ReconciliationResult, fetch_latest_pricing
from .update_gate import check_sync_due, next_eligible_after

logger = logging.getLogger(__name__)

Fetcher = Callable[[SyncConfig, Optional[datetime]], ReconciliationResult]


class SyncStatus(Enum):
    """Result status of a synchronize call."""
    SKIPPED = "skipped"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class SyncOutcome:
    """Structured result of a synchronize call."""
    status: SyncStatus
    message: str = ""
    error_kind: Optional[ErrorKind] = None
    models_updated: int = 0
    inserted: int = 0
    updated: int = 0
    last_synced: Optional[datetime] = None
    next_eligible: Optional[datetime] = None
    source: Optional[str] = None
    models: List[CatalogModel] = field(default_factory=list)


@dataclass(frozen=True)
class CatalogSnapshot:
    """Current catalog contents and where they came from."""
    models: List[CatalogModel]
    source: str
    last_synced: Optional[datetime] = None
    next_eligible: Optional[datetime] = None

    @property
    def providers(self) -> List[str]:
        """Providers present in the catalog, in first-seen order."""
        seen: List[str] = []
        for model in self.models:
            if model.provider.value not in seen:
                seen.append(model.provider.value)
        return seen

    @property
    def is_fallback(self) -> bool:
        return self.source == FALLBACK_SOURCE


def synchronize(
    repository: CatalogRepository,
    config: SyncConfig,
    force: bool = False,
    now: Optional[datetime] = None,
    fetcher: Fetcher = fetch_latest_pricing
) -> SyncOutcome:
    """Run a sync pass if one is due.

    Args:
        repository: Catalog store to read metadata from and write into
        config: Sync settings
        force: Ignore the minimum interval
        now: Current time (defaults to current UTC; naive values are
            treated as local time)
        fetcher: Produces a ReconciliationResult from the config

    Returns:
        SyncOutcome with status skipped, success or error
    """
    # Stored timestamps are UTC-aware; naive values are taken as local time
    now = now.astimezone(timezone.utc) if now else datetime.now(timezone.utc)

    try:
        metadata = None if force else repository.get_sync_metadata()
    except StoreUnavailable as e:
        logger.warning("Sync aborted, cannot read sync metadata: %s", e)
        return _error_outcome(e)

    decision = check_sync_due(metadata, now, config.min_interval, force)
    if not decision.due:
        logger.info("Sync skipped, next eligible at %s", decision.next_eligible.isoformat())
        return SyncOutcome(
            status=SyncStatus.SKIPPED,
            message="Prices were updated recently, skipping refresh",
            last_synced=decision.last_synced,
            next_eligible=decision.next_eligible,
        )

    logger.info("Starting price sync from %s (force=%s)", config.feed_url, force)
    try:
        result = fetcher(config, now)
        if not result.models:
            raise EmptyResolution("No models fetched from pricing source")
    except PricingSyncError as e:
        logger.warning("Price sync failed (%s): %s", e.kind.value, e)
        return _error_outcome(e)

    next_eligible = next_eligible_after(result.fetched_at, config.min_interval)
    try:
        written = repository.upsert_entities(result.models, result.fetched_at)
        repository.put_sync_metadata(SyncMetadata(
            last_synced=result.fetched_at,
            next_eligible=next_eligible,
            source=result.source,
            model_count=len(result.models),
            inserted_count=written.inserted,
            updated_count=written.updated,
        ))
    except StoreUnavailable as e:
        logger.warning("Price sync fetched %d models but could not store them: %s",
                       len(result.models), e)
        outcome = _error_outcome(e)
        outcome.models = list(result.models)
        outcome.source = result.source
        return outcome

    logger.info("Price sync stored %d models (%d inserted, %d updated)",
                len(result.models), written.inserted, written.updated)
    return SyncOutcome(
        status=SyncStatus.SUCCESS,
        message=f"Updated {len(result.models)} models",
        models_updated=len(result.models),
        inserted=written.inserted,
        updated=written.updated,
        last_synced=result.fetched_at,
        next_eligible=next_eligible,
        source=result.source,
        models=list(result.models),
    )


def _error_outcome(error: PricingSyncError) -> SyncOutcome:
    return SyncOutcome(
        status=SyncStatus.ERROR,
        message=str(error),
        error_kind=error.kind,
    )


def _fallback_snapshot() -> CatalogSnapshot:
    return CatalogSnapshot(models=list(FALLBACK_MODELS), source=FALLBACK_SOURCE)


def read_catalog(repository: CatalogRepository) -> CatalogSnapshot:
    """Return the stored catalog, or the static fallback catalog.

    Never raises for store problems: an empty or unreachable store yields
    the hardcoded fallback.
    """
    try:
        models = repository.list_entities()
        if not models:
            return _fallback_snapshot()
        metadata = repository.get_sync_metadata()
    except StoreUnavailable as e:
        logger.warning("Catalog store unavailable, serving fallback catalog: %s", e)
        return _fallback_snapshot()

    if metadata is None:
        return CatalogSnapshot(models=models, source="store")
    return CatalogSnapshot(
        models=models,
        source=metadata.source,
        last_synced=metadata.last_synced,
        next_eligible=metadata.next_eligible,
    )


def find_model(snapshot: CatalogSnapshot, model_id: str) -> CatalogModel:
    """Look up a model in a catalog snapshot.

    Raises:
        ValueError: If the model is not in the catalog
    """
    for model in snapshot.models:
        if model.id == model_id:
            return model
    raise ValueError(f"Unsupported model: {model_id}")


def compute_cost(
    repository: CatalogRepository,
    model_id: str,
    usage: UsageParameters
) -> CostBreakdown:
    """Project cost for a catalog model under a usage pattern.

    Raises:
        ValueError: If the model is not in the current catalog
    """
    return calculate_cost(find_model(read_catalog(repository), model_id), usage)
