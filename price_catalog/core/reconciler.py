"""
Feed reconciliation.

Turns the LiteLLM price listing into catalog entries for the fixed list of
tracked models. Fetching is separated from reconciliation so the matching
rules can run against any in-memory feed.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

import requests

from price_catalog.config.loader import SyncConfig

from .catalog import (
    KEY_PREFIXES,
    TARGET_MODELS,
    CatalogModel,
    Provider,
    build_model,
    to_display_name,
    to_price_per_million,
)
from .errors import FeedUnavailable

logger = logging.getLogger(__name__)

FEED_SOURCE = "litellm/model_prices_and_context_window.json"

# Upper bound on a plausible per-token price ($1M per million tokens)
MAX_COST_PER_TOKEN = 1.0


@dataclass(frozen=True)
class ReconciliationResult:
    """Catalog entries produced by one reconciliation pass."""
    models: List[CatalogModel]
    fetched_at: datetime
    source: str


def build_candidate_keys(model_id: str, prefixes: List[str]) -> List[str]:
    """Feed keys to check for a model, in priority order."""
    return [f"{prefix}{model_id}" for prefix in prefixes]


def _is_cost(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and 0 <= value < MAX_COST_PER_TOKEN


def _has_both_costs(entry: Any) -> bool:
    return (
        isinstance(entry, Mapping)
        and _is_cost(entry.get("input_cost_per_token"))
        and _is_cost(entry.get("output_cost_per_token"))
    )


def find_feed_entry(
    feed: Mapping[str, Any],
    candidate_keys: List[str]
) -> Optional[Tuple[str, Mapping[str, Any]]]:
    """Return the first candidate key whose entry carries both costs.

    Args:
        feed: Raw feed mapping keys to entries
        candidate_keys: Keys to check, in priority order

    Returns:
        (matched_key, entry), or None if no candidate is usable
    """
    for key in candidate_keys:
        entry = feed.get(key)
        if _has_both_costs(entry):
            return key, entry
    return None


def reconcile_feed(
    feed: Mapping[str, Any],
    targets: Dict[Provider, List[str]] = TARGET_MODELS,
    prefixes: Dict[Provider, List[str]] = KEY_PREFIXES
) -> List[CatalogModel]:
    """Resolve every tracked model against the feed.

    Providers and identifiers are visited in configuration order. An
    identifier with no usable entry is skipped, and an identifier is only
    resolved once even if listed under several providers.

    Args:
        feed: Raw feed mapping keys to entries
        targets: Tracked identifiers per provider
        prefixes: Feed key namespaces to check per provider

    Returns:
        Resolved catalog entries in configuration order
    """
    models: List[CatalogModel] = []
    seen: Set[str] = set()

    for provider, model_ids in targets.items():
        provider_prefixes = prefixes.get(provider, [""])
        for model_id in model_ids:
            if model_id in seen:
                continue

            match = find_feed_entry(feed, build_candidate_keys(model_id, provider_prefixes))
            if match is None:
                logger.debug("No usable feed entry for %s/%s", provider.value, model_id)
                continue

            matched_key, entry = match
            seen.add(model_id)
            models.append(build_model(
                model_id=model_id,
                name=to_display_name(matched_key),
                provider=provider,
                input_price=to_price_per_million(entry["input_cost_per_token"]),
                output_price=to_price_per_million(entry["output_cost_per_token"]),
            ))

    return models


def fetch_feed(url: str, timeout: float, user_agent: str) -> Dict[str, Any]:
    """Download the raw price feed.

    Raises:
        FeedUnavailable: On transport failure, non-success status or a body
            that is not a JSON object
    """
    headers = {"Accept": "application/json", "User-Agent": user_agent}
    try:
        resp = requests.get(url, headers=headers, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        raise FeedUnavailable(f"Failed to fetch pricing data: {e}") from e
    except ValueError as e:
        raise FeedUnavailable(f"Pricing feed is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise FeedUnavailable("Pricing feed is not a JSON object")
    return data


def fetch_latest_pricing(config: SyncConfig, now: Optional[datetime] = None) -> ReconciliationResult:
    """Fetch the feed and reconcile it into catalog entries.

    Args:
        config: SyncConfig supplying the feed URL, timeout and user agent
        now: Timestamp to record as the fetch time (defaults to current UTC)

    Returns:
        ReconciliationResult, possibly with an empty model list

    Raises:
        FeedUnavailable: If the feed cannot be retrieved
    """
    feed = fetch_feed(config.feed_url, config.timeout_seconds, config.user_agent)
    fetched_at = now or datetime.now(timezone.utc)
    models = reconcile_feed(feed)
    logger.info("Resolved %d of %d feed entries into catalog models", len(models), len(feed))
    return ReconciliationResult(models=models, fetched_at=fetched_at, source=FEED_SOURCE)
