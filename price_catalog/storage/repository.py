"""
Repository pattern for catalog data access.

Handles persistence of catalog models and the sync metadata singleton.
Any SQLite failure surfaces as StoreUnavailable.
"""

import logging
import sqlite3
from datetime import datetime
from typing import List, Optional

from price_catalog.core.catalog import CatalogModel, Provider, Tier
from price_catalog.core.errors import StoreUnavailable

from .db import DEFAULT_DB_PATH, get_connection
from .models import SyncMetadata, UpsertResult

logger = logging.getLogger(__name__)

SYNC_METADATA_KEY = "pricing_meta"

_MODEL_COLUMNS = "id, name, provider, input_price, output_price, tier"


def _row_to_model(row) -> CatalogModel:
    return CatalogModel(
        id=row[0],
        name=row[1],
        provider=Provider(row[2]),
        input_price=row[3],
        output_price=row[4],
        tier=Tier(row[5]),
    )


class CatalogRepository:
    """Durable keyed storage for catalog models and sync metadata.

    Models are keyed by identifier, so writing the same model twice
    leaves a single row holding the latest values.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """Initialize the repository with a database path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        try:
            return get_connection(self.db_path)
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Cannot open catalog store {self.db_path}: {e}") from e

    def initialize_schema(self) -> None:
        """Create the catalog tables if they don't exist."""
        conn = self._connect()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS catalog_model (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    provider TEXT NOT NULL,
                    input_price REAL NOT NULL,
                    output_price REAL NOT NULL,
                    tier TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS sync_metadata (
                    key TEXT PRIMARY KEY,
                    last_synced TEXT NOT NULL,
                    next_eligible TEXT NOT NULL,
                    source TEXT NOT NULL,
                    model_count INTEGER NOT NULL,
                    inserted_count INTEGER NOT NULL DEFAULT 0,
                    updated_count INTEGER NOT NULL DEFAULT 0
                )
            """)
            conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Failed to initialize catalog schema: {e}") from e
        finally:
            conn.close()

    def find_entity(self, model_id: str) -> Optional[CatalogModel]:
        """Get a single catalog model by identifier, or None if absent."""
        conn = self._connect()
        try:
            cursor = conn.execute(
                f"SELECT {_MODEL_COLUMNS} FROM catalog_model WHERE id = ?",
                (model_id,)
            )
            row = cursor.fetchone()
            return _row_to_model(row) if row else None
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Failed to read model {model_id}: {e}") from e
        finally:
            conn.close()

    def list_entities(self) -> List[CatalogModel]:
        """Get all catalog models in first-insertion order."""
        conn = self._connect()
        try:
            cursor = conn.execute(
                f"SELECT {_MODEL_COLUMNS} FROM catalog_model ORDER BY rowid"
            )
            return [_row_to_model(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Failed to read catalog: {e}") from e
        finally:
            conn.close()

    def upsert_entities(self, models: List[CatalogModel], updated_at: datetime) -> UpsertResult:
        """Insert or replace catalog models keyed by identifier.

        All models are written in a single transaction. Name, prices and
        tier are always replaced together.

        Args:
            models: Models to write
            updated_at: Timestamp recorded on every written row

        Returns:
            Counts of newly inserted and overwritten rows
        """
        if not models:
            return UpsertResult(inserted=0, updated=0)

        inserted = 0
        updated = 0
        conn = self._connect()
        try:
            conn.execute("BEGIN TRANSACTION")
            for model in models:
                exists = conn.execute(
                    "SELECT 1 FROM catalog_model WHERE id = ?", (model.id,)
                ).fetchone()
                conn.execute("""
                    INSERT INTO catalog_model
                    (id, name, provider, input_price, output_price, tier, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        name = excluded.name,
                        provider = excluded.provider,
                        input_price = excluded.input_price,
                        output_price = excluded.output_price,
                        tier = excluded.tier,
                        updated_at = excluded.updated_at
                """, (
                    model.id,
                    model.name,
                    model.provider.value,
                    model.input_price,
                    model.output_price,
                    model.tier.value,
                    updated_at.isoformat()
                ))
                if exists:
                    updated += 1
                else:
                    inserted += 1
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreUnavailable(f"Failed to write catalog: {e}") from e
        finally:
            conn.close()

        logger.debug("Upserted catalog: %d inserted, %d updated", inserted, updated)
        return UpsertResult(inserted=inserted, updated=updated)

    def get_sync_metadata(self) -> Optional[SyncMetadata]:
        """Get the sync metadata singleton, or None before the first sync."""
        conn = self._connect()
        try:
            cursor = conn.execute("""
                SELECT last_synced, next_eligible, source, model_count,
                       inserted_count, updated_count
                FROM sync_metadata WHERE key = ?
            """, (SYNC_METADATA_KEY,))
            row = cursor.fetchone()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Failed to read sync metadata: {e}") from e
        finally:
            conn.close()

        if row is None:
            return None
        return SyncMetadata(
            last_synced=datetime.fromisoformat(row[0]),
            next_eligible=datetime.fromisoformat(row[1]),
            source=row[2],
            model_count=row[3],
            inserted_count=row[4],
            updated_count=row[5]
        )

    def put_sync_metadata(self, meta: SyncMetadata) -> None:
        """Overwrite the sync metadata singleton."""
        conn = self._connect()
        try:
            conn.execute("""
                INSERT OR REPLACE INTO sync_metadata
                (key, last_synced, next_eligible, source, model_count,
                 inserted_count, updated_count)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (
                SYNC_METADATA_KEY,
                meta.last_synced.isoformat(),
                meta.next_eligible.isoformat(),
                meta.source,
                meta.model_count,
                meta.inserted_count,
                meta.updated_count
            ))
            conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Failed to write sync metadata: {e}") from e
        finally:
            conn.close()
