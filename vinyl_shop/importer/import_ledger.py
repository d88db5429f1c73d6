"""Import ledger.

Local SQLite record of which Discogs releases have been imported. The
release id is the primary key, so two imports of the same release cannot
both claim it: the second claim fails even when both passed the store
lookup at the same time.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional, Union

from ..common.errors import ConflictError

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_CREATED = "created"

# Seconds after which an unfinished claim may be taken over
STALE_CLAIM_SECONDS = 900


class ImportLedger:
    """Claims and completions of release imports."""

    def __init__(self, db_path: Union[str, Path], stale_after: int = STALE_CLAIM_SECONDS) -> None:
        self.db_path = Path(db_path)
        self.stale_after = stale_after
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path, timeout=10)

    def _init_db(self) -> None:
        """Initialize SQLite database with schema."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS release_imports (
                    release_id INTEGER PRIMARY KEY,
                    product_id INTEGER,
                    status TEXT NOT NULL,
                    claimed_at TIMESTAMP NOT NULL,
                    completed_at TIMESTAMP
                )
            """)

    def claim(self, release_id: int) -> None:
        """
        Reserve release_id for an import in progress.

        A pending claim older than stale_after seconds belongs to an import
        that never finished and is taken over.

        Raises:
            ConflictError: the release is already claimed or imported
        """
        now = datetime.now()
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO release_imports (release_id, status, claimed_at) VALUES (?, ?, ?)",
                    (int(release_id), STATUS_PENDING, now.isoformat()),
                )
            return
        except sqlite3.IntegrityError:
            pass

        cutoff = (now - timedelta(seconds=self.stale_after)).isoformat()
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE release_imports SET claimed_at = ? WHERE release_id = ? AND status = ? AND claimed_at < ?",
                (now.isoformat(), int(release_id), STATUS_PENDING, cutoff),
            )
            taken_over = cursor.rowcount > 0

        if taken_over:
            logger.warning("Took over stale import claim for release %s", release_id)
            return

        logger.warning("Release %s is already claimed in the import ledger", release_id)
        raise ConflictError("Product already exists for this release.")

    def complete(self, release_id: int, product_id: int) -> None:
        """Record the product created for a claimed release."""
        with self._connect() as conn:
            conn.execute(
                "UPDATE release_imports SET product_id = ?, status = ?, completed_at = ? WHERE release_id = ?",
                (int(product_id), STATUS_CREATED, datetime.now().isoformat(), int(release_id)),
            )

    def release(self, release_id: int) -> None:
        """Drop a pending claim so the release can be imported again."""
        with self._connect() as conn:
            conn.execute(
                "DELETE FROM release_imports WHERE release_id = ? AND status = ?",
                (int(release_id), STATUS_PENDING),
            )

    def forget(self, release_id: int) -> bool:
        """Remove any record of release_id (e.g. after the product was deleted in Shopify)."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM release_imports WHERE release_id = ?", (int(release_id),))
            return cursor.rowcount > 0

    def get_product_id(self, release_id: int) -> Optional[int]:
        """Product id recorded for release_id, if the import completed."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT product_id FROM release_imports WHERE release_id = ? AND status = ?",
                (int(release_id), STATUS_CREATED),
            ).fetchone()
        return int(row[0]) if row and row[0] is not None else None

    def status(self, release_id: int) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT status FROM release_imports WHERE release_id = ?", (int(release_id),)
            ).fetchone()
        return row[0] if row else None
