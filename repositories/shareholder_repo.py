"""
repositories/shareholder_repo.py
--------------------------------
Data access layer for the shareholder registry.
All SQL queries related to the `shareholders` table live here.
"""

from typing import Optional

from psycopg2 import errorcodes

from db.connection import Database, QueryError
from models.shareholder import COLUMNS, Shareholder
from utils.logger import get_logger

logger = get_logger(__name__)

_SELECT_COLUMNS = ", ".join(COLUMNS)

# Update overwrites every column but version, which the statement bumps itself
_UPDATABLE = [c for c in COLUMNS if c != "version"]


class DuplicateKeyError(Exception):
    """Raised when an insert or key change collides with an existing FN ID."""

    def __init__(self, fn_id: str):
        super().__init__(f"FN ID {fn_id!r} already exists")
        self.fn_id = fn_id


class ShareholderRepository:
    """Repository for CRUD operations on the shareholders table."""

    def __init__(self, database: Database):
        self.db = database

    # ── CREATE ────────────────────────────────────────────

    def add(self, shareholder: Shareholder) -> Shareholder:
        """
        Insert a new shareholder with version 1.

        Raises:
            DuplicateKeyError: If the FN ID is already taken.
            QueryError: On any other database failure.
        """
        shareholder.version = 1
        placeholders = ", ".join(["%s"] * len(COLUMNS))
        sql = f"""
            INSERT INTO shareholders ({_SELECT_COLUMNS})
            VALUES ({placeholders})
            RETURNING {_SELECT_COLUMNS};
        """
        params = [getattr(shareholder, c) for c in COLUMNS]
        try:
            rows = self.db.query(sql, params)
        except QueryError as e:
            if e.pgcode == errorcodes.UNIQUE_VIOLATION:
                raise DuplicateKeyError(shareholder.fn_id) from e
            raise
        logger.info(f"Added shareholder {shareholder.fn_id}")
        return Shareholder.from_row(rows[0])

    # ── READ ──────────────────────────────────────────────

    def list_all(self) -> list[Shareholder]:
        """Fetch every shareholder ordered by English name."""
        sql = f"SELECT {_SELECT_COLUMNS} FROM shareholders ORDER BY name_english ASC, fn_id ASC;"
        return [Shareholder.from_row(r) for r in self.db.query(sql)]

    def exists(self, fn_id: str) -> bool:
        rows = self.db.query("SELECT fn_id FROM shareholders WHERE fn_id = %s;", [fn_id])
        return len(rows) > 0

    # ── UPDATE ────────────────────────────────────────────

    def update(
        self, shareholder: Shareholder, target_fn_id: str, expected_version: int
    ) -> Optional[Shareholder]:
        """
        Overwrite the row keyed by `target_fn_id` if its version still
        equals `expected_version`, bumping the version by one.

        Args:
            shareholder: New field values (its fn_id may differ from the target).
            target_fn_id: Key of the row to update.
            expected_version: Version the caller last saw.

        Returns:
            The updated Shareholder, or None when no row matched either the
            key or the version.

        Raises:
            DuplicateKeyError: If the new FN ID belongs to another row.
        """
        assignments = ", ".join(f"{c} = %s" for c in _UPDATABLE)
        sql = f"""
            UPDATE shareholders
            SET {assignments}, version = version + 1
            WHERE fn_id = %s AND version = %s
            RETURNING {_SELECT_COLUMNS};
        """
        params = [getattr(shareholder, c) for c in _UPDATABLE]
        params += [target_fn_id, expected_version]
        try:
            rows = self.db.query(sql, params)
        except QueryError as e:
            if e.pgcode == errorcodes.UNIQUE_VIOLATION:
                raise DuplicateKeyError(shareholder.fn_id) from e
            raise
        if not rows:
            return None
        logger.info(f"Updated shareholder {target_fn_id} -> {shareholder.fn_id}")
        return Shareholder.from_row(rows[0])

    # ── DELETE ────────────────────────────────────────────

    def delete(self, fn_id: str) -> bool:
        """
        Delete a shareholder by FN ID.

        Returns:
            True if a row was deleted, False otherwise.
        """
        rows = self.db.query("DELETE FROM shareholders WHERE fn_id = %s RETURNING fn_id;", [fn_id])
        deleted = len(rows) > 0
        if deleted:
            logger.info(f"Deleted shareholder {fn_id}")
        return deleted
