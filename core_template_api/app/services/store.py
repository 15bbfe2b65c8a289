"""
SQLite backed entity store, one instance per resource kind.

The store works with plain dictionaries keyed by column name.  It owns
the system columns (``id``, ``created_at``, ``updated_at`` and
``version``): callers never set them directly.

Writes are committed before a method returns.  Updates are guarded by
the version the caller last saw (``WHERE id = ? AND version = ?``), so
two writers racing on the same row cannot both succeed; the loser gets
``Conflict``.  All queries use parameterized statements; column names
are only ever taken from the kind declaration.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..core.db import get_cursor
from ..core.errors import Conflict, InvalidArgument, NotFound
from .kinds import ResourceKind, utcnow
from .query import Predicate, Sort, format_timestamp

logger = logging.getLogger(__name__)

SYSTEM_COLUMNS = ("id", "created_at", "updated_at", "version")


class EntityStore:
    """Durable keyed storage for records of one resource kind."""

    def __init__(self, kind: ResourceKind, database_path: Optional[str] = None) -> None:
        self.kind = kind
        self.table = kind.table
        self.database_path = database_path
        self._types = {spec.name: spec.type for spec in kind.fields}
        self._types.update(created_at="timestamp", updated_at="timestamp", id="integer", version="integer")
        self.columns: Tuple[str, ...] = SYSTEM_COLUMNS + kind.field_names
        # JSON columns hold serialized blobs; ordering by them is meaningless
        self.sortable_columns = frozenset(
            name for name in self.columns if self._types[name] != "json"
        )

    # ------------------------------------------------------------------
    # Encoding helpers
    # ------------------------------------------------------------------
    def _encode(self, column: str, value: Any) -> Any:
        if value is None:
            return None
        column_type = self._types[column]
        if column_type == "boolean":
            return 1 if value else 0
        if column_type == "timestamp":
            return format_timestamp(value)
        if column_type == "json":
            return json.dumps(value)
        return value

    def _decode_row(self, row: sqlite3.Row) -> Dict[str, Any]:
        record = dict(row)
        for column, value in record.items():
            if value is None:
                continue
            column_type = self._types.get(column)
            if column_type == "boolean":
                record[column] = bool(value)
            elif column_type == "json":
                try:
                    record[column] = json.loads(value)
                except (TypeError, json.JSONDecodeError):
                    logger.warning("Unreadable JSON in %s.%s for id %s", self.table, column, record.get("id"))
                    record[column] = None
        return record

    def _check_column(self, column: str) -> str:
        if column not in self.columns:
            raise InvalidArgument(f"Unknown field {column!r} for {self.kind.label.lower()}")
        return column

    def _where(self, predicates: Sequence[Predicate]) -> Tuple[str, List[Any]]:
        clauses: List[str] = []
        params: List[Any] = []
        for predicate in predicates:
            for column in predicate.columns():
                self._check_column(column)
            clause, clause_params = predicate.to_sql()
            clauses.append(clause)
            params.extend(clause_params)
        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params

    def _order_by(self, sort: Sort) -> str:
        column = self._check_column(sort.field)
        collate = " COLLATE NOCASE" if self._types[column] == "text" else ""
        direction = "DESC" if sort.descending else "ASC"
        # id breaks ties so pagination is stable
        if column == "id":
            return f" ORDER BY id {direction}"
        return f" ORDER BY {column}{collate} {direction}, id ASC"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def put(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        """Insert a record without an id, or update the one with its id.

        On update the record's ``version`` (when present) must match the
        stored one.  Returns the stored record with system columns set.
        """
        if record.get("id") is None:
            return self._insert(record)
        return self._update(record)

    def _insert(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        now = format_timestamp(utcnow())
        names = list(self.kind.field_names)
        values = [self._encode(name, record.get(name)) for name in names]
        placeholders = ", ".join("?" for _ in range(len(names) + 3))
        sql = (
            f"INSERT INTO {self.table} ({', '.join(names)}, created_at, updated_at, version) "
            f"VALUES ({placeholders})"
        )
        with get_cursor(self.database_path) as cursor:
            cursor.execute(sql, (*values, now, now, 0))
            record_id = cursor.lastrowid
            row = cursor.execute(f"SELECT * FROM {self.table} WHERE id = ?", (record_id,)).fetchone()
        logger.debug("Inserted %s id=%s", self.table, record_id)
        return self._decode_row(row)

    def _update(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        record_id = record["id"]
        expected_version = record.get("version")
        names = list(self.kind.field_names)
        assignments = ", ".join(f"{name} = ?" for name in names)
        params: List[Any] = [self._encode(name, record.get(name)) for name in names]
        # max() keeps updated_at monotonic even if the clock steps back
        sql = (
            f"UPDATE {self.table} SET {assignments}, "
            f"updated_at = max(updated_at, ?), version = version + 1 WHERE id = ?"
        )
        params.extend([format_timestamp(utcnow()), record_id])
        if expected_version is not None:
            sql += " AND version = ?"
            params.append(expected_version)

        with get_cursor(self.database_path) as cursor:
            cursor.execute(sql, tuple(params))
            if cursor.rowcount == 0:
                current = cursor.execute(
                    f"SELECT version FROM {self.table} WHERE id = ?", (record_id,)
                ).fetchone()
                if current is None:
                    raise NotFound(f"{self.kind.label} with id {record_id} not found")
                raise Conflict(
                    f"{self.kind.label} with id {record_id} was modified concurrently "
                    f"(expected version {expected_version}, found {current['version']})"
                )
            row = cursor.execute(f"SELECT * FROM {self.table} WHERE id = ?", (record_id,)).fetchone()
        logger.debug("Updated %s id=%s to version %s", self.table, record_id, row["version"])
        return self._decode_row(row)

    def get(self, record_id: int) -> Optional[Dict[str, Any]]:
        with get_cursor(self.database_path) as cursor:
            row = cursor.execute(f"SELECT * FROM {self.table} WHERE id = ?", (record_id,)).fetchone()
        if row is None:
            return None
        return self._decode_row(row)

    def delete(self, record_id: int) -> bool:
        """Remove a record; return whether anything was removed."""
        with get_cursor(self.database_path) as cursor:
            cursor.execute(f"DELETE FROM {self.table} WHERE id = ?", (record_id,))
            affected = cursor.rowcount
        return affected > 0

    def exists(self, record_id: int) -> bool:
        with get_cursor(self.database_path) as cursor:
            row = cursor.execute(f"SELECT 1 FROM {self.table} WHERE id = ?", (record_id,)).fetchone()
        return row is not None

    def count_matching(self, predicates: Sequence[Predicate] = ()) -> int:
        where, params = self._where(predicates)
        with get_cursor(self.database_path) as cursor:
            row = cursor.execute(f"SELECT COUNT(*) AS total FROM {self.table}{where}", tuple(params)).fetchone()
        return int(row["total"])

    def scan(
        self,
        predicates: Sequence[Predicate],
        sort: Sort,
        offset: int,
        limit: int,
    ) -> List[Dict[str, Any]]:
        """Return matching records in ``sort`` order, ties by id ascending."""
        where, params = self._where(predicates)
        sql = f"SELECT * FROM {self.table}{where}{self._order_by(sort)} LIMIT ? OFFSET ?"
        params.extend([limit, offset])
        logger.debug("Scanning %s: %s %s", self.table, sql, params)
        with get_cursor(self.database_path) as cursor:
            rows = cursor.execute(sql, tuple(params)).fetchall()
        return [self._decode_row(row) for row in rows]

    def count_and_scan(
        self,
        predicates: Sequence[Predicate],
        sort: Sort,
        offset: int,
        limit: int,
    ) -> Tuple[int, List[Dict[str, Any]]]:
        """Count matches and read one slice inside a single read transaction.

        The slice is skipped when ``offset`` lies past the last match.
        """
        where, params = self._where(predicates)
        order_by = self._order_by(sort)
        with get_cursor(self.database_path) as cursor:
            # sqlite3 opens no implicit transaction for SELECT
            cursor.execute("BEGIN")
            row = cursor.execute(f"SELECT COUNT(*) AS total FROM {self.table}{where}", tuple(params)).fetchone()
            total = int(row["total"])
            rows = []
            if offset < total:
                rows = cursor.execute(
                    f"SELECT * FROM {self.table}{where}{order_by} LIMIT ? OFFSET ?",
                    (*params, limit, offset),
                ).fetchall()
        return total, [self._decode_row(row) for row in rows]
