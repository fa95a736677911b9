"""SQLite-backed document store.

Each document is one JSON row keyed by ``(collection, id)``. Merge writes
read and rewrite the row inside a single immediate transaction, so every
write is atomic per document.
"""
from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterable, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..logging import get_logger
from .base import Document, DocumentStore, check_field_name, deep_merge

logger = get_logger(__name__)


class SQLiteDocumentStore(DocumentStore):
    """JSON documents in a single SQLite table."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @contextmanager
    def _get_conn(self):
        conn = sqlite3.connect(self.db_path, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA busy_timeout=5000;")
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def _transaction(self):
        with self._get_conn() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                conn.execute("COMMIT")
            except Exception:
                conn.execute("ROLLBACK")
                raise

    def _init_schema(self) -> None:
        with self._get_conn() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    collection TEXT NOT NULL,
                    doc_id TEXT NOT NULL,
                    body TEXT NOT NULL,
                    written_at TEXT NOT NULL,
                    PRIMARY KEY (collection, doc_id)
                );
                CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents(collection);
                """
            )

    def get(self, collection: str, doc_id: str) -> Document | None:
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT body FROM documents WHERE collection = ? AND doc_id = ?",
                (collection, doc_id),
            ).fetchone()
        return json.loads(row["body"]) if row else None

    def set(
        self,
        collection: str,
        doc_id: str,
        document: Mapping[str, Any],
        merge: bool = False,
    ) -> None:
        with self._transaction() as conn:
            body = dict(document)
            if merge:
                row = conn.execute(
                    "SELECT body FROM documents WHERE collection = ? AND doc_id = ?",
                    (collection, doc_id),
                ).fetchone()
                if row:
                    body = deep_merge(json.loads(row["body"]), document)
            conn.execute(
                """
                INSERT INTO documents (collection, doc_id, body, written_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(collection, doc_id)
                DO UPDATE SET body = excluded.body, written_at = excluded.written_at
                """,
                (collection, doc_id, json.dumps(body), datetime.now(UTC).isoformat()),
            )
        logger.debug("document_written", collection=collection, doc_id=doc_id, merge=merge)

    def delete(self, collection: str, doc_id: str) -> None:
        with self._transaction() as conn:
            conn.execute(
                "DELETE FROM documents WHERE collection = ? AND doc_id = ?",
                (collection, doc_id),
            )

    def delete_many(self, collection: str, doc_ids: Iterable[str]) -> int:
        ids = list(doc_ids)
        if not ids:
            return 0
        with self._transaction() as conn:
            conn.executemany(
                "DELETE FROM documents WHERE collection = ? AND doc_id = ?",
                [(collection, doc_id) for doc_id in ids],
            )
        return len(ids)

    def query(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        sql = "SELECT doc_id, body FROM documents WHERE collection = ?"
        params: list[Any] = [collection]

        for name, value in (filters or {}).items():
            path = f'$."{check_field_name(name)}"'
            if value is None:
                sql += " AND json_extract(body, ?) IS NULL"
                params.append(path)
            else:
                sql += " AND json_extract(body, ?) = ?"
                params.extend([path, value])

        if order_by:
            direction = "DESC" if order_by.startswith("-") else "ASC"
            sql += f" ORDER BY json_extract(body, ?) {direction}"
            params.append(f'$."{check_field_name(order_by.lstrip("-"))}"')

        if limit is not None:
            sql += " LIMIT ?"
            params.append(int(limit))

        with self._get_conn() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [{"id": row["doc_id"], **json.loads(row["body"])} for row in rows]
