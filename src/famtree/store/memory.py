"""In-process document store for tests and local development."""
from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from .base import Document, DocumentStore, check_field_name, deep_merge


def _copy(document: Mapping[str, Any]) -> Document:
    # JSON round trip so callers never share state with the store
    return json.loads(json.dumps(document))


def _sort_key(value: Any) -> tuple[int, Any]:
    # Missing values sort first, then by natural order
    if value is None:
        return (0, "")
    return (1, value)


class InMemoryDocumentStore(DocumentStore):
    """Dictionary-backed store with the same semantics as the SQLite backend."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Document]] = {}

    def get(self, collection: str, doc_id: str) -> Document | None:
        document = self._collections.get(collection, {}).get(doc_id)
        return _copy(document) if document is not None else None

    def set(
        self,
        collection: str,
        doc_id: str,
        document: Mapping[str, Any],
        merge: bool = False,
    ) -> None:
        bucket = self._collections.setdefault(collection, {})
        incoming = _copy(document)
        if merge and doc_id in bucket:
            bucket[doc_id] = deep_merge(bucket[doc_id], incoming)
        else:
            bucket[doc_id] = incoming

    def delete(self, collection: str, doc_id: str) -> None:
        self._collections.get(collection, {}).pop(doc_id, None)

    def query(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        filters = filters or {}
        for name in filters:
            check_field_name(name)

        results = [
            {"id": doc_id, **_copy(doc)}
            for doc_id, doc in self._collections.get(collection, {}).items()
            if all(doc.get(k) == v for k, v in filters.items())
        ]

        if order_by:
            descending = order_by.startswith("-")
            field_name = check_field_name(order_by.lstrip("-"))
            results.sort(key=lambda d: _sort_key(d.get(field_name)), reverse=descending)

        if limit is not None:
            results = results[:limit]
        return results

    def count(self, collection: str) -> int:
        return len(self._collections.get(collection, {}))
