"""Document store contract.

The core talks to its backing store only through this interface: whole
documents keyed by ``(collection, id)``, atomic per document and never
across documents. Backends must not retry on their own behalf beyond
whatever their client library does.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any

Document = dict[str, Any]

TREES = "familyTrees"
SHARES = "familyTreeShares"
ACCESS_REQUESTS = "familyTreeAccessRequests"
FAMILY_CODES = "familyCodes"
USERS = "users"

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def check_field_name(name: str) -> str:
    """Reject filter/order fields that are not plain identifiers."""
    if not _FIELD_NAME.match(name):
        raise ValueError(f"Unsupported field name: {name!r}")
    return name


def deep_merge(base: Mapping[str, Any], updates: Mapping[str, Any]) -> Document:
    """Merge ``updates`` into ``base``; nested mappings merge, everything else replaces."""
    merged: Document = dict(base)
    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class DocumentStore(ABC):
    """CRUD over JSON documents grouped in collections."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Document | None:
        """Return a copy of the document, or None if absent."""

    @abstractmethod
    def set(
        self,
        collection: str,
        doc_id: str,
        document: Mapping[str, Any],
        merge: bool = False,
    ) -> None:
        """Write a document. With ``merge`` the fields are merged into any existing one."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        """Remove a document. Deleting an absent document is not an error."""

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        """Documents whose fields equal every value in ``filters``.

        ``order_by`` names a field; prefix it with ``-`` for descending order.
        Each result carries its document id under ``id`` unless the document
        already has an ``id`` field.
        """

    def delete_many(self, collection: str, doc_ids: Iterable[str]) -> int:
        """Bulk delete. Returns the number of ids processed."""
        count = 0
        for doc_id in doc_ids:
            self.delete(collection, doc_id)
            count += 1
        return count

    def close(self) -> None:  # pragma: no cover - default no-op
        """Release backend resources."""
