"""Document store adapters."""

from .base import (
    ACCESS_REQUESTS,
    FAMILY_CODES,
    SHARES,
    TREES,
    USERS,
    Document,
    DocumentStore,
)
from .memory import InMemoryDocumentStore
from .sqlite import SQLiteDocumentStore

__all__ = [
    "DocumentStore",
    "Document",
    "InMemoryDocumentStore",
    "SQLiteDocumentStore",
    "TREES",
    "SHARES",
    "ACCESS_REQUESTS",
    "FAMILY_CODES",
    "USERS",
]
