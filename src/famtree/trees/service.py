"""Tree aggregate lifecycle: load, save, delete, cleanup.

A tree is one document per owner in the ``familyTrees`` collection and is
always rewritten whole. There is no field-level update path, no lock and,
unless the caller passes ``expected_version``, no conditional write: two
concurrent saves for the same owner race and the later one wins in full.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from ..config import SETTINGS, Settings
from ..errors import MalformedInput, VersionConflict
from ..logging import get_logger
from ..models.common import utc_now
from ..models.sharing import ShareGrant
from ..models.tree import FamilyTree
from ..store.base import ACCESS_REQUESTS, FAMILY_CODES, SHARES, TREES, DocumentStore
from ..validation.graph import CleanupResult, cleanup_orphaned_edges
from ..validation.integrity import TreeIntegrityReport, check_tree

logger = get_logger(__name__)


@dataclass
class TreeDeletion:
    """What ``delete_tree`` removed besides the tree document."""

    owner_id: str
    grants_removed: int = 0
    requests_removed: int = 0
    codes_removed: int = 0


def _check_shape(tree: Mapping[str, Any]) -> None:
    if not isinstance(tree.get("members"), list):
        raise MalformedInput("Invalid tree structure: members must be an array")
    if not isinstance(tree.get("edges"), list):
        raise MalformedInput("Invalid tree structure: edges must be an array")


class TreeService:
    """Owns persistence of the ``FamilyTree`` aggregate.

    Stateless: every call reads the store again, nothing is cached.
    """

    def __init__(self, store: DocumentStore, settings: Settings | None = None) -> None:
        self.store = store
        self.settings = settings or SETTINGS

    def load_tree(self, owner_id: str) -> FamilyTree:
        """Return the stored tree, or an empty one if the owner has none yet.

        A missing document is a normal state, not an error. The tree is not
        repaired on load; run ``cleanup_tree`` for that.
        """
        document = self.store.get(TREES, owner_id)
        if document is None:
            logger.debug("tree_missing_using_empty", owner_id=owner_id)
            return FamilyTree.empty(owner_id)

        # Subfamily writes may have created a partial document
        document.setdefault("id", owner_id)
        document.setdefault("ownerId", owner_id)
        return FamilyTree.from_document(document)

    def save_tree(
        self,
        owner_id: str,
        tree: FamilyTree | Mapping[str, Any],
        expected_version: int | None = None,
    ) -> FamilyTree:
        """Persist the whole aggregate and bump its version.

        Args:
            owner_id: Owner whose tree this is; overrides any id in ``tree``
            tree: The aggregate, as a model or a raw document
            expected_version: If given, the save only proceeds when the stored
                ``version.current`` still equals it

        Returns:
            The tree as written

        Raises:
            MalformedInput: members or edges are not lists, or the document
                does not validate. Nothing is written.
            VersionConflict: ``expected_version`` no longer matches the store
        """
        if isinstance(tree, FamilyTree):
            if not isinstance(tree.members, list) or not isinstance(tree.edges, list):
                raise MalformedInput("Invalid tree structure: members and edges must be arrays")
            candidate = tree
        elif isinstance(tree, Mapping):
            _check_shape(tree)
            try:
                candidate = FamilyTree.model_validate(
                    {**tree, "id": owner_id, "ownerId": owner_id}
                )
            except ValidationError as e:
                raise MalformedInput(f"Invalid tree structure: {e}") from e
        else:
            raise MalformedInput(f"Tree must be an object, got {type(tree).__name__}")

        if expected_version is not None:
            stored = self.store.get(TREES, owner_id)
            actual = (stored or {}).get("version", {}).get("current", 1)
            if actual != expected_version:
                raise VersionConflict(owner_id, expected_version, actual)

        summary = f"Updated tree with {len(candidate.members)} members"
        updated = candidate.model_copy(
            deep=True,
            update={
                "id": owner_id,
                "owner_id": owner_id,
                "updated_at": utc_now(),
                "version": candidate.version.bump(summary, self.settings.max_history),
            }
        )

        self.store.set(TREES, owner_id, updated.to_document())
        logger.info(
            "tree_saved",
            owner_id=owner_id,
            version=updated.version.current,
            members=len(updated.members),
            edges=len(updated.edges),
        )
        return updated

    def delete_tree(self, owner_id: str, cascade: bool | None = None) -> TreeDeletion:
        """Remove the tree document.

        With cascade (``Settings.cascade_delete`` by default) the owner's share
        grants, access requests and family codes go with it.
        """
        self.store.delete(TREES, owner_id)
        result = TreeDeletion(owner_id=owner_id)

        if cascade if cascade is not None else self.settings.cascade_delete:
            grants = self.store.query(SHARES, {"ownerId": owner_id})
            result.grants_removed = self.store.delete_many(
                SHARES,
                (ShareGrant.document_id(owner_id, g["targetUserId"]) for g in grants),
            )
            requests = self.store.query(ACCESS_REQUESTS, {"ownerId": owner_id})
            result.requests_removed = self.store.delete_many(
                ACCESS_REQUESTS, (r["id"] for r in requests)
            )
            codes = self.store.query(FAMILY_CODES, {"generatedBy": owner_id})
            result.codes_removed = self.store.delete_many(
                FAMILY_CODES, (c["code"] for c in codes)
            )

        logger.info(
            "tree_deleted",
            owner_id=owner_id,
            grants_removed=result.grants_removed,
            requests_removed=result.requests_removed,
            codes_removed=result.codes_removed,
        )
        return result

    def cleanup_tree(self, owner_id: str) -> CleanupResult:
        """Drop orphaned edges from the stored tree and save it if anything changed."""
        tree = self.load_tree(owner_id)
        result = cleanup_orphaned_edges(tree.members, tree.edges)
        if result.removed_count:
            tree.edges = result.cleaned_edges
            self.save_tree(owner_id, tree)
        return result

    def integrity(self, owner_id: str) -> TreeIntegrityReport:
        return check_tree(self.load_tree(owner_id))
