"""Undo/redo history for in-memory tree edits.

An ``EditSession`` wraps a loaded tree and snapshots it before each
successful mutation. Snapshots are deep copies, so ``session.tree`` may be
a different object after ``undo`` or ``redo``; always read it from the
session. Saving stays with ``TreeService.save_tree``.
"""
from __future__ import annotations

from collections import deque
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from ..logging import get_logger
from ..models.edge import FamilyEdge
from ..models.member import FamilyMember
from ..models.tree import FamilyTree
from . import mutations

logger = get_logger(__name__)

HISTORY_LIMIT = 50

T = TypeVar("T")


class EditSession:
    """Applies mutations to one tree and keeps bounded undo/redo stacks."""

    def __init__(self, tree: FamilyTree, limit: int = HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self._tree = tree
        self._past: deque[FamilyTree] = deque(maxlen=limit)
        self._future: deque[FamilyTree] = deque(maxlen=limit)

    @property
    def tree(self) -> FamilyTree:
        return self._tree

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def undo_depth(self) -> int:
        return len(self._past)

    @property
    def redo_depth(self) -> int:
        return len(self._future)

    def apply(self, mutation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run ``mutation(tree, *args, **kwargs)`` and record it for undo.

        A mutation that raises leaves both stacks untouched. A successful
        one clears the redo stack.
        """
        snapshot = self._tree.model_copy(deep=True)
        result = mutation(self._tree, *args, **kwargs)
        self._past.append(snapshot)
        self._future.clear()
        return result

    def undo(self) -> bool:
        """Step back one edit. Returns False if there is nothing to undo."""
        if not self._past:
            return False
        self._future.appendleft(self._tree)
        self._tree = self._past.pop()
        logger.debug("edit_undone", tree_id=self._tree.id, undo_depth=len(self._past))
        return True

    def redo(self) -> bool:
        """Reapply the last undone edit. Returns False if there is none."""
        if not self._future:
            return False
        self._past.append(self._tree)
        self._tree = self._future.popleft()
        logger.debug("edit_redone", tree_id=self._tree.id, redo_depth=len(self._future))
        return True

    def add_member(self, member: FamilyMember) -> FamilyMember:
        return self.apply(mutations.add_member, member)

    def update_member(self, member_id: str, updates: Mapping[str, Any]) -> FamilyMember:
        return self.apply(mutations.update_member, member_id, updates)

    def remove_member(self, member_id: str) -> list[FamilyEdge]:
        return self.apply(mutations.remove_member, member_id)

    def add_edge(self, edge: FamilyEdge) -> FamilyEdge:
        return self.apply(mutations.add_edge, edge)

    def update_edge(self, edge_id: str, updates: Mapping[str, Any]) -> FamilyEdge:
        return self.apply(mutations.update_edge, edge_id, updates)

    def remove_edge(self, edge_id: str) -> FamilyEdge:
        return self.apply(mutations.remove_edge, edge_id)

    def set_head_of_family(self, member_id: str, exclusive: bool = True) -> FamilyMember:
        return self.apply(mutations.set_head_of_family, member_id, exclusive)
