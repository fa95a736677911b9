"""Role-checked tree access for callers other than the owner."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..auth import AuthContext
from ..errors import Forbidden
from ..models.sharing import AccessRole
from ..models.tree import FamilyTree
from ..trees.service import TreeDeletion, TreeService
from .service import SharingService


class SharedTreeAccess:
    """Wraps ``TreeService`` with the caller's share role.

    Editors write with the same last-writer-wins semantics as owners; pass
    ``expected_version`` to turn a lost update into ``VersionConflict``.
    """

    def __init__(self, trees: TreeService, sharing: SharingService) -> None:
        self.trees = trees
        self.sharing = sharing

    def load_tree(self, ctx: AuthContext, owner_id: str) -> FamilyTree:
        self.sharing.require_role(owner_id, ctx.user_id, AccessRole.VIEWER)
        return self.trees.load_tree(owner_id)

    def save_tree(
        self,
        ctx: AuthContext,
        owner_id: str,
        tree: FamilyTree | Mapping[str, Any],
        expected_version: int | None = None,
    ) -> FamilyTree:
        self.sharing.require_role(owner_id, ctx.user_id, AccessRole.EDITOR)
        return self.trees.save_tree(owner_id, tree, expected_version=expected_version)

    def delete_tree(self, ctx: AuthContext, owner_id: str) -> TreeDeletion:
        if ctx.user_id != owner_id:
            raise Forbidden(
                "Only the owner can delete a tree",
                required_role=AccessRole.OWNER.value,
            )
        return self.trees.delete_tree(owner_id)
