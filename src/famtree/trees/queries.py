"""Direct-relationship lookups over a loaded tree.

Only ``parent`` and ``spouse`` edges are interpreted; siblings are derived
through shared parents.
"""
from __future__ import annotations

from ..models.edge import EdgeType
from ..models.member import FamilyMember
from ..models.tree import FamilyTree


def _select(tree: FamilyTree, ids: set[str]) -> list[FamilyMember]:
    return [m for m in tree.members if m.id in ids]


def children_of(tree: FamilyTree, parent_id: str) -> list[FamilyMember]:
    ids = {e.to_id for e in tree.edges if e.type == EdgeType.PARENT and e.from_id == parent_id}
    return _select(tree, ids)


def parents_of(tree: FamilyTree, child_id: str) -> list[FamilyMember]:
    ids = {e.from_id for e in tree.edges if e.type == EdgeType.PARENT and e.to_id == child_id}
    return _select(tree, ids)


def spouses_of(tree: FamilyTree, member_id: str) -> list[FamilyMember]:
    ids = set()
    for edge in tree.edges:
        if edge.type != EdgeType.SPOUSE or not edge.touches(member_id):
            continue
        ids.add(edge.to_id if edge.from_id == member_id else edge.from_id)
    ids.discard(member_id)
    return _select(tree, ids)


def siblings_of(tree: FamilyTree, member_id: str) -> list[FamilyMember]:
    ids: set[str] = set()
    for parent in parents_of(tree, member_id):
        ids.update(child.id for child in children_of(tree, parent.id))
    ids.discard(member_id)
    return _select(tree, ids)


def members_in_generation(tree: FamilyTree, generation: int) -> list[FamilyMember]:
    return [m for m in tree.members if m.generation == generation]
