"""Relationship inference over parent and spouse edges.

Every other kinship (grandparents, siblings, cousins, step and in-law
relations) is derived from the ``parent`` and ``spouse`` edges of a tree.
Relationships are computed once per member when the engine is built.
Inference runs from the closest kind outwards and the first kind found for
a pair is kept, so a spouse who is also a cousin is reported as a spouse.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..logging import get_logger
from ..models.edge import EdgeType, FamilyEdge
from ..models.member import FamilyMember
from ..models.tree import FamilyTree

logger = get_logger(__name__)


class RelationshipKind(str, Enum):
    SELF = "self"
    SPOUSE = "spouse"
    PARENT = "parent"
    CHILD = "child"
    GRANDPARENT = "grandparent"
    GRANDCHILD = "grandchild"
    GREAT_GRANDPARENT = "great-grandparent"
    GREAT_GRANDCHILD = "great-grandchild"
    SIBLING = "sibling"
    HALF_SIBLING = "half-sibling"
    AUNT = "aunt"
    UNCLE = "uncle"
    NIECE = "niece"
    NEPHEW = "nephew"
    COUSIN = "cousin"
    SECOND_COUSIN = "second-cousin"
    IN_LAW = "in-law"
    STEP_PARENT = "step-parent"
    STEP_CHILD = "step-child"
    STEP_SIBLING = "step-sibling"


@dataclass(frozen=True)
class InferredRelationship:
    """How ``to_id`` is related to ``from_id``.

    ``path`` lists the member ids walked to reach ``to_id``. ``distance``
    counts generations, negative towards ancestors.
    """

    from_id: str
    to_id: str
    kind: RelationshipKind
    path: tuple[str, ...]
    distance: int
    is_direct: bool
    description: str


def _ancestor(generations: int) -> tuple[RelationshipKind, str]:
    if generations == 1:
        return RelationshipKind.PARENT, "Parent"
    elif generations == 2:
        return RelationshipKind.GRANDPARENT, "Grandparent"
    else:
        return RelationshipKind.GREAT_GRANDPARENT, f"{'Great-' * (generations - 2)}Grandparent"


def _descendant(generations: int) -> tuple[RelationshipKind, str]:
    if generations == 1:
        return RelationshipKind.CHILD, "Child"
    elif generations == 2:
        return RelationshipKind.GRANDCHILD, "Grandchild"
    else:
        return RelationshipKind.GREAT_GRANDCHILD, f"{'Great-' * (generations - 2)}Grandchild"


class RelationshipInferenceEngine:
    """Derives the relationship of every member to every other member."""

    def __init__(self, members: list[FamilyMember], edges: list[FamilyEdge]):
        self.members = {m.id: m for m in members}
        # dicts keep insertion order and act as ordered sets
        self._parents: dict[str, dict[str, None]] = {}
        self._children: dict[str, dict[str, None]] = {}
        self._spouses: dict[str, dict[str, None]] = {}

        for edge in edges:
            a, b = edge.from_id, edge.to_id
            if a == b or a not in self.members or b not in self.members:
                continue
            if edge.type == EdgeType.PARENT:
                self._children.setdefault(a, {})[b] = None
                self._parents.setdefault(b, {})[a] = None
            elif edge.type == EdgeType.SPOUSE:
                self._spouses.setdefault(a, {})[b] = None
                self._spouses.setdefault(b, {})[a] = None

        self._relationships = {member_id: self._infer(member_id) for member_id in self.members}
        logger.debug(
            "relationships_inferred",
            members=len(self.members),
            relationships=sum(len(r) for r in self._relationships.values()),
        )

    @classmethod
    def for_tree(cls, tree: FamilyTree) -> RelationshipInferenceEngine:
        return cls(tree.members, tree.edges)

    def _parents_of(self, member_id: str) -> list[str]:
        return list(self._parents.get(member_id, ()))

    def _children_of(self, member_id: str) -> list[str]:
        return list(self._children.get(member_id, ()))

    def _spouses_of(self, member_id: str) -> list[str]:
        return list(self._spouses.get(member_id, ()))

    def _siblings_of(self, member_id: str) -> list[str]:
        """Full and half siblings, in parent then child order."""
        siblings: dict[str, None] = {}
        for parent_id in self._parents_of(member_id):
            for child_id in self._children_of(parent_id):
                if child_id != member_id:
                    siblings[child_id] = None
        return list(siblings)

    def _is_female(self, member_id: str) -> bool:
        return self.members[member_id].gender == "female"

    def _infer(self, member_id: str) -> dict[str, InferredRelationship]:
        found: dict[str, InferredRelationship] = {}

        def add(
            to_id: str,
            kind: RelationshipKind,
            path: list[str] | tuple[str, ...],
            distance: int,
            description: str,
            is_direct: bool = False,
        ) -> None:
            if to_id not in found:
                found[to_id] = InferredRelationship(
                    member_id, to_id, kind, tuple(path), distance, is_direct, description
                )

        add(member_id, RelationshipKind.SELF, [member_id], 0, "Self", is_direct=True)

        for spouse_id in self._spouses_of(member_id):
            add(spouse_id, RelationshipKind.SPOUSE, [member_id, spouse_id], 0, "Spouse", True)

        lineal = ((-1, self._parents_of, _ancestor), (1, self._children_of, _descendant))
        for sign, step, label in lineal:
            frontier: list[tuple[str, ...]] = [(member_id,)]
            generations = 0
            while frontier:
                generations += 1
                next_frontier = []
                for path in frontier:
                    for relative_id in step(path[-1]):
                        # Already placed, including cycles back to member_id
                        if relative_id in found:
                            continue
                        kind, description = label(generations)
                        add(relative_id, kind, path + (relative_id,), sign * generations,
                            description, is_direct=generations == 1)
                        next_frontier.append(path + (relative_id,))
                frontier = next_frontier

        parents = self._parents_of(member_id)
        parent_set = set(parents)
        for parent_id in parents:
            for sibling_id in self._children_of(parent_id):
                if sibling_id == member_id:
                    continue
                # Full siblings share both of exactly two parents
                full = len(parent_set) == 2 and set(self._parents_of(sibling_id)) == parent_set
                if full:
                    add(sibling_id, RelationshipKind.SIBLING, [member_id, parent_id, sibling_id], 0,
                        "Sibling")
                else:
                    add(sibling_id, RelationshipKind.HALF_SIBLING,
                        [member_id, parent_id, sibling_id], 0, "Half-Sibling")

        step_parents = [
            (parent_id, spouse_id)
            for parent_id in parents
            for spouse_id in self._spouses_of(parent_id)
            if spouse_id not in parent_set and spouse_id != member_id
        ]
        for parent_id, step_parent_id in step_parents:
            add(step_parent_id, RelationshipKind.STEP_PARENT,
                [member_id, parent_id, step_parent_id], -1, "Step-Parent")

        own_children = set(self._children_of(member_id))
        for spouse_id in self._spouses_of(member_id):
            for child_id in self._children_of(spouse_id):
                if child_id not in own_children:
                    add(child_id, RelationshipKind.STEP_CHILD, [member_id, spouse_id, child_id], 1,
                        "Step-Child")

        for parent_id, step_parent_id in step_parents:
            for child_id in self._children_of(step_parent_id):
                if child_id != member_id and not parent_set & set(self._parents_of(child_id)):
                    add(child_id, RelationshipKind.STEP_SIBLING,
                        [member_id, parent_id, step_parent_id, child_id], 0, "Step-Sibling")

        for parent_id in parents:
            for relative_id in self._siblings_of(parent_id):
                if self._is_female(relative_id):
                    kind, description = RelationshipKind.AUNT, "Aunt"
                else:
                    kind, description = RelationshipKind.UNCLE, "Uncle"
                add(relative_id, kind, [member_id, parent_id, relative_id], -1, description)

        for sibling_id in self._siblings_of(member_id):
            for child_id in self._children_of(sibling_id):
                if self._is_female(child_id):
                    kind, description = RelationshipKind.NIECE, "Niece"
                else:
                    kind, description = RelationshipKind.NEPHEW, "Nephew"
                add(child_id, kind, [member_id, sibling_id, child_id], 1, description)

        for parent_id in parents:
            for relative_id in self._siblings_of(parent_id):
                for cousin_id in self._children_of(relative_id):
                    add(cousin_id, RelationshipKind.COUSIN,
                        [member_id, parent_id, relative_id, cousin_id], 0, "Cousin")

        # Second cousins are children of a parent's first cousins
        for parent_id in parents:
            for grandparent_id in self._parents_of(parent_id):
                for great_relative_id in self._siblings_of(grandparent_id):
                    for parent_cousin_id in self._children_of(great_relative_id):
                        for cousin_id in self._children_of(parent_cousin_id):
                            path = [member_id, parent_id, grandparent_id, great_relative_id,
                                    parent_cousin_id, cousin_id]
                            add(cousin_id, RelationshipKind.SECOND_COUSIN, path, 0,
                                "Second Cousin")

        for spouse_id in self._spouses_of(member_id):
            for relative_id in self._parents_of(spouse_id):
                add(relative_id, RelationshipKind.IN_LAW, [member_id, spouse_id, relative_id], -1,
                    "Parent-in-law")
            for relative_id in self._siblings_of(spouse_id):
                add(relative_id, RelationshipKind.IN_LAW, [member_id, spouse_id, relative_id], 0,
                    "Sibling-in-law")
        for sibling_id in self._siblings_of(member_id):
            for relative_id in self._spouses_of(sibling_id):
                add(relative_id, RelationshipKind.IN_LAW, [member_id, sibling_id, relative_id], 0,
                    "Sibling-in-law")
        for child_id in self._children_of(member_id):
            for relative_id in self._spouses_of(child_id):
                add(relative_id, RelationshipKind.IN_LAW, [member_id, child_id, relative_id], 1,
                    "Child-in-law")

        return found

    def relationship(self, from_id: str, to_id: str) -> InferredRelationship | None:
        return self._relationships.get(from_id, {}).get(to_id)

    def relationships_for(self, member_id: str) -> list[InferredRelationship]:
        """Everyone related to ``member_id``, excluding the member itself."""
        return [
            r for r in self._relationships.get(member_id, {}).values()
            if r.kind != RelationshipKind.SELF
        ]

    def relationships_by_kind(
        self, member_id: str, kind: RelationshipKind | str
    ) -> list[InferredRelationship]:
        kind = RelationshipKind(kind)
        return [r for r in self._relationships.get(member_id, {}).values() if r.kind == kind]

    def describe(self, from_id: str, to_id: str) -> str:
        """``"Name (Relationship)"``, or ``"No relation"``."""
        relationship = self.relationship(from_id, to_id)
        if relationship is None:
            return "No relation"
        member = self.members[to_id]
        name = member.full_name or member.first_name or "Unknown"
        return f"{name} ({relationship.description})"

    def export(self) -> dict[str, list[InferredRelationship]]:
        """All relationships per member, self entries included."""
        return {member_id: list(r.values()) for member_id, r in self._relationships.items()}


def infer_relationships(
    members: list[FamilyMember], edges: list[FamilyEdge]
) -> RelationshipInferenceEngine:
    return RelationshipInferenceEngine(members, edges)
