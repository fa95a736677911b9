"""Referential integrity checks over a tree's members and edges.

Pure functions: nothing here touches the store. A tree can be persisted
in a state these checks would flag, so callers run them at every
mutation boundary.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from ..logging import get_logger
from ..models.edge import FamilyEdge
from ..models.member import FamilyMember

logger = get_logger(__name__)


class EdgeError(str, Enum):
    """Why an edge was rejected."""

    MISSING_SOURCE = "MissingSource"
    MISSING_TARGET = "MissingTarget"
    SELF_LOOP = "SelfLoop"


@dataclass
class EdgeValidation:
    valid: bool
    error: str | None = None
    code: EdgeError | None = None


@dataclass
class CleanupResult:
    """Outcome of removing edges whose endpoints no longer exist."""

    cleaned_edges: list[FamilyEdge]
    removed_edges: list[FamilyEdge] = field(default_factory=list)

    @property
    def removed_count(self) -> int:
        return len(self.removed_edges)


def _ids(members: Iterable[FamilyMember]) -> set[str]:
    return {m.id for m in members}


def cleanup_orphaned_edges(
    members: Sequence[FamilyMember], edges: Sequence[FamilyEdge]
) -> CleanupResult:
    """Drop every edge with a missing endpoint, keeping the order of the rest.

    Running this on its own output removes nothing.
    """
    member_ids = _ids(members)
    cleaned: list[FamilyEdge] = []
    removed: list[FamilyEdge] = []

    for edge in edges:
        from_exists = edge.from_id in member_ids
        to_exists = edge.to_id in member_ids
        if from_exists and to_exists:
            cleaned.append(edge)
            continue
        logger.warning(
            "orphaned_edge_removed",
            edge_id=edge.id,
            edge_type=edge.type.value,
            from_id=edge.from_id,
            to_id=edge.to_id,
            from_exists=from_exists,
            to_exists=to_exists,
        )
        removed.append(edge)

    return CleanupResult(cleaned_edges=cleaned, removed_edges=removed)


def validate_edge(edge: FamilyEdge, members: Sequence[FamilyMember]) -> EdgeValidation:
    """Check one edge against the current member set.

    Duplicate edges and cycles are accepted.
    """
    member_ids = _ids(members)

    if edge.from_id not in member_ids:
        return EdgeValidation(
            valid=False,
            error=f"Source member not found: {edge.from_id}",
            code=EdgeError.MISSING_SOURCE,
        )
    if edge.to_id not in member_ids:
        return EdgeValidation(
            valid=False,
            error=f"Target member not found: {edge.to_id}",
            code=EdgeError.MISSING_TARGET,
        )
    if edge.from_id == edge.to_id:
        return EdgeValidation(
            valid=False,
            error="Cannot create relationship to self",
            code=EdgeError.SELF_LOOP,
        )
    return EdgeValidation(valid=True)


def find_invalid_edges(
    members: Sequence[FamilyMember], edges: Sequence[FamilyEdge]
) -> list[tuple[FamilyEdge, EdgeValidation]]:
    """Every edge that fails :func:`validate_edge`, with the reason."""
    invalid = []
    for edge in edges:
        result = validate_edge(edge, members)
        if not result.valid:
            invalid.append((edge, result))
    return invalid


def check_head_of_family(members: Sequence[FamilyMember]) -> list[str]:
    """Warnings about the head-of-family flag. Advisory; never blocks a save."""
    if not members:
        return []
    heads = [m for m in members if m.is_head_of_family]
    if not heads:
        return ["No member is marked as head of family"]
    if len(heads) > 1:
        names = ", ".join(m.full_name or m.id for m in heads)
        return [f"{len(heads)} members are marked as head of family: {names}"]
    return []
