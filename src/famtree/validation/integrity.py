"""Whole-tree integrity report.

A tree is either clean (every edge valid) or needs cleanup. Date errors
and head-of-family warnings are reported alongside but do not change the
status; nothing here repairs the tree.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ..models.tree import FamilyTree
from .dates import validate_dates
from .graph import EdgeValidation, check_head_of_family, find_invalid_edges


class IntegrityStatus(str, Enum):
    CLEAN = "clean"
    NEEDS_CLEANUP = "needs_cleanup"


@dataclass
class InvalidEdge:
    edge_id: str
    from_id: str
    to_id: str
    reason: str
    code: str | None = None


@dataclass
class TreeIntegrityReport:
    status: IntegrityStatus
    invalid_edges: list[InvalidEdge] = field(default_factory=list)
    date_errors: dict[str, str] = field(default_factory=dict)
    head_warnings: list[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return self.status == IntegrityStatus.CLEAN


def _to_invalid(edge_id: str, from_id: str, to_id: str, result: EdgeValidation) -> InvalidEdge:
    return InvalidEdge(
        edge_id=edge_id,
        from_id=from_id,
        to_id=to_id,
        reason=result.error or "invalid edge",
        code=result.code.value if result.code else None,
    )


def check_tree(tree: FamilyTree, now: datetime | None = None) -> TreeIntegrityReport:
    """Run every validator over ``tree`` and collect the findings."""
    invalid = [
        _to_invalid(edge.id, edge.from_id, edge.to_id, result)
        for edge, result in find_invalid_edges(tree.members, tree.edges)
    ]

    date_errors: dict[str, str] = {}
    for member in tree.members:
        result = validate_dates(member.birth_date, member.death_date, now=now)
        if not result.is_valid:
            date_errors[member.id] = result.error or "invalid date"

    return TreeIntegrityReport(
        status=IntegrityStatus.NEEDS_CLEANUP if invalid else IntegrityStatus.CLEAN,
        invalid_edges=invalid,
        date_errors=date_errors,
        head_warnings=check_head_of_family(tree.members),
    )
