"""In-memory edits to a loaded tree aggregate.

Callers load a tree, apply these, then hand the whole aggregate to
``TreeService.save_tree``. Each function validates before it touches the
tree, so a rejected edit leaves the aggregate exactly as it was.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from ..errors import MalformedInput, NotFound, ValidationFailed
from ..logging import get_logger
from ..models.common import utc_now
from ..models.edge import FamilyEdge
from ..models.member import FamilyMember
from ..models.tree import FamilyTree
from ..validation.dates import validate_dates
from ..validation.graph import EdgeValidation, validate_edge

logger = get_logger(__name__)

_IMMUTABLE = {"id", "createdAt", "created_at"}


def aliased(model: type[BaseModel], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Rewrite snake_case field names in ``updates`` to their wire aliases."""
    out: dict[str, Any] = {}
    for key, value in updates.items():
        field = model.model_fields.get(key)
        out[field.alias if field is not None and field.alias else key] = value
    return out


def _check_dates(member: FamilyMember) -> None:
    result = validate_dates(member.birth_date, member.death_date)
    if not result.is_valid:
        raise ValidationFailed(result.error or "Invalid date", code="InvalidDate")


def _edge_failure(result: EdgeValidation) -> ValidationFailed:
    return ValidationFailed(
        result.error or "Invalid edge",
        code=result.code.value if result.code else None,
    )


def _require_member(tree: FamilyTree, member_id: str) -> FamilyMember:
    member = tree.get_member(member_id)
    if member is None:
        raise NotFound("member", member_id)
    return member


def add_member(tree: FamilyTree, member: FamilyMember) -> FamilyMember:
    """Append a member after checking its id is unused and its dates are sane."""
    if tree.get_member(member.id) is not None:
        raise ValidationFailed(f"Member already exists: {member.id}", code="DuplicateMember")
    _check_dates(member)
    tree.members.append(member)
    tree.updated_at = utc_now()
    return member


def update_member(tree: FamilyTree, member_id: str, updates: Mapping[str, Any]) -> FamilyMember:
    """Merge ``updates`` into a member, re-checking dates on the result."""
    current = _require_member(tree, member_id)
    changes = {k: v for k, v in aliased(FamilyMember, updates).items() if k not in _IMMUTABLE}
    data = {**current.model_dump(by_alias=True), **changes, "updatedAt": utc_now()}
    try:
        candidate = FamilyMember.model_validate(data)
    except ValidationError as e:
        raise MalformedInput(f"Invalid member update: {e}") from e
    _check_dates(candidate)

    index = tree.members.index(current)
    tree.members[index] = candidate
    tree.updated_at = utc_now()
    return candidate


def remove_member(tree: FamilyTree, member_id: str) -> list[FamilyEdge]:
    """Remove a member together with every edge that touches it.

    The id is also dropped from subfamily membership and headship.
    Returns the removed edges.
    """
    member = _require_member(tree, member_id)
    tree.members.remove(member)

    removed = [e for e in tree.edges if e.touches(member_id)]
    tree.edges = [e for e in tree.edges if not e.touches(member_id)]

    for subfamily in tree.subfamilies or []:
        if member_id in subfamily.member_ids or subfamily.head_member_id == member_id:
            subfamily.member_ids = [m for m in subfamily.member_ids if m != member_id]
            if subfamily.head_member_id == member_id:
                subfamily.head_member_id = None
            subfamily.updated_at = utc_now()

    tree.updated_at = utc_now()
    logger.info(
        "member_removed",
        tree_id=tree.id,
        member_id=member_id,
        edges_removed=len(removed),
    )
    return removed


def add_edge(tree: FamilyTree, edge: FamilyEdge) -> FamilyEdge:
    """Append an edge if both endpoints exist and differ."""
    if tree.get_edge(edge.id) is not None:
        raise ValidationFailed(f"Edge already exists: {edge.id}", code="DuplicateEdge")
    result = validate_edge(edge, tree.members)
    if not result.valid:
        raise _edge_failure(result)
    tree.edges.append(edge)
    tree.updated_at = utc_now()
    return edge


def update_edge(tree: FamilyTree, edge_id: str, updates: Mapping[str, Any]) -> FamilyEdge:
    current = tree.get_edge(edge_id)
    if current is None:
        raise NotFound("edge", edge_id)

    changes = {k: v for k, v in aliased(FamilyEdge, updates).items() if k != "id"}
    data = current.model_dump(by_alias=True)
    metadata = {**data["metadata"], **changes.pop("metadata", {}), "updatedAt": utc_now()}
    try:
        candidate = FamilyEdge.model_validate({**data, **changes, "metadata": metadata})
    except ValidationError as e:
        raise MalformedInput(f"Invalid edge update: {e}") from e

    result = validate_edge(candidate, tree.members)
    if not result.valid:
        raise _edge_failure(result)

    tree.edges[tree.edges.index(current)] = candidate
    tree.updated_at = utc_now()
    return candidate


def remove_edge(tree: FamilyTree, edge_id: str) -> FamilyEdge:
    edge = tree.get_edge(edge_id)
    if edge is None:
        raise NotFound("edge", edge_id)
    tree.edges.remove(edge)
    tree.updated_at = utc_now()
    return edge


def set_head_of_family(tree: FamilyTree, member_id: str, exclusive: bool = True) -> FamilyMember:
    """Flag a member as head of family.

    With ``exclusive`` every other member loses the flag, keeping a single
    head per tree.
    """
    head = _require_member(tree, member_id)
    now = utc_now()
    for member in tree.members:
        if member is head:
            member.is_head_of_family = True
            member.updated_at = now
        elif exclusive and member.is_head_of_family:
            member.is_head_of_family = False
            member.updated_at = now
    tree.updated_at = now
    return head
