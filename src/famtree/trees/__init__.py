"""Tree aggregate services."""

from .inference import (
    InferredRelationship,
    RelationshipInferenceEngine,
    RelationshipKind,
    infer_relationships,
)
from .mutations import (
    add_edge,
    add_member,
    remove_edge,
    remove_member,
    set_head_of_family,
    update_edge,
    update_member,
)
from .queries import children_of, members_in_generation, parents_of, siblings_of, spouses_of
from .service import TreeDeletion, TreeService
from .session import HISTORY_LIMIT, EditSession
from .subfamilies import SubfamilyManager

__all__ = [
    "TreeService",
    "TreeDeletion",
    "SubfamilyManager",
    "EditSession",
    "HISTORY_LIMIT",
    "RelationshipInferenceEngine",
    "RelationshipKind",
    "InferredRelationship",
    "infer_relationships",
    "add_member",
    "update_member",
    "remove_member",
    "add_edge",
    "update_edge",
    "remove_edge",
    "set_head_of_family",
    "children_of",
    "parents_of",
    "spouses_of",
    "siblings_of",
    "members_in_generation",
]
