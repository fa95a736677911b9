"""Pydantic document models."""

from .content import (
    ContentValue,
    ListContent,
    ObjectContent,
    SummaryContent,
    TextContent,
    UnrecognizedContent,
    classify_content,
)
from .dna import PredictedRelative
from .edge import EdgeMetadata, EdgeType, FamilyEdge
from .family_code import FamilyCode
from .member import Contacts, FamilyMember, TimelineEntry, TimelineEntryType
from .sharing import AccessRequest, AccessRole, RequestStatus, ShareGrant, ShareRole
from .tree import (
    MAX_HISTORY,
    FamilyTree,
    Subfamily,
    TreeAnnotation,
    TreeSettings,
    TreeVersion,
    VersionEntry,
)

__all__ = [
    "FamilyMember",
    "Contacts",
    "TimelineEntry",
    "TimelineEntryType",
    "FamilyEdge",
    "EdgeType",
    "EdgeMetadata",
    "FamilyTree",
    "Subfamily",
    "TreeSettings",
    "TreeAnnotation",
    "TreeVersion",
    "VersionEntry",
    "MAX_HISTORY",
    "ShareGrant",
    "ShareRole",
    "AccessRole",
    "AccessRequest",
    "RequestStatus",
    "FamilyCode",
    "PredictedRelative",
    "ContentValue",
    "TextContent",
    "ListContent",
    "SummaryContent",
    "ObjectContent",
    "UnrecognizedContent",
    "classify_content",
]
