"""Pure validation functions for members, edges and dates."""

from .dates import (
    DateValidationResult,
    calculate_age,
    max_date,
    min_date,
    parse_date,
    validate_birth_date,
    validate_dates,
    validate_death_date,
)
from .graph import (
    CleanupResult,
    EdgeError,
    EdgeValidation,
    check_head_of_family,
    cleanup_orphaned_edges,
    find_invalid_edges,
    validate_edge,
)
from .integrity import IntegrityStatus, InvalidEdge, TreeIntegrityReport, check_tree

__all__ = [
    "cleanup_orphaned_edges",
    "validate_edge",
    "find_invalid_edges",
    "check_head_of_family",
    "CleanupResult",
    "EdgeError",
    "EdgeValidation",
    "validate_birth_date",
    "validate_death_date",
    "validate_dates",
    "parse_date",
    "calculate_age",
    "min_date",
    "max_date",
    "DateValidationResult",
    "check_tree",
    "TreeIntegrityReport",
    "IntegrityStatus",
    "InvalidEdge",
]
