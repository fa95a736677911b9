"""Cross-user access to trees."""

from .access import SharedTreeAccess
from .requests import AccessRequestService
from .service import AccessDecision, SharingService, parse_role

__all__ = [
    "SharingService",
    "AccessDecision",
    "AccessRequestService",
    "SharedTreeAccess",
    "parse_role",
]
