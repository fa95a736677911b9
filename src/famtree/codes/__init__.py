"""Family join codes."""

from .family_code import (
    CODE_ALPHABET,
    CODE_LENGTH,
    format_family_code,
    generate_family_code,
    normalize_family_code,
    validate_family_code,
)
from .registry import FamilyCodeRegistry

__all__ = [
    "generate_family_code",
    "validate_family_code",
    "format_family_code",
    "normalize_family_code",
    "CODE_ALPHABET",
    "CODE_LENGTH",
    "FamilyCodeRegistry",
]
