"""Family join-code generation and format checks.

Codes are 8 characters drawn uniformly from ``A-Z0-9``. The generator never
checks uniqueness; that is the registry's job against the store.
"""
from __future__ import annotations

import re
import secrets
import string

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 8

_CODE_PATTERN = re.compile(r"^[A-Z0-9]{8}$")


def generate_family_code() -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def validate_family_code(code: str) -> bool:
    """True only for a raw code: exactly 8 uppercase letters or digits, no dash."""
    return bool(_CODE_PATTERN.match(code or ""))


def format_family_code(code: str) -> str:
    """Display form ``XXXX-XXXX``. Anything that is not 8 characters is returned as is."""
    if len(code) == CODE_LENGTH:
        return f"{code[:4]}-{code[4:]}"
    return code


def normalize_family_code(code: str) -> str:
    """Undo display formatting: strip dashes and whitespace, uppercase."""
    return re.sub(r"[\s-]", "", code or "").upper()
